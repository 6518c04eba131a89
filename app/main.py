from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.encoders import jsonable_encoder
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.middleware.base import BaseHTTPMiddleware
from contextlib import asynccontextmanager
from sqlalchemy import text
from app.config import settings
from app.database.connection import close_db, engine
from app.controllers.auth_controller import router as auth_router
from app.controllers.user_controller import router as user_router
from app.controllers.property_controller import router as property_router
from app.controllers.property_image_controller import router as property_image_router
from app.controllers.review_controller import router as review_router
from app.controllers.booking_controller import router as booking_router
from app.controllers.favorite_controller import router as favorite_router
from app.controllers.history_controller import router as history_router
from app.controllers.conversation_controller import router as conversation_router
from app.controllers.contact_controller import router as contact_router
from app.controllers.admin_controller import router as admin_router
from app.controllers.upload_controller import router as upload_router
import logging
import time

logging.basicConfig(
    level=settings.LOG_LEVEL.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s"
)
logger = logging.getLogger(__name__)


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Middleware to log all incoming requests"""
    async def dispatch(self, request: Request, call_next):
        start_time = time.time()
        client_ip = request.client.host if request.client else "unknown"

        # Log important headers only; the bearer token is truncated
        headers_to_log = {}
        for header in ["authorization", "content-type", "origin"]:
            if header in request.headers:
                value = request.headers[header]
                if header == "authorization" and len(value) > 20:
                    value = value[:20] + "..."
                headers_to_log[header] = value

        logger.info(f"Request: {request.method} {request.url.path} from {client_ip}")
        if headers_to_log:
            logger.debug(f"Headers: {headers_to_log}")

        response = await call_next(request)

        process_time = time.time() - start_time
        logger.info(f"Response: {response.status_code} for {request.method} {request.url.path} ({process_time:.3f}s)")

        return response


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Test database connection on startup (non-blocking - don't fail startup)
    try:
        async with engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
        logger.info("Database connection successful")
    except Exception as e:
        logger.warning(f"Database connection failed on startup: {str(e)}")
        logger.warning("App will continue, but database-dependent features may not work")

    yield

    # Cleanup on shutdown
    try:
        await close_db()
        logger.info("Database connections closed")
    except Exception as e:
        logger.error(f"Error closing database: {str(e)}")


app = FastAPI(
    title="EstateHub API",
    description="Real-estate marketplace: listings, search, favorites, messaging and reviews",
    version="1.0.0",
    lifespan=lifespan
)

# Add request logging middleware first (runs before CORS)
app.add_middleware(RequestLoggingMiddleware)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origin_list or ["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse(
        status_code=exc.status_code,
        content={"message": exc.detail},
        headers=getattr(exc, "headers", None),
    )


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"message": "Invalid request", "errors": jsonable_encoder(exc.errors())},
    )


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.error(f"Unhandled error on {request.method} {request.url.path}: {str(exc)}", exc_info=exc)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"message": "Internal server error"},
    )


app.include_router(auth_router)
app.include_router(user_router)
# Property routes declare /featured and /search before /{property_id}
app.include_router(property_router)
app.include_router(property_image_router)
app.include_router(review_router)
app.include_router(booking_router)
app.include_router(favorite_router)
app.include_router(history_router)
app.include_router(conversation_router)
app.include_router(contact_router)
app.include_router(admin_router)
app.include_router(upload_router)


@app.get("/")
async def root():
    return {"message": "EstateHub API", "status": "running"}


@app.get("/health")
async def health_check():
    return {"status": "healthy"}
