from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, async_sessionmaker
from sqlalchemy.orm import declarative_base
from sqlalchemy.engine.url import make_url
from app.config import settings


def get_database_url():
    """Parse database URL and convert plain postgres DSNs to asyncpg format"""
    original_url = make_url(settings.DATABASE_URL)

    # Non-postgres URLs already name their async driver (e.g. sqlite+aiosqlite)
    if not original_url.drivername.startswith("postgresql"):
        return settings.DATABASE_URL

    port = original_url.port or 5432

    # Build the connection string manually to preserve special characters in password
    database_url = (
        f"postgresql+asyncpg://{original_url.username}:{original_url.password}"
        f"@{original_url.host}:{port}/{original_url.database}"
    )

    # sslmode/channel_binding are libpq options; asyncpg gets ssl via connect_args
    query_params = {}
    if original_url.query:
        for key, value in original_url.query.items():
            if key not in ['sslmode', 'channel_binding']:
                query_params[key] = value

    if query_params:
        query_string = '&'.join([f"{k}={v}" for k, v in query_params.items()])
        database_url += f"?{query_string}"

    return database_url


def get_connect_args():
    """Get connection arguments for the driver, especially SSL for asyncpg"""
    url = make_url(settings.DATABASE_URL)
    connect_args = {}

    if url.drivername.startswith("sqlite"):
        connect_args["check_same_thread"] = False
    elif url.query and url.query.get('sslmode') == 'require':
        connect_args['ssl'] = 'require'

    return connect_args


def get_engine_options():
    url = make_url(settings.DATABASE_URL)
    if url.drivername.startswith("sqlite"):
        return {}
    return {
        "pool_pre_ping": True,  # Verify connections before using them
        "pool_recycle": 3600,
    }


engine = create_async_engine(
    get_database_url(),
    echo=settings.DEBUG,
    connect_args=get_connect_args(),
    **get_engine_options()
)

AsyncSessionLocal = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
    autoflush=False
)

Base = declarative_base()


async def close_db():
    """Close database connections"""
    await engine.dispose()
