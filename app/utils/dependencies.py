import logging
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from typing import Optional
from app.services.firebase_auth_service import verify_id_token
from app.services.user_service import upsert_user_from_identity
from app.config import settings
from app.utils.principal import Principal

logger = logging.getLogger(__name__)

# auto_error=False so a missing header yields 401 (HTTPBearer alone answers 403)
security = HTTPBearer(auto_error=False)


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


async def get_current_principal(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security)
) -> Principal:
    """Verify the bearer token with the identity provider and sync the local user row"""
    if credentials is None or credentials.scheme.lower() != "bearer" or not credentials.credentials:
        raise _unauthorized("No token provided")

    try:
        identity = await verify_id_token(credentials.credentials)
    except ValueError as e:
        logger.warning(f"Token verification failed: {str(e)}")
        raise _unauthorized("Invalid token")

    user = await upsert_user_from_identity(identity)

    roles = set(user.get("roles") or [])
    if settings.is_admin_email(identity.get("email")):
        roles.add("admin")

    return Principal(
        id=identity["uid"],
        email=identity.get("email", ""),
        display_name=identity.get("name"),
        photo_url=identity.get("picture"),
        roles=tuple(sorted(roles)),
    )


async def get_current_user_id(principal: Principal = Depends(get_current_principal)) -> str:
    return principal.id


async def require_admin(principal: Principal = Depends(get_current_principal)) -> Principal:
    """Allow only principals holding the admin role"""
    if not principal.is_admin:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Admin access required",
        )
    return principal
