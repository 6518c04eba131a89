from fastapi import APIRouter, HTTPException, Depends, status
from app.schemas.user import UserResponse
from app.services.user_service import get_user
from app.utils.dependencies import get_current_principal
from app.utils.principal import Principal

router = APIRouter(prefix="/api/auth", tags=["Authentication"])


@router.get("/user", response_model=UserResponse)
async def get_current_user(principal: Principal = Depends(get_current_principal)):
    """Get the local user row for the verified caller"""
    user = await get_user(principal.id)

    if not user:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="User not found"
        )

    # Whitelisted admins see the role even before it is persisted
    user["roles"] = sorted(set(user["roles"]) | set(principal.roles))
    return UserResponse(**user)
