"""
User Controller - Profile, settings, roles and the caller's own records
"""
import logging
from fastapi import APIRouter, HTTPException, Depends, Body, status
from typing import Any, Dict, List, Optional
from app.schemas.base import MessageResponse
from app.schemas.user import UserResponse, UserProfileUpdateRequest, RoleUpdateRequest, RoleUpdateResponse
from app.schemas.profile import UserProfileResponse
from app.schemas.property import PropertyWithStatsResponse
from app.schemas.booking import BookingResponse
from app.schemas.review import ReviewResponse
from app.services.user_service import (
    get_user_with_details,
    update_user_profile,
    update_user_settings,
    update_user_roles,
    delete_user_account,
)
from app.services.property_service import get_user_properties
from app.services.booking_service import get_user_bookings
from app.services.review_service import get_user_reviews
from app.services.cloudinary_service import delete_images_by_url
from app.utils.dependencies import get_current_user_id

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/user", tags=["User"])


def _user_not_found() -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_404_NOT_FOUND,
        detail="User not found"
    )


@router.get("/profile", response_model=UserProfileResponse)
async def get_profile(user_id: str = Depends(get_current_user_id)):
    """User row with favorites, histories, listings, reviews and bookings"""
    user = await get_user_with_details(user_id)

    if not user:
        raise _user_not_found()

    return UserProfileResponse(**user)


@router.put("/profile", response_model=UserResponse)
async def update_profile(
    request: UserProfileUpdateRequest,
    user_id: str = Depends(get_current_user_id)
):
    user = await update_user_profile(user_id, request.model_dump(exclude_unset=True))

    if not user:
        raise _user_not_found()

    return UserResponse(**user)


async def _replace_settings(user_id: str, field: str, payload: Optional[Dict[str, Any]]) -> UserResponse:
    user = await update_user_settings(user_id, field, payload)
    if not user:
        raise _user_not_found()
    return UserResponse(**user)


@router.put("/preferences", response_model=UserResponse)
async def update_preferences(
    payload: Dict[str, Any] = Body(...),
    user_id: str = Depends(get_current_user_id)
):
    return await _replace_settings(user_id, "preferences", payload)


@router.put("/notification-settings", response_model=UserResponse)
async def update_notification_settings(
    payload: Dict[str, Any] = Body(...),
    user_id: str = Depends(get_current_user_id)
):
    return await _replace_settings(user_id, "notification_settings", payload)


@router.put("/privacy-settings", response_model=UserResponse)
async def update_privacy_settings(
    payload: Dict[str, Any] = Body(...),
    user_id: str = Depends(get_current_user_id)
):
    return await _replace_settings(user_id, "privacy_settings", payload)


@router.put("/role", response_model=RoleUpdateResponse)
async def update_role(
    request: RoleUpdateRequest,
    user_id: str = Depends(get_current_user_id)
):
    """Switch the active role and/or change self-assignable roles"""
    try:
        user = await update_user_roles(
            user_id,
            current_role=request.current_role,
            roles=request.roles,
        )
    except PermissionError as e:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail=str(e)
        )
    except ValueError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e)
        )

    if not user:
        raise _user_not_found()

    return RoleUpdateResponse(message="Role(s) updated", user=UserResponse(**user))


@router.delete("/account", response_model=MessageResponse)
async def delete_account(user_id: str = Depends(get_current_user_id)):
    image_urls = await delete_user_account(user_id)
    await delete_images_by_url(image_urls)
    return MessageResponse(message="User account and related data deleted.")


@router.get("/properties", response_model=List[PropertyWithStatsResponse])
async def get_my_properties(user_id: str = Depends(get_current_user_id)):
    """All of the caller's listings, available or not"""
    props = await get_user_properties(user_id)
    return [PropertyWithStatsResponse(**prop) for prop in props]


@router.get("/bookings", response_model=List[BookingResponse])
async def get_my_bookings(user_id: str = Depends(get_current_user_id)):
    bookings = await get_user_bookings(user_id)
    return [BookingResponse(**booking) for booking in bookings]


@router.get("/reviews", response_model=List[ReviewResponse])
async def get_my_reviews(user_id: str = Depends(get_current_user_id)):
    reviews = await get_user_reviews(user_id)
    return [ReviewResponse(**review) for review in reviews]
