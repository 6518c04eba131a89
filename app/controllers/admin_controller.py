"""
Admin Controller - Back-office endpoints, all restricted to the admin role
"""
import logging
from fastapi import APIRouter, HTTPException, Depends, Query, Response, status
from typing import List, Optional
from app.schemas.admin import (
    AdminRolesUpdateRequest,
    SellerResponse,
    TotalPropertiesResponse,
    AdminDashboardResponse,
)
from app.schemas.base import MessageResponse
from app.schemas.contact_message import (
    ContactMessageResponse,
    ContactMessageStatusRequest,
    ContactMessageReplyRequest,
)
from app.schemas.user import UserResponse
from app.services.admin_service import get_sellers
from app.services.admin_dashboard_service import get_admin_dashboard_stats
from app.services.contact_message_service import (
    get_contact_messages,
    get_contact_message,
    update_contact_message,
    delete_contact_message,
)
from app.services.property_service import count_properties
from app.services.user_service import get_all_users, update_user_roles
from app.utils.dependencies import require_admin
from app.utils.principal import Principal

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/admin", tags=["Admin"])


def _message_not_found() -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_404_NOT_FOUND,
        detail="Message not found"
    )


@router.get("/users", response_model=List[UserResponse])
async def list_users(admin: Principal = Depends(require_admin)):
    users = await get_all_users()
    return [UserResponse(**user) for user in users]


@router.get("/sellers", response_model=List[SellerResponse])
async def list_sellers(admin: Principal = Depends(require_admin)):
    """Users owning at least one property"""
    sellers = await get_sellers()
    return [SellerResponse(**seller) for seller in sellers]


@router.get("/total-properties", response_model=TotalPropertiesResponse)
async def total_properties(admin: Principal = Depends(require_admin)):
    return TotalPropertiesResponse(total=await count_properties())


@router.get("/dashboard", response_model=AdminDashboardResponse)
async def get_admin_dashboard(admin: Principal = Depends(require_admin)):
    """Aggregate counts across users, listings and activity"""
    stats = await get_admin_dashboard_stats()
    return AdminDashboardResponse(**stats)


@router.put("/users/{user_id}/roles", response_model=UserResponse)
async def set_user_roles(
    user_id: str,
    request: AdminRolesUpdateRequest,
    admin: Principal = Depends(require_admin)
):
    try:
        user = await update_user_roles(user_id, roles=request.roles, allow_admin=True)
    except ValueError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e)
        )

    if not user:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="User not found"
        )

    logger.info(f"Admin {admin.id} set roles of {user_id} to {user['roles']}")
    return UserResponse(**user)


@router.get("/contact-messages", response_model=List[ContactMessageResponse])
async def list_contact_messages(
    limit: int = Query(20, ge=1),
    offset: int = Query(0, ge=0),
    admin: Principal = Depends(require_admin)
):
    records = await get_contact_messages(limit, offset)
    return [ContactMessageResponse(**record) for record in records]


@router.get("/contact-messages/{message_id}", response_model=ContactMessageResponse)
async def get_contact_message_endpoint(
    message_id: int,
    admin: Principal = Depends(require_admin)
):
    record = await get_contact_message(message_id)
    if not record:
        raise _message_not_found()
    return ContactMessageResponse(**record)


@router.put("/contact-messages/{message_id}/status", response_model=ContactMessageResponse)
async def update_contact_message_status(
    message_id: int,
    request: ContactMessageStatusRequest,
    admin: Principal = Depends(require_admin)
):
    record = await update_contact_message(message_id, status=request.status)
    if not record:
        raise _message_not_found()
    return ContactMessageResponse(**record)


@router.post("/contact-messages/{message_id}/reply", response_model=MessageResponse)
async def reply_to_contact_message(
    message_id: int,
    request: ContactMessageReplyRequest,
    admin: Principal = Depends(require_admin)
):
    """Store an admin reply and mark the message responded"""
    if not request.reply.strip():
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Reply text is required"
        )

    record = await update_contact_message(message_id, reply=request.reply)
    if not record:
        raise _message_not_found()

    logger.info(f"Admin {admin.id} replied to contact message {message_id}")
    return MessageResponse(message="Reply sent successfully")


@router.delete("/contact-messages/{message_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_contact_message_endpoint(
    message_id: int,
    admin: Principal = Depends(require_admin)
):
    await delete_contact_message(message_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
