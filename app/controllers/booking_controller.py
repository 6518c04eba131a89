"""
Booking Controller - Viewing requests from buyers, managed by listing owners
"""
from fastapi import APIRouter, HTTPException, Depends, Response, status
from typing import List
from app.controllers.property_controller import ensure_property_owner
from app.schemas.booking import BookingResponse, BookingCreateRequest, BookingStatusUpdateRequest
from app.services.booking_service import (
    create_booking,
    get_property_bookings,
    get_booking,
    update_booking_status,
    delete_booking,
)
from app.services.property_service import get_property_owner_id
from app.utils.dependencies import get_current_user_id

router = APIRouter(prefix="/api", tags=["Bookings"])


async def _get_booking_or_404(booking_id: int) -> dict:
    booking = await get_booking(booking_id)
    if not booking:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Booking not found"
        )
    return booking


@router.post(
    "/properties/{property_id}/bookings",
    response_model=BookingResponse,
    status_code=status.HTTP_201_CREATED
)
async def create_booking_endpoint(
    property_id: int,
    request: BookingCreateRequest,
    user_id: str = Depends(get_current_user_id)
):
    if await get_property_owner_id(property_id) is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Property not found"
        )

    booking = await create_booking(property_id, user_id, request.model_dump())
    return BookingResponse(**booking)


@router.get("/properties/{property_id}/bookings", response_model=List[BookingResponse])
async def list_property_bookings(
    property_id: int,
    user_id: str = Depends(get_current_user_id)
):
    """Inquiries on one of the caller's listings"""
    await ensure_property_owner(property_id, user_id)

    bookings = await get_property_bookings(property_id)
    return [BookingResponse(**booking) for booking in bookings]


@router.put("/bookings/{booking_id}/status", response_model=BookingResponse)
async def update_booking_status_endpoint(
    booking_id: int,
    request: BookingStatusUpdateRequest,
    user_id: str = Depends(get_current_user_id)
):
    """Confirm or cancel an inquiry (listing owner only)"""
    booking = await _get_booking_or_404(booking_id)

    if await get_property_owner_id(booking["property_id"]) != user_id:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Unauthorized"
        )

    try:
        updated = await update_booking_status(booking_id, request.status)
    except ValueError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e)
        )

    if not updated:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Booking not found"
        )

    return BookingResponse(**updated)


@router.delete("/bookings/{booking_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_booking_endpoint(
    booking_id: int,
    user_id: str = Depends(get_current_user_id)
):
    booking = await _get_booking_or_404(booking_id)

    if booking["user_id"] != user_id and await get_property_owner_id(booking["property_id"]) != user_id:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Unauthorized"
        )

    await delete_booking(booking_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
