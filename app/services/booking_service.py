"""
Booking Service - Viewing requests and inquiries on listings
"""
from typing import Optional, List, Dict
from sqlalchemy import select, desc
from app.database.connection import AsyncSessionLocal
from app.models.booking import Booking, BOOKING_STATUSES
from app.utils.formatting import isoformat


def booking_to_dict(booking: Booking) -> Dict:
    return {
        "id": booking.id,
        "property_id": booking.property_id,
        "user_id": booking.user_id,
        "name": booking.name,
        "email": booking.email,
        "phone": booking.phone,
        "message": booking.message,
        "visit_date": booking.visit_date.isoformat() if booking.visit_date else None,
        "status": booking.status,
        "created_at": isoformat(booking.created_at),
        "updated_at": isoformat(booking.updated_at),
    }


async def create_booking(property_id: int, user_id: str, booking_data: Dict) -> Dict:
    async with AsyncSessionLocal() as session:
        booking = Booking(
            property_id=property_id,
            user_id=user_id,
            name=booking_data["name"],
            email=booking_data["email"],
            phone=booking_data.get("phone"),
            message=booking_data.get("message"),
            visit_date=booking_data.get("visit_date"),
            status="pending",
        )
        session.add(booking)
        await session.commit()
        await session.refresh(booking)
        return booking_to_dict(booking)


async def get_user_bookings(user_id: str) -> List[Dict]:
    async with AsyncSessionLocal() as session:
        stmt = (
            select(Booking)
            .where(Booking.user_id == user_id)
            .order_by(desc(Booking.created_at), desc(Booking.id))
        )
        result = await session.execute(stmt)
        return [booking_to_dict(b) for b in result.scalars().all()]


async def get_property_bookings(property_id: int) -> List[Dict]:
    async with AsyncSessionLocal() as session:
        stmt = (
            select(Booking)
            .where(Booking.property_id == property_id)
            .order_by(desc(Booking.created_at), desc(Booking.id))
        )
        result = await session.execute(stmt)
        return [booking_to_dict(b) for b in result.scalars().all()]


async def get_booking(booking_id: int) -> Optional[Dict]:
    async with AsyncSessionLocal() as session:
        result = await session.execute(select(Booking).where(Booking.id == booking_id))
        booking = result.scalar_one_or_none()
        return booking_to_dict(booking) if booking else None


async def update_booking_status(booking_id: int, status: str) -> Optional[Dict]:
    if status not in BOOKING_STATUSES:
        raise ValueError(f"Invalid status: {status}")

    async with AsyncSessionLocal() as session:
        result = await session.execute(select(Booking).where(Booking.id == booking_id))
        booking = result.scalar_one_or_none()

        if not booking:
            return None

        booking.status = status
        await session.commit()
        await session.refresh(booking)
        return booking_to_dict(booking)


async def delete_booking(booking_id: int) -> bool:
    async with AsyncSessionLocal() as session:
        result = await session.execute(select(Booking).where(Booking.id == booking_id))
        booking = result.scalar_one_or_none()

        if not booking:
            return False

        await session.delete(booking)
        await session.commit()
        return True
