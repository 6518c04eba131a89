from datetime import datetime, timezone
from sqlalchemy import select, func, case, desc
from app.database.connection import AsyncSessionLocal
from app.models.user import User
from app.models.property import Property
from app.models.review import Review
from app.models.booking import Booking
from app.models.contact_message import ContactMessage
from app.models.conversation import Conversation
from app.config import settings
from app.utils.formatting import isoformat, format_price

RECENT_PROPERTIES_LIMIT = 5


async def get_admin_dashboard_stats() -> dict:
    """Get admin dashboard statistics using database aggregations"""
    async with AsyncSessionLocal() as session:
        user_stats_stmt = select(
            func.count(User.id).label('total'),
            func.sum(case((User.is_agent.is_(True), 1), else_=0)).label('agents')
        )
        user_stats = (await session.execute(user_stats_stmt)).first()

        # Admins are role holders plus whitelisted emails that already signed in
        users = (await session.execute(select(User.email, User.roles))).all()
        admins = sum(
            1 for email, roles in users
            if "admin" in (roles or []) or settings.is_admin_email(email)
        )

        property_stats_stmt = select(
            func.count(Property.id).label('total'),
            func.sum(case((Property.available.is_(True), 1), else_=0)).label('available'),
            func.sum(case((Property.featured.is_(True), 1), else_=0)).label('featured')
        )
        property_stats = (await session.execute(property_stats_stmt)).first()
        total_properties = property_stats.total or 0
        available_properties = property_stats.available or 0

        by_type_stmt = select(Property.property_type, func.count(Property.id)).group_by(Property.property_type)
        properties_by_type = {
            property_type: count
            for property_type, count in (await session.execute(by_type_stmt)).all()
        }

        review_stats_stmt = select(func.count(Review.id), func.avg(Review.rating))
        total_reviews, average_rating = (await session.execute(review_stats_stmt)).first()

        booking_stmt = select(Booking.status, func.count(Booking.id)).group_by(Booking.status)
        bookings_by_status = {
            status: count
            for status, count in (await session.execute(booking_stmt)).all()
        }

        unread_contact_stmt = select(func.count(ContactMessage.id)).where(ContactMessage.status == "unread")
        unread_contact_messages = (await session.execute(unread_contact_stmt)).scalar() or 0

        total_conversations = (await session.execute(select(func.count(Conversation.id)))).scalar() or 0

        recent_stmt = (
            select(Property)
            .order_by(desc(Property.created_at), desc(Property.id))
            .limit(RECENT_PROPERTIES_LIMIT)
        )
        recent = (await session.execute(recent_stmt)).scalars().all()

        return {
            "users": {
                "total_users": user_stats.total or 0,
                "agents": user_stats.agents or 0,
                "admins": admins,
            },
            "properties": {
                "total_properties": total_properties,
                "available_properties": available_properties,
                "unavailable_properties": total_properties - available_properties,
                "featured_properties": property_stats.featured or 0,
                "properties_by_type": properties_by_type,
            },
            "activity": {
                "total_reviews": total_reviews or 0,
                "average_rating": round(float(average_rating), 2) if average_rating is not None else 0,
                "bookings_by_status": bookings_by_status,
                "unread_contact_messages": unread_contact_messages,
                "total_conversations": total_conversations,
            },
            "recent_properties": [
                {
                    "id": prop.id,
                    "title": prop.title,
                    "city": prop.city,
                    "property_type": prop.property_type,
                    "price": format_price(prop.price),
                    "available": bool(prop.available),
                    "created_at": isoformat(prop.created_at),
                }
                for prop in recent
            ],
            "generated_at": datetime.now(timezone.utc).isoformat(),
        }
