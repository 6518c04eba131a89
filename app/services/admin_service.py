"""
Admin Service - Back-office user and listing oversight
"""
from typing import List, Dict
from sqlalchemy import select, func, case, desc
from app.database.connection import AsyncSessionLocal
from app.models.user import User
from app.models.property import Property
from app.services.user_service import user_to_dict


async def get_sellers() -> List[Dict]:
    """Users owning at least one property, with listing counts"""
    async with AsyncSessionLocal() as session:
        stmt = (
            select(
                User,
                func.count(Property.id).label("property_count"),
                func.sum(case((Property.available.is_(True), 1), else_=0)).label("available_property_count"),
            )
            .join(Property, Property.owner_id == User.id)
            .group_by(User.id)
            .order_by(desc("property_count"), User.id)
        )
        result = await session.execute(stmt)

        return [
            {
                **user_to_dict(user),
                "property_count": int(property_count or 0),
                "available_property_count": int(available_count or 0),
            }
            for user, property_count, available_count in result.all()
        ]
