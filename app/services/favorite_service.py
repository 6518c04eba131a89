"""
Favorite Service - Saved listings, one row per user/property
"""
import logging
from typing import Optional, List, Dict
from sqlalchemy import select, delete, desc
from sqlalchemy.exc import IntegrityError
from app.database.connection import AsyncSessionLocal
from app.models.favorite import Favorite
from app.services.property_service import get_properties_with_stats_by_ids
from app.utils.formatting import isoformat

logger = logging.getLogger(__name__)


def favorite_to_dict(favorite: Favorite) -> Dict:
    return {
        "id": favorite.id,
        "user_id": favorite.user_id,
        "property_id": favorite.property_id,
        "notes": favorite.notes,
        "created_at": isoformat(favorite.created_at),
    }


async def add_to_favorites(user_id: str, property_id: int, notes: Optional[str] = None) -> Dict:
    """
    Save a property for a user.

    Saving an already-saved property replaces its note when one is given and
    otherwise returns the existing favorite unchanged.
    """
    async with AsyncSessionLocal() as session:
        stmt = select(Favorite).where(
            Favorite.user_id == user_id,
            Favorite.property_id == property_id
        )
        favorite = (await session.execute(stmt)).scalar_one_or_none()

        if favorite is None:
            favorite = Favorite(user_id=user_id, property_id=property_id, notes=notes)
            session.add(favorite)
            try:
                await session.commit()
            except IntegrityError:
                await session.rollback()
                favorite = (await session.execute(stmt)).scalar_one()
                if notes is not None:
                    favorite.notes = notes
                    await session.commit()
        elif notes is not None:
            favorite.notes = notes
            await session.commit()

        await session.refresh(favorite)
        return favorite_to_dict(favorite)


async def remove_from_favorites(user_id: str, property_id: int) -> None:
    async with AsyncSessionLocal() as session:
        await session.execute(
            delete(Favorite).where(
                Favorite.user_id == user_id,
                Favorite.property_id == property_id
            )
        )
        await session.commit()


async def get_user_favorite_rows(user_id: str) -> List[Dict]:
    async with AsyncSessionLocal() as session:
        stmt = (
            select(Favorite)
            .where(Favorite.user_id == user_id)
            .order_by(desc(Favorite.created_at), desc(Favorite.id))
        )
        result = await session.execute(stmt)
        return [favorite_to_dict(f) for f in result.scalars().all()]


async def get_user_favorites(user_id: str) -> List[Dict]:
    """Favorites newest first, each with its property annotated like a listing"""
    favorites = await get_user_favorite_rows(user_id)
    properties = await get_properties_with_stats_by_ids(f["property_id"] for f in favorites)

    return [
        {**favorite, "property": properties[favorite["property_id"]]}
        for favorite in favorites
        if favorite["property_id"] in properties
    ]


async def is_property_favorited(user_id: str, property_id: int) -> bool:
    async with AsyncSessionLocal() as session:
        stmt = select(Favorite.id).where(
            Favorite.user_id == user_id,
            Favorite.property_id == property_id
        )
        result = await session.execute(stmt)
        return result.scalar_one_or_none() is not None
