"""
History Service - Per-user search log and recently viewed listings
"""
from typing import Optional, List, Dict
from sqlalchemy import select, delete, desc, func
from sqlalchemy.exc import IntegrityError
from app.database.connection import AsyncSessionLocal
from app.models.history import SearchHistory, ViewingHistory
from app.services.property_service import get_properties_with_stats_by_ids
from app.utils.formatting import isoformat

DEFAULT_HISTORY_LIMIT = 20


def search_to_dict(record: SearchHistory) -> Dict:
    return {
        "id": record.id,
        "user_id": record.user_id,
        "search_query": record.search_query,
        "filters": record.filters,
        "created_at": isoformat(record.created_at),
    }


def viewing_to_dict(record: ViewingHistory) -> Dict:
    return {
        "id": record.id,
        "user_id": record.user_id,
        "property_id": record.property_id,
        "viewed_at": isoformat(record.viewed_at),
    }


async def add_search_history(user_id: str, search_query: str, filters: Optional[Dict] = None) -> Dict:
    async with AsyncSessionLocal() as session:
        record = SearchHistory(user_id=user_id, search_query=search_query, filters=filters)
        session.add(record)
        await session.commit()
        await session.refresh(record)
        return search_to_dict(record)


async def get_user_search_history(user_id: str, limit: int = DEFAULT_HISTORY_LIMIT) -> List[Dict]:
    async with AsyncSessionLocal() as session:
        stmt = (
            select(SearchHistory)
            .where(SearchHistory.user_id == user_id)
            .order_by(desc(SearchHistory.created_at), desc(SearchHistory.id))
            .limit(limit)
        )
        result = await session.execute(stmt)
        return [search_to_dict(r) for r in result.scalars().all()]


async def clear_search_history(user_id: str) -> None:
    async with AsyncSessionLocal() as session:
        await session.execute(delete(SearchHistory).where(SearchHistory.user_id == user_id))
        await session.commit()


async def add_viewing_history(user_id: str, property_id: int) -> Dict:
    """Record a view; viewing the same property again refreshes viewed_at"""
    async with AsyncSessionLocal() as session:
        stmt = select(ViewingHistory).where(
            ViewingHistory.user_id == user_id,
            ViewingHistory.property_id == property_id
        )
        record = (await session.execute(stmt)).scalar_one_or_none()

        if record is None:
            record = ViewingHistory(user_id=user_id, property_id=property_id)
            session.add(record)
            try:
                await session.commit()
            except IntegrityError:
                await session.rollback()
                record = (await session.execute(stmt)).scalar_one()
                record.viewed_at = func.now()
                await session.commit()
        else:
            record.viewed_at = func.now()
            await session.commit()

        await session.refresh(record)
        return viewing_to_dict(record)


async def get_user_viewing_rows(user_id: str, limit: int = DEFAULT_HISTORY_LIMIT) -> List[Dict]:
    async with AsyncSessionLocal() as session:
        stmt = (
            select(ViewingHistory)
            .where(ViewingHistory.user_id == user_id)
            .order_by(desc(ViewingHistory.viewed_at), desc(ViewingHistory.id))
            .limit(limit)
        )
        result = await session.execute(stmt)
        return [viewing_to_dict(r) for r in result.scalars().all()]


async def get_user_viewing_history(user_id: str, limit: int = DEFAULT_HISTORY_LIMIT) -> List[Dict]:
    records = await get_user_viewing_rows(user_id, limit)
    properties = await get_properties_with_stats_by_ids(r["property_id"] for r in records)

    return [
        {**record, "property": properties[record["property_id"]]}
        for record in records
        if record["property_id"] in properties
    ]


async def clear_viewing_history(user_id: str) -> None:
    async with AsyncSessionLocal() as session:
        await session.execute(delete(ViewingHistory).where(ViewingHistory.user_id == user_id))
        await session.commit()
