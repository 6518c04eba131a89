"""
Property Service - Listing queries, detail lookups and listing management

All listing reads go through one aggregate query that annotates each
property with its review statistics, followed by one query that loads the
images of every property on the page.
"""
import asyncio
import logging
from decimal import Decimal
from typing import Optional, List, Dict, Iterable
from sqlalchemy import select, update, delete, desc, asc, func
from app.database.connection import AsyncSessionLocal
from app.models.property import Property, PropertyImage
from app.models.review import Review
from app.models.booking import Booking
from app.models.favorite import Favorite
from app.models.history import ViewingHistory
from app.models.conversation import Conversation, Message
from app.services.property_filters import (
    PropertyFilter,
    OwnerFilter,
    PropertyIdsFilter,
    build_listing_filters,
    compile_filters,
)
from app.utils.formatting import isoformat, format_price

logger = logging.getLogger(__name__)

FEATURED_LIMIT = 6
SEARCH_LIMIT = 20

# Columns a PUT may change; ownership and timestamps are managed here
UPDATABLE_FIELDS = (
    "title", "description", "price", "location", "city", "state", "zip_code",
    "property_type", "bedrooms", "bathrooms", "square_footage", "year_built",
    "parking", "pool", "gym", "pet_friendly", "furnished", "available", "featured",
)
NULLABLE_FIELDS = {"description", "zip_code", "square_footage", "year_built"}


def property_to_dict(prop: Property) -> Dict:
    return {
        "id": prop.id,
        "title": prop.title,
        "description": prop.description,
        "price": format_price(prop.price),
        "location": prop.location,
        "city": prop.city,
        "state": prop.state,
        "zip_code": prop.zip_code,
        "property_type": prop.property_type,
        "bedrooms": prop.bedrooms,
        "bathrooms": prop.bathrooms,
        "square_footage": prop.square_footage,
        "year_built": prop.year_built,
        "parking": bool(prop.parking),
        "pool": bool(prop.pool),
        "gym": bool(prop.gym),
        "pet_friendly": bool(prop.pet_friendly),
        "furnished": bool(prop.furnished),
        "available": bool(prop.available),
        "featured": bool(prop.featured),
        "owner_id": prop.owner_id,
        "created_at": isoformat(prop.created_at),
        "updated_at": isoformat(prop.updated_at),
    }


def image_to_dict(image: PropertyImage) -> Dict:
    return {
        "id": image.id,
        "property_id": image.property_id,
        "image_url": image.image_url,
        "alt_text": image.alt_text,
        "is_primary": bool(image.is_primary),
        "created_at": isoformat(image.created_at),
    }


def select_primary_image(images: List[Dict]) -> Optional[Dict]:
    """First image flagged primary, else the first image, else None"""
    for image in images:
        if image["is_primary"]:
            return image
    return images[0] if images else None


def _image_order():
    return (desc(PropertyImage.is_primary), asc(PropertyImage.id))


async def _load_images(session, property_ids: Iterable[int]) -> Dict[int, List[Dict]]:
    ids = list(property_ids)
    grouped: Dict[int, List[Dict]] = {pid: [] for pid in ids}
    if not ids:
        return grouped

    stmt = (
        select(PropertyImage)
        .where(PropertyImage.property_id.in_(ids))
        .order_by(PropertyImage.property_id, *_image_order())
    )
    result = await session.execute(stmt)
    for image in result.scalars().all():
        grouped[image.property_id].append(image_to_dict(image))
    return grouped


def _stats_statement(filters: List[PropertyFilter], featured_first: bool = False):
    average_rating = func.avg(Review.rating).label("average_rating")
    review_count = func.count(Review.id).label("review_count")

    ordering = [desc(Property.created_at), desc(Property.id)]
    if featured_first:
        ordering.insert(0, desc(Property.featured))

    return (
        select(Property, average_rating, review_count)
        .outerjoin(Review, Review.property_id == Property.id)
        .where(compile_filters(filters))
        .group_by(Property.id)
        .order_by(*ordering)
    )


async def query_properties_with_stats(
    filters: List[PropertyFilter],
    limit: Optional[int] = None,
    offset: Optional[int] = None,
    featured_first: bool = False,
) -> List[Dict]:
    """
    Run the aggregate listing query and attach images.

    Properties without reviews report average_rating 0 and review_count 0.
    """
    async with AsyncSessionLocal() as session:
        stmt = _stats_statement(filters, featured_first=featured_first)
        if limit:
            stmt = stmt.limit(limit)
        if offset:
            stmt = stmt.offset(offset)

        result = await session.execute(stmt)
        rows = result.all()

        images_by_property = await _load_images(session, [row[0].id for row in rows])

        items = []
        for prop, average_rating, review_count in rows:
            images = images_by_property.get(prop.id, [])
            items.append({
                **property_to_dict(prop),
                "images": images,
                "primary_image": select_primary_image(images),
                "average_rating": float(average_rating) if average_rating is not None else 0,
                "review_count": int(review_count or 0),
            })
        return items


async def list_properties(
    location: Optional[str] = None,
    property_type: Optional[str] = None,
    min_price: Optional[Decimal] = None,
    max_price: Optional[Decimal] = None,
    bedrooms: Optional[int] = None,
    bathrooms: Optional[int] = None,
    amenities: Optional[Iterable[str]] = None,
    limit: Optional[int] = None,
    offset: Optional[int] = None,
) -> List[Dict]:
    """Available properties matching every supplied filter, newest first"""
    filters = build_listing_filters(
        location=location,
        property_type=property_type,
        min_price=min_price,
        max_price=max_price,
        bedrooms=bedrooms,
        bathrooms=bathrooms,
        amenities=amenities,
    )
    return await query_properties_with_stats(filters, limit=limit, offset=offset)


async def get_featured_properties(limit: int = FEATURED_LIMIT) -> List[Dict]:
    """Available properties with flagged listings first, then newest"""
    return await query_properties_with_stats(
        build_listing_filters(), limit=limit, featured_first=True
    )


async def search_properties(query: str, limit: int = SEARCH_LIMIT) -> List[Dict]:
    """Free-text search is a location substring match"""
    return await list_properties(location=query, limit=limit)


async def get_user_properties(owner_id: str) -> List[Dict]:
    """All of an owner's listings, including unavailable ones"""
    return await query_properties_with_stats([OwnerFilter(owner_id)])


async def get_properties_with_stats_by_ids(property_ids: Iterable[int]) -> Dict[int, Dict]:
    ids = tuple(set(property_ids))
    if not ids:
        return {}
    items = await query_properties_with_stats([PropertyIdsFilter(ids)])
    return {item["id"]: item for item in items}


async def get_property_images(property_id: int) -> List[Dict]:
    async with AsyncSessionLocal() as session:
        stmt = (
            select(PropertyImage)
            .where(PropertyImage.property_id == property_id)
            .order_by(*_image_order())
        )
        result = await session.execute(stmt)
        return [image_to_dict(image) for image in result.scalars().all()]


async def get_property_row(property_id: int) -> Optional[Dict]:
    async with AsyncSessionLocal() as session:
        result = await session.execute(select(Property).where(Property.id == property_id))
        prop = result.scalar_one_or_none()
        return property_to_dict(prop) if prop else None


async def get_property_owner_id(property_id: int) -> Optional[str]:
    async with AsyncSessionLocal() as session:
        stmt = select(Property.owner_id).where(Property.id == property_id)
        result = await session.execute(stmt)
        return result.scalar_one_or_none()


async def get_property(property_id: int) -> Optional[Dict]:
    """Property with its images, reviews (newest first) and owner"""
    from app.services.review_service import get_property_reviews
    from app.services.user_service import get_user

    prop = await get_property_row(property_id)
    if not prop:
        return None

    images, reviews, owner = await asyncio.gather(
        get_property_images(property_id),
        get_property_reviews(property_id),
        get_user(prop["owner_id"]),
    )

    if owner is None:
        logger.warning(f"Property {property_id} references missing owner {prop['owner_id']}")

    ratings = [review["rating"] for review in reviews]
    return {
        **prop,
        "images": images,
        "reviews": reviews,
        "owner": owner,
        "average_rating": sum(ratings) / len(ratings) if ratings else 0,
        "review_count": len(ratings),
    }


async def create_property(owner_id: str, property_data: Dict) -> Dict:
    """Create a listing owned by the caller"""
    async with AsyncSessionLocal() as session:
        values = {key: property_data[key] for key in UPDATABLE_FIELDS if key in property_data}
        new_property = Property(owner_id=owner_id, **values)

        session.add(new_property)
        await session.commit()
        await session.refresh(new_property)

        logger.info(f"Property {new_property.id} created by {owner_id}")
        return property_to_dict(new_property)


async def update_property(property_id: int, update_data: Dict) -> Optional[Dict]:
    """Partial update: only supplied fields change"""
    async with AsyncSessionLocal() as session:
        result = await session.execute(select(Property).where(Property.id == property_id))
        prop = result.scalar_one_or_none()

        if not prop:
            return None

        for key, value in update_data.items():
            if key not in UPDATABLE_FIELDS:
                continue
            if value is None and key not in NULLABLE_FIELDS:
                continue
            setattr(prop, key, value)

        await session.commit()
        await session.refresh(prop)
        return property_to_dict(prop)


async def delete_property(property_id: int) -> Optional[List[str]]:
    """
    Delete a listing and every row that depends on it in one transaction.

    Returns the deleted image URLs (for blob cleanup), or None if the
    property did not exist.
    """
    async with AsyncSessionLocal() as session:
        async with session.begin():
            exists = (await session.execute(
                select(Property.id).where(Property.id == property_id)
            )).scalar_one_or_none()
            if exists is None:
                return None

            image_urls = (await session.execute(
                select(PropertyImage.image_url).where(PropertyImage.property_id == property_id)
            )).scalars().all()

            conversation_ids = select(Conversation.id).where(
                Conversation.property_id == property_id
            ).scalar_subquery()
            await session.execute(delete(Message).where(Message.conversation_id.in_(conversation_ids)))
            await session.execute(delete(Conversation).where(Conversation.property_id == property_id))

            await session.execute(delete(PropertyImage).where(PropertyImage.property_id == property_id))
            await session.execute(delete(Review).where(Review.property_id == property_id))
            await session.execute(delete(Booking).where(Booking.property_id == property_id))
            await session.execute(delete(Favorite).where(Favorite.property_id == property_id))
            await session.execute(delete(ViewingHistory).where(ViewingHistory.property_id == property_id))
            await session.execute(delete(Property).where(Property.id == property_id))

        logger.info(f"Property {property_id} deleted with {len(image_urls)} images")
        return list(image_urls)


async def create_property_image(property_id: int, image_data: Dict) -> Dict:
    """Attach an image; a new primary image demotes any previous primary"""
    async with AsyncSessionLocal() as session:
        is_primary = bool(image_data.get("is_primary"))
        if is_primary:
            await session.execute(
                update(PropertyImage)
                .where(PropertyImage.property_id == property_id, PropertyImage.is_primary.is_(True))
                .values(is_primary=False)
            )

        image = PropertyImage(
            property_id=property_id,
            image_url=image_data["image_url"],
            alt_text=image_data.get("alt_text"),
            is_primary=is_primary,
        )
        session.add(image)
        await session.commit()
        await session.refresh(image)
        return image_to_dict(image)


async def get_property_image(image_id: int) -> Optional[Dict]:
    async with AsyncSessionLocal() as session:
        result = await session.execute(select(PropertyImage).where(PropertyImage.id == image_id))
        image = result.scalar_one_or_none()
        return image_to_dict(image) if image else None


async def delete_property_image(image_id: int) -> bool:
    async with AsyncSessionLocal() as session:
        result = await session.execute(delete(PropertyImage).where(PropertyImage.id == image_id))
        await session.commit()
        return result.rowcount > 0


async def count_properties() -> int:
    async with AsyncSessionLocal() as session:
        result = await session.execute(select(func.count(Property.id)))
        return result.scalar() or 0
