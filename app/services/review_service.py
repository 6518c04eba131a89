from typing import Optional, List, Dict
from sqlalchemy import select, desc
from app.database.connection import AsyncSessionLocal
from app.models.review import Review
from app.utils.formatting import isoformat


def review_to_dict(review: Review) -> Dict:
    return {
        "id": review.id,
        "property_id": review.property_id,
        "user_id": review.user_id,
        "rating": review.rating,
        "comment": review.comment,
        "created_at": isoformat(review.created_at),
        "updated_at": isoformat(review.updated_at),
    }


async def create_review(property_id: int, user_id: str, rating: int, comment: Optional[str] = None) -> Dict:
    """Reviews are append-only; a user may review the same property more than once"""
    if not 1 <= rating <= 5:
        raise ValueError("Rating must be between 1 and 5")

    async with AsyncSessionLocal() as session:
        review = Review(
            property_id=property_id,
            user_id=user_id,
            rating=rating,
            comment=comment,
        )
        session.add(review)
        await session.commit()
        await session.refresh(review)
        return review_to_dict(review)


async def get_property_reviews(property_id: int) -> List[Dict]:
    async with AsyncSessionLocal() as session:
        stmt = (
            select(Review)
            .where(Review.property_id == property_id)
            .order_by(desc(Review.created_at), desc(Review.id))
        )
        result = await session.execute(stmt)
        return [review_to_dict(review) for review in result.scalars().all()]


async def get_user_reviews(user_id: str) -> List[Dict]:
    async with AsyncSessionLocal() as session:
        stmt = (
            select(Review)
            .where(Review.user_id == user_id)
            .order_by(desc(Review.created_at), desc(Review.id))
        )
        result = await session.execute(stmt)
        return [review_to_dict(review) for review in result.scalars().all()]


async def get_review(review_id: int) -> Optional[Dict]:
    async with AsyncSessionLocal() as session:
        result = await session.execute(select(Review).where(Review.id == review_id))
        review = result.scalar_one_or_none()
        return review_to_dict(review) if review else None


async def delete_review(review_id: int) -> bool:
    async with AsyncSessionLocal() as session:
        result = await session.execute(select(Review).where(Review.id == review_id))
        review = result.scalar_one_or_none()

        if not review:
            return False

        await session.delete(review)
        await session.commit()
        return True
