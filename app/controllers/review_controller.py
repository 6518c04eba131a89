from fastapi import APIRouter, HTTPException, Depends, Response, status
from typing import List
from app.schemas.review import ReviewResponse, ReviewCreateRequest
from app.services.review_service import create_review, get_property_reviews, get_review, delete_review
from app.services.property_service import get_property_owner_id
from app.utils.dependencies import get_current_user_id

router = APIRouter(prefix="/api", tags=["Reviews"])


@router.post(
    "/properties/{property_id}/reviews",
    response_model=ReviewResponse,
    status_code=status.HTTP_201_CREATED
)
async def create_review_endpoint(
    property_id: int,
    request: ReviewCreateRequest,
    user_id: str = Depends(get_current_user_id)
):
    if await get_property_owner_id(property_id) is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Property not found"
        )

    try:
        review = await create_review(property_id, user_id, request.rating, request.comment)
    except ValueError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e)
        )

    return ReviewResponse(**review)


@router.get("/properties/{property_id}/reviews", response_model=List[ReviewResponse])
async def list_property_reviews(property_id: int):
    """Reviews of a property, newest first"""
    reviews = await get_property_reviews(property_id)
    return [ReviewResponse(**review) for review in reviews]


@router.delete("/reviews/{review_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_review_endpoint(
    review_id: int,
    user_id: str = Depends(get_current_user_id)
):
    review = await get_review(review_id)

    if not review:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Review not found"
        )

    if review["user_id"] != user_id:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Unauthorized"
        )

    await delete_review(review_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
