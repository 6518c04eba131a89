from pydantic import Field
from typing import Optional
from app.schemas.base import ApiModel


class ReviewCreateRequest(ApiModel):
    rating: int = Field(..., ge=1, le=5)
    comment: Optional[str] = None


class ReviewResponse(ApiModel):
    id: int
    property_id: int
    user_id: str
    rating: int
    comment: Optional[str] = None
    created_at: str
    updated_at: str
