from typing import Optional
from app.schemas.base import ApiModel
from app.schemas.property import PropertyWithStatsResponse


class FavoriteCreateRequest(ApiModel):
    notes: Optional[str] = None


class FavoriteResponse(ApiModel):
    id: int
    user_id: str
    property_id: int
    notes: Optional[str] = None
    created_at: str


class FavoriteWithPropertyResponse(FavoriteResponse):
    property: PropertyWithStatsResponse


class FavoriteCheckResponse(ApiModel):
    is_favorited: bool
