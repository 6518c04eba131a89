from pydantic import Field
from typing import Optional, Any, Dict
from app.schemas.base import ApiModel
from app.schemas.property import PropertyWithStatsResponse


class SearchHistoryCreateRequest(ApiModel):
    search_query: str = Field(..., min_length=1)
    filters: Optional[Dict[str, Any]] = None


class SearchHistoryResponse(ApiModel):
    id: int
    user_id: str
    search_query: str
    filters: Optional[Dict[str, Any]] = None
    created_at: str


class ViewingHistoryResponse(ApiModel):
    id: int
    user_id: str
    property_id: int
    viewed_at: str


class ViewingHistoryWithPropertyResponse(ViewingHistoryResponse):
    property: PropertyWithStatsResponse
