from pydantic import Field
from typing import Dict, List, Optional
from app.schemas.base import ApiModel
from app.schemas.user import UserResponse


class AdminRolesUpdateRequest(ApiModel):
    roles: List[str] = Field(..., min_length=1)


class SellerResponse(UserResponse):
    property_count: int = 0
    available_property_count: int = 0


class TotalPropertiesResponse(ApiModel):
    total: int


class UserStats(ApiModel):
    total_users: int
    agents: int
    admins: int


class PropertyStats(ApiModel):
    total_properties: int
    available_properties: int
    unavailable_properties: int
    featured_properties: int
    properties_by_type: Dict[str, int]


class RecentProperty(ApiModel):
    id: int
    title: str
    city: str
    property_type: str
    price: str
    available: bool
    created_at: str


class ActivityStats(ApiModel):
    total_reviews: int
    average_rating: float
    bookings_by_status: Dict[str, int]
    unread_contact_messages: int
    total_conversations: int


class AdminDashboardResponse(ApiModel):
    users: UserStats
    properties: PropertyStats
    activity: ActivityStats
    recent_properties: List[RecentProperty]
    generated_at: Optional[str] = None
