from pydantic import Field
from typing import Optional, List, Any, Dict
from app.schemas.base import ApiModel


SELF_ASSIGNABLE_ROLES = ("user", "buyer", "seller", "agent")


class UserResponse(ApiModel):
    id: str
    email: Optional[str] = None
    display_name: Optional[str] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    profile_image_url: Optional[str] = None
    phone: Optional[str] = None
    bio: Optional[str] = None
    is_agent: bool = False
    roles: List[str] = []
    current_role: Optional[str] = None
    preferences: Optional[Dict[str, Any]] = None
    notification_settings: Optional[Dict[str, Any]] = None
    privacy_settings: Optional[Dict[str, Any]] = None
    created_at: str
    updated_at: str


class UserSummary(ApiModel):
    id: str
    display_name: Optional[str] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    profile_image_url: Optional[str] = None


class UserProfileUpdateRequest(ApiModel):
    display_name: Optional[str] = Field(None, max_length=255)
    first_name: Optional[str] = Field(None, max_length=100)
    last_name: Optional[str] = Field(None, max_length=100)
    profile_image_url: Optional[str] = None
    phone: Optional[str] = Field(None, max_length=20)
    bio: Optional[str] = None
    is_agent: Optional[bool] = None


class RoleUpdateRequest(ApiModel):
    current_role: Optional[str] = None
    roles: Optional[List[str]] = None


class RoleUpdateResponse(ApiModel):
    message: str
    user: UserResponse
