from datetime import datetime
from pydantic import EmailStr, Field
from typing import Optional, Literal
from app.schemas.base import ApiModel


BookingStatus = Literal["pending", "confirmed", "cancelled"]


class BookingCreateRequest(ApiModel):
    name: str = Field(..., min_length=1, max_length=100)
    email: EmailStr
    phone: Optional[str] = Field(None, max_length=20)
    message: Optional[str] = None
    visit_date: Optional[datetime] = None


class BookingStatusUpdateRequest(ApiModel):
    status: BookingStatus


class BookingResponse(ApiModel):
    id: int
    property_id: int
    user_id: str
    name: str
    email: str
    phone: Optional[str] = None
    message: Optional[str] = None
    visit_date: Optional[str] = None
    status: str
    created_at: str
    updated_at: str
