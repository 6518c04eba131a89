from pydantic import EmailStr, Field
from typing import Optional, Literal
from app.schemas.base import ApiModel


ContactMessageStatus = Literal["unread", "read", "responded"]


class ContactMessageCreateRequest(ApiModel):
    name: str = Field(..., min_length=1, max_length=100)
    email: EmailStr
    subject: Optional[str] = Field(None, max_length=255)
    message: str = Field(..., min_length=1)


class ContactMessageStatusRequest(ApiModel):
    status: ContactMessageStatus


class ContactMessageReplyRequest(ApiModel):
    reply: str


class ContactMessageResponse(ApiModel):
    id: int
    name: str
    email: str
    subject: Optional[str] = None
    message: str
    status: str
    reply: Optional[str] = None
    created_at: str
    updated_at: str
