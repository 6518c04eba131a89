from pydantic import Field
from typing import Optional
from app.schemas.base import ApiModel
from app.schemas.user import UserSummary


class ConversationCreateRequest(ApiModel):
    property_id: int
    message_text: Optional[str] = Field(None, min_length=1)


class MessageCreateRequest(ApiModel):
    message_text: str = Field(..., min_length=1)
    message_type: str = Field("text", max_length=20)


class ConversationPropertySummary(ApiModel):
    id: int
    title: str
    price: str
    location: str
    primary_image: Optional[str] = None


class ConversationResponse(ApiModel):
    id: str
    property_id: int
    buyer_id: str
    seller_id: str
    last_message_at: str
    created_at: str
    unread_count: int = 0
    property: Optional[ConversationPropertySummary] = None
    buyer: Optional[UserSummary] = None
    seller: Optional[UserSummary] = None


class ChatMessageResponse(ApiModel):
    id: int
    conversation_id: str
    sender_id: str
    receiver_id: str
    message_text: str
    message_type: str
    is_read: bool
    created_at: str
    sender: Optional[UserSummary] = None


class MarkReadResponse(ApiModel):
    updated: int
