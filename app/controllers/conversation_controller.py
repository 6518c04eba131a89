"""
Conversation Controller - Buyer/seller messaging about listings
"""
from fastapi import APIRouter, HTTPException, Depends, status
from typing import List
from app.schemas.conversation import (
    ConversationCreateRequest,
    ConversationResponse,
    MessageCreateRequest,
    ChatMessageResponse,
    MarkReadResponse,
)
from app.services.conversation_service import (
    get_user_conversations,
    get_conversation,
    get_or_create_conversation,
    get_conversation_messages,
    send_message,
    mark_messages_read,
    is_participant,
)
from app.utils.dependencies import get_current_user_id

router = APIRouter(prefix="/api/conversations", tags=["Conversations"])


async def _get_participant_conversation(conversation_id: str, user_id: str) -> dict:
    conversation = await get_conversation(conversation_id)

    if not conversation:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Conversation not found"
        )

    if not is_participant(conversation, user_id):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Unauthorized"
        )

    return conversation


@router.get("", response_model=List[ConversationResponse])
async def list_conversations(user_id: str = Depends(get_current_user_id)):
    """Caller's conversations, most recent activity first"""
    conversations = await get_user_conversations(user_id)
    return [ConversationResponse(**c) for c in conversations]


@router.post("", response_model=ConversationResponse, status_code=status.HTTP_201_CREATED)
async def start_conversation(
    request: ConversationCreateRequest,
    user_id: str = Depends(get_current_user_id)
):
    """Open a conversation with a listing's owner, optionally with a first message"""
    try:
        conversation = await get_or_create_conversation(
            request.property_id,
            user_id,
            request.message_text,
        )
    except ValueError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e)
        )

    if not conversation:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Property not found"
        )

    return ConversationResponse(**conversation)


@router.get("/{conversation_id}/messages", response_model=List[ChatMessageResponse])
async def list_messages(
    conversation_id: str,
    user_id: str = Depends(get_current_user_id)
):
    await _get_participant_conversation(conversation_id, user_id)

    messages = await get_conversation_messages(conversation_id)
    return [ChatMessageResponse(**m) for m in messages]


@router.post(
    "/{conversation_id}/messages",
    response_model=ChatMessageResponse,
    status_code=status.HTTP_201_CREATED
)
async def post_message(
    conversation_id: str,
    request: MessageCreateRequest,
    user_id: str = Depends(get_current_user_id)
):
    await _get_participant_conversation(conversation_id, user_id)

    try:
        message = await send_message(
            conversation_id,
            user_id,
            request.message_text,
            request.message_type,
        )
    except PermissionError as e:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail=str(e)
        )

    if not message:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Conversation not found"
        )

    return ChatMessageResponse(**message)


@router.put("/{conversation_id}/messages/read", response_model=MarkReadResponse)
async def mark_read(
    conversation_id: str,
    user_id: str = Depends(get_current_user_id)
):
    """Mark every message addressed to the caller as read"""
    await _get_participant_conversation(conversation_id, user_id)

    updated = await mark_messages_read(conversation_id, user_id)
    return MarkReadResponse(updated=updated)
