"""
Conversation Service - Buyer/seller messaging about a listing

A conversation is keyed by (property, buyer); the seller is always the
property owner. Unread counts are per receiver.
"""
import logging
import uuid
from typing import Optional, List, Dict
from sqlalchemy import select, update, desc, asc, func, or_
from sqlalchemy.exc import IntegrityError
from app.database.connection import AsyncSessionLocal
from app.models.conversation import Conversation, Message
from app.models.property import Property, PropertyImage
from app.services.user_service import get_users_by_ids, user_summary
from app.utils.formatting import isoformat, format_price

logger = logging.getLogger(__name__)


def conversation_to_dict(conversation: Conversation) -> Dict:
    return {
        "id": conversation.id,
        "property_id": conversation.property_id,
        "buyer_id": conversation.buyer_id,
        "seller_id": conversation.seller_id,
        "last_message_at": isoformat(conversation.last_message_at),
        "created_at": isoformat(conversation.created_at),
    }


def message_to_dict(message: Message) -> Dict:
    return {
        "id": message.id,
        "conversation_id": message.conversation_id,
        "sender_id": message.sender_id,
        "receiver_id": message.receiver_id,
        "message_text": message.message_text,
        "message_type": message.message_type,
        "is_read": bool(message.is_read),
        "created_at": isoformat(message.created_at),
    }


async def _property_summaries(session, property_ids: List[int]) -> Dict[int, Dict]:
    if not property_ids:
        return {}

    props = (await session.execute(
        select(Property).where(Property.id.in_(property_ids))
    )).scalars().all()

    images = (await session.execute(
        select(PropertyImage)
        .where(PropertyImage.property_id.in_(property_ids))
        .order_by(desc(PropertyImage.is_primary), asc(PropertyImage.id))
    )).scalars().all()

    primary_urls: Dict[int, str] = {}
    for image in images:
        primary_urls.setdefault(image.property_id, image.image_url)

    return {
        prop.id: {
            "id": prop.id,
            "title": prop.title,
            "price": format_price(prop.price),
            "location": prop.location,
            "primary_image": primary_urls.get(prop.id),
        }
        for prop in props
    }


async def _annotate(session, conversations: List[Conversation], user_id: str) -> List[Dict]:
    """Attach unread count, property summary and participant summaries"""
    if not conversations:
        return []

    ids = [c.id for c in conversations]
    unread_rows = (await session.execute(
        select(Message.conversation_id, func.count(Message.id))
        .where(
            Message.conversation_id.in_(ids),
            Message.receiver_id == user_id,
            Message.is_read.is_(False)
        )
        .group_by(Message.conversation_id)
    )).all()
    unread = {conversation_id: count for conversation_id, count in unread_rows}

    properties = await _property_summaries(session, list({c.property_id for c in conversations}))
    users = await get_users_by_ids(
        [c.buyer_id for c in conversations] + [c.seller_id for c in conversations]
    )

    return [
        {
            **conversation_to_dict(c),
            "unread_count": unread.get(c.id, 0),
            "property": properties.get(c.property_id),
            "buyer": user_summary(users.get(c.buyer_id)),
            "seller": user_summary(users.get(c.seller_id)),
        }
        for c in conversations
    ]


async def get_user_conversations(user_id: str) -> List[Dict]:
    async with AsyncSessionLocal() as session:
        stmt = (
            select(Conversation)
            .where(or_(Conversation.buyer_id == user_id, Conversation.seller_id == user_id))
            # Conversations with no messages yet rank by when they were opened
            .order_by(
                desc(func.coalesce(Conversation.last_message_at, Conversation.created_at)),
                desc(Conversation.created_at),
                desc(Conversation.id)
            )
        )
        conversations = (await session.execute(stmt)).scalars().all()
        return await _annotate(session, list(conversations), user_id)


async def get_conversation(conversation_id: str) -> Optional[Dict]:
    async with AsyncSessionLocal() as session:
        result = await session.execute(select(Conversation).where(Conversation.id == conversation_id))
        conversation = result.scalar_one_or_none()
        return conversation_to_dict(conversation) if conversation else None


def is_participant(conversation: Dict, user_id: str) -> bool:
    return user_id in (conversation["buyer_id"], conversation["seller_id"])


async def get_or_create_conversation(
    property_id: int,
    buyer_id: str,
    message_text: Optional[str] = None,
) -> Optional[Dict]:
    """
    Open (or reuse) the conversation between a buyer and a listing's owner.

    Returns None if the property does not exist. Raises ValueError when the
    buyer owns the property.
    """
    async with AsyncSessionLocal() as session:
        owner_id = (await session.execute(
            select(Property.owner_id).where(Property.id == property_id)
        )).scalar_one_or_none()

        if owner_id is None:
            return None
        if owner_id == buyer_id:
            raise ValueError("Cannot start a conversation about your own property")

        stmt = select(Conversation).where(
            Conversation.property_id == property_id,
            Conversation.buyer_id == buyer_id
        )
        conversation = (await session.execute(stmt)).scalar_one_or_none()

        if conversation is None:
            conversation = Conversation(
                id=str(uuid.uuid4()),
                property_id=property_id,
                buyer_id=buyer_id,
                seller_id=owner_id,
            )
            session.add(conversation)
            try:
                await session.commit()
                logger.info(f"Conversation {conversation.id} opened on property {property_id}")
            except IntegrityError:
                await session.rollback()
                conversation = (await session.execute(stmt)).scalar_one()

        conversation_id = conversation.id

    if message_text:
        await send_message(conversation_id, buyer_id, message_text)

    async with AsyncSessionLocal() as session:
        result = await session.execute(select(Conversation).where(Conversation.id == conversation_id))
        annotated = await _annotate(session, [result.scalar_one()], buyer_id)
        return annotated[0]


async def get_conversation_messages(conversation_id: str) -> List[Dict]:
    """Messages oldest first, each with its sender summary"""
    async with AsyncSessionLocal() as session:
        stmt = (
            select(Message)
            .where(Message.conversation_id == conversation_id)
            .order_by(asc(Message.created_at), asc(Message.id))
        )
        messages = (await session.execute(stmt)).scalars().all()

    senders = await get_users_by_ids(m.sender_id for m in messages)
    return [
        {**message_to_dict(m), "sender": user_summary(senders.get(m.sender_id))}
        for m in messages
    ]


async def send_message(
    conversation_id: str,
    sender_id: str,
    message_text: str,
    message_type: str = "text",
) -> Optional[Dict]:
    """
    Append a message addressed to the other participant.

    Returns None if the conversation does not exist; raises PermissionError
    when the sender is not a participant.
    """
    async with AsyncSessionLocal() as session:
        result = await session.execute(select(Conversation).where(Conversation.id == conversation_id))
        conversation = result.scalar_one_or_none()

        if conversation is None:
            return None

        if sender_id == conversation.buyer_id:
            receiver_id = conversation.seller_id
        elif sender_id == conversation.seller_id:
            receiver_id = conversation.buyer_id
        else:
            raise PermissionError("Not a participant in this conversation")

        message = Message(
            conversation_id=conversation_id,
            sender_id=sender_id,
            receiver_id=receiver_id,
            message_text=message_text,
            message_type=message_type or "text",
            is_read=False,
        )
        session.add(message)
        conversation.last_message_at = func.now()
        await session.commit()
        await session.refresh(message)

        senders = await get_users_by_ids([sender_id])
        return {**message_to_dict(message), "sender": user_summary(senders.get(sender_id))}


async def mark_messages_read(conversation_id: str, user_id: str) -> int:
    """Mark every unread message addressed to user_id; returns how many changed"""
    async with AsyncSessionLocal() as session:
        result = await session.execute(
            update(Message)
            .where(
                Message.conversation_id == conversation_id,
                Message.receiver_id == user_id,
                Message.is_read.is_(False)
            )
            .values(is_read=True)
        )
        await session.commit()
        return result.rowcount or 0
