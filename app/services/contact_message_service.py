from typing import Optional, List, Dict
from sqlalchemy import select, desc
from app.database.connection import AsyncSessionLocal
from app.models.contact_message import ContactMessage, CONTACT_MESSAGE_STATUSES
from app.utils.formatting import isoformat


def contact_message_to_dict(record: ContactMessage) -> Dict:
    return {
        "id": record.id,
        "name": record.name,
        "email": record.email,
        "subject": record.subject,
        "message": record.message,
        "status": record.status,
        "reply": record.reply,
        "created_at": isoformat(record.created_at),
        "updated_at": isoformat(record.updated_at),
    }


async def create_contact_message(data: Dict) -> Dict:
    async with AsyncSessionLocal() as session:
        record = ContactMessage(
            name=data["name"],
            email=data["email"],
            subject=data.get("subject"),
            message=data["message"],
            status="unread",
        )
        session.add(record)
        await session.commit()
        await session.refresh(record)
        return contact_message_to_dict(record)


async def get_contact_messages(limit: Optional[int] = None, offset: Optional[int] = None) -> List[Dict]:
    async with AsyncSessionLocal() as session:
        stmt = select(ContactMessage).order_by(desc(ContactMessage.created_at), desc(ContactMessage.id))
        if limit:
            stmt = stmt.limit(limit)
        if offset:
            stmt = stmt.offset(offset)
        result = await session.execute(stmt)
        return [contact_message_to_dict(r) for r in result.scalars().all()]


async def get_contact_message(message_id: int) -> Optional[Dict]:
    async with AsyncSessionLocal() as session:
        result = await session.execute(select(ContactMessage).where(ContactMessage.id == message_id))
        record = result.scalar_one_or_none()
        return contact_message_to_dict(record) if record else None


async def update_contact_message(message_id: int, status: Optional[str] = None, reply: Optional[str] = None) -> Optional[Dict]:
    """Set status and/or store a reply; a reply always marks the message responded"""
    if status is not None and status not in CONTACT_MESSAGE_STATUSES:
        raise ValueError(f"Invalid status: {status}")

    async with AsyncSessionLocal() as session:
        result = await session.execute(select(ContactMessage).where(ContactMessage.id == message_id))
        record = result.scalar_one_or_none()

        if not record:
            return None

        if reply is not None:
            record.reply = reply
            record.status = "responded"
        elif status is not None:
            record.status = status

        await session.commit()
        await session.refresh(record)
        return contact_message_to_dict(record)


async def delete_contact_message(message_id: int) -> bool:
    async with AsyncSessionLocal() as session:
        result = await session.execute(select(ContactMessage).where(ContactMessage.id == message_id))
        record = result.scalar_one_or_none()

        if not record:
            return False

        await session.delete(record)
        await session.commit()
        return True
