"""
User Service - Local user records keyed by the identity provider's subject id
"""
import asyncio
import logging
from typing import Optional, List, Dict, Iterable
from sqlalchemy import select, delete, or_
from sqlalchemy.exc import IntegrityError
from app.database.connection import AsyncSessionLocal
from app.models.user import User
from app.models.property import Property, PropertyImage
from app.models.review import Review
from app.models.booking import Booking
from app.models.favorite import Favorite
from app.models.history import SearchHistory, ViewingHistory
from app.models.conversation import Conversation, Message
from app.utils.formatting import isoformat

logger = logging.getLogger(__name__)

SELF_ASSIGNABLE_ROLES = {"user", "buyer", "seller", "agent"}
PROFILE_FIELDS = (
    "display_name", "first_name", "last_name", "profile_image_url",
    "phone", "bio", "is_agent",
)
SETTINGS_FIELDS = ("preferences", "notification_settings", "privacy_settings")


def user_to_dict(user: User) -> Dict:
    return {
        "id": user.id,
        "email": user.email,
        "display_name": user.display_name,
        "first_name": user.first_name,
        "last_name": user.last_name,
        "profile_image_url": user.profile_image_url,
        "phone": user.phone,
        "bio": user.bio,
        "is_agent": bool(user.is_agent),
        "roles": list(user.roles or []),
        "current_role": user.current_role,
        "preferences": user.preferences,
        "notification_settings": user.notification_settings,
        "privacy_settings": user.privacy_settings,
        "created_at": isoformat(user.created_at),
        "updated_at": isoformat(user.updated_at),
    }


def user_summary(user: Optional[User]) -> Optional[Dict]:
    if user is None:
        return None
    return {
        "id": user.id,
        "display_name": user.display_name,
        "first_name": user.first_name,
        "last_name": user.last_name,
        "profile_image_url": user.profile_image_url,
    }


def _apply_provider_profile(user: User, display_name: Optional[str], picture: Optional[str]) -> bool:
    """Copy the provider's name and picture onto the row; True if anything changed"""
    changed = False
    if display_name and user.display_name != display_name:
        user.display_name = display_name
        changed = True
    if picture and user.profile_image_url != picture:
        user.profile_image_url = picture
        changed = True
    return changed


async def upsert_user_from_identity(identity: Dict) -> Dict:
    """
    Create or refresh the local user row for a verified identity.

    The provider's display name is stored verbatim; first/last name are
    profile fields owned by the user and are never derived from it.
    """
    uid = identity["uid"]
    email = (identity.get("email") or "").lower() or None
    display_name = identity.get("name") or None
    picture = identity.get("picture") or None

    async with AsyncSessionLocal() as session:
        stmt = select(User).where(User.id == uid)
        result = await session.execute(stmt)
        user = result.scalar_one_or_none()

        if user:
            changed = False
            if email and user.email != email:
                user.email = email
                changed = True
            if _apply_provider_profile(user, display_name, picture):
                changed = True
            if changed:
                try:
                    await session.commit()
                except IntegrityError:
                    # Email now belongs to another account; keep the old one
                    await session.rollback()
                    logger.warning(f"Email {email} already linked to another user, not updating {uid}")
                    result = await session.execute(select(User).where(User.id == uid))
                    user = result.scalar_one()
                    if _apply_provider_profile(user, display_name, picture):
                        await session.commit()
                        await session.refresh(user)
                else:
                    await session.refresh(user)
            return user_to_dict(user)

        if email:
            taken_stmt = select(User.id).where(User.email == email)
            taken = (await session.execute(taken_stmt)).scalar_one_or_none()
            if taken:
                logger.warning(f"Email {email} already linked to user {taken}, creating {uid} without email")
                email = None

        new_user = User(
            id=uid,
            email=email,
            display_name=display_name,
            profile_image_url=picture,
            roles=["user"],
            current_role="user",
        )
        session.add(new_user)
        try:
            await session.commit()
        except IntegrityError:
            # Concurrent first request for the same subject created the row
            await session.rollback()
            result = await session.execute(select(User).where(User.id == uid))
            return user_to_dict(result.scalar_one())

        await session.refresh(new_user)
        logger.info(f"Created local user {uid}")
        return user_to_dict(new_user)


async def get_user(user_id: str) -> Optional[Dict]:
    """Get user by ID"""
    async with AsyncSessionLocal() as session:
        result = await session.execute(select(User).where(User.id == user_id))
        user = result.scalar_one_or_none()
        return user_to_dict(user) if user else None


async def get_user_by_email(email: str) -> Optional[Dict]:
    async with AsyncSessionLocal() as session:
        result = await session.execute(select(User).where(User.email == email.lower()))
        user = result.scalar_one_or_none()
        return user_to_dict(user) if user else None


async def get_users_by_ids(user_ids: Iterable[str]) -> Dict[str, User]:
    ids = set(user_ids)
    if not ids:
        return {}
    async with AsyncSessionLocal() as session:
        result = await session.execute(select(User).where(User.id.in_(ids)))
        return {user.id: user for user in result.scalars().all()}


async def get_all_users() -> List[Dict]:
    async with AsyncSessionLocal() as session:
        result = await session.execute(select(User).order_by(User.created_at.desc(), User.id))
        return [user_to_dict(user) for user in result.scalars().all()]


async def update_user_profile(user_id: str, update_data: Dict) -> Optional[Dict]:
    """Update editable profile fields; identity fields and roles are ignored"""
    async with AsyncSessionLocal() as session:
        result = await session.execute(select(User).where(User.id == user_id))
        user = result.scalar_one_or_none()

        if not user:
            return None

        for key in PROFILE_FIELDS:
            if key in update_data:
                value = update_data[key]
                if key == "is_agent" and value is None:
                    continue
                setattr(user, key, value)

        await session.commit()
        await session.refresh(user)
        return user_to_dict(user)


async def update_user_settings(user_id: str, field: str, value: Optional[Dict]) -> Optional[Dict]:
    """Replace one of the opaque JSON settings blobs"""
    if field not in SETTINGS_FIELDS:
        raise ValueError(f"Unknown settings field: {field}")

    async with AsyncSessionLocal() as session:
        result = await session.execute(select(User).where(User.id == user_id))
        user = result.scalar_one_or_none()

        if not user:
            return None

        setattr(user, field, value)
        await session.commit()
        await session.refresh(user)
        return user_to_dict(user)


async def update_user_roles(
    user_id: str,
    current_role: Optional[str] = None,
    roles: Optional[List[str]] = None,
    allow_admin: bool = False,
) -> Optional[Dict]:
    """
    Change a user's role set and/or active role.

    Users may only grant themselves the self-assignable roles; the admin role
    is granted through the admin back-office (allow_admin=True).
    """
    async with AsyncSessionLocal() as session:
        result = await session.execute(select(User).where(User.id == user_id))
        user = result.scalar_one_or_none()

        if not user:
            return None

        if roles is not None:
            requested = list(dict.fromkeys(roles))
            if not allow_admin:
                forbidden = [role for role in requested if role not in SELF_ASSIGNABLE_ROLES]
                if forbidden:
                    raise PermissionError(f"Roles cannot be self-assigned: {', '.join(forbidden)}")
                # Keep admin if an administrator granted it earlier
                if "admin" in (user.roles or []):
                    requested.append("admin")
            if not requested:
                raise ValueError("At least one role is required")
            user.roles = requested
            if user.current_role not in requested:
                user.current_role = requested[0]

        if current_role is not None:
            if current_role not in (user.roles or []):
                raise ValueError(f"Role '{current_role}' is not assigned to this user")
            user.current_role = current_role

        await session.commit()
        await session.refresh(user)
        return user_to_dict(user)


async def get_user_with_details(user_id: str) -> Optional[Dict]:
    """User row plus favorites, histories, listings, reviews and bookings"""
    from app.services.favorite_service import get_user_favorite_rows
    from app.services.history_service import get_user_search_history, get_user_viewing_rows
    from app.services.property_service import get_user_properties
    from app.services.review_service import get_user_reviews
    from app.services.booking_service import get_user_bookings

    user = await get_user(user_id)
    if not user:
        return None

    favorites, search_history, viewing_history, properties, reviews, bookings = await asyncio.gather(
        get_user_favorite_rows(user_id),
        get_user_search_history(user_id),
        get_user_viewing_rows(user_id),
        get_user_properties(user_id),
        get_user_reviews(user_id),
        get_user_bookings(user_id),
    )

    return {
        **user,
        "favorites": favorites,
        "search_history": search_history,
        "viewing_history": viewing_history,
        "properties": properties,
        "reviews": reviews,
        "bookings": bookings,
    }


async def delete_user_account(user_id: str) -> List[str]:
    """
    Remove a user and everything that references them in one transaction.

    Returns the image URLs of deleted listings so stored blobs can be cleaned up.
    """
    async with AsyncSessionLocal() as session:
        async with session.begin():
            owned_ids = (await session.execute(
                select(Property.id).where(Property.owner_id == user_id)
            )).scalars().all()

            image_urls = []
            if owned_ids:
                image_urls = (await session.execute(
                    select(PropertyImage.image_url).where(PropertyImage.property_id.in_(owned_ids))
                )).scalars().all()

            conversation_filter = or_(Conversation.buyer_id == user_id, Conversation.seller_id == user_id)
            if owned_ids:
                conversation_filter = or_(conversation_filter, Conversation.property_id.in_(owned_ids))
            conversation_ids = select(Conversation.id).where(conversation_filter).scalar_subquery()

            await session.execute(delete(Message).where(Message.conversation_id.in_(conversation_ids)))
            await session.execute(delete(Conversation).where(conversation_filter))

            await session.execute(delete(Favorite).where(Favorite.user_id == user_id))
            await session.execute(delete(Review).where(Review.user_id == user_id))
            await session.execute(delete(Booking).where(Booking.user_id == user_id))
            await session.execute(delete(SearchHistory).where(SearchHistory.user_id == user_id))
            await session.execute(delete(ViewingHistory).where(ViewingHistory.user_id == user_id))

            if owned_ids:
                await session.execute(delete(PropertyImage).where(PropertyImage.property_id.in_(owned_ids)))
                await session.execute(delete(Review).where(Review.property_id.in_(owned_ids)))
                await session.execute(delete(Booking).where(Booking.property_id.in_(owned_ids)))
                await session.execute(delete(Favorite).where(Favorite.property_id.in_(owned_ids)))
                await session.execute(delete(ViewingHistory).where(ViewingHistory.property_id.in_(owned_ids)))
                await session.execute(delete(Property).where(Property.id.in_(owned_ids)))

            await session.execute(delete(User).where(User.id == user_id))

        logger.info(f"Deleted user {user_id} with {len(owned_ids)} listings")
        return list(image_urls)
