# Database models
from app.models.user import User
from app.models.property import Property, PropertyImage
from app.models.review import Review
from app.models.booking import Booking
from app.models.favorite import Favorite
from app.models.history import SearchHistory, ViewingHistory
from app.models.conversation import Conversation, Message
from app.models.contact_message import ContactMessage

__all__ = [
    "User",
    "Property",
    "PropertyImage",
    "Review",
    "Booking",
    "Favorite",
    "SearchHistory",
    "ViewingHistory",
    "Conversation",
    "Message",
    "ContactMessage",
]
