from sqlalchemy import Column, String, Boolean, DateTime, Text, JSON
from sqlalchemy.sql import func
from app.database.connection import Base


class User(Base):
    __tablename__ = "users"

    # Subject id issued by the identity provider
    id = Column(String, primary_key=True)
    email = Column(String, unique=True, nullable=True, index=True)
    display_name = Column(String, nullable=True)  # Stored verbatim from the provider
    first_name = Column(String, nullable=True)
    last_name = Column(String, nullable=True)
    profile_image_url = Column(String, nullable=True)
    phone = Column(String(20), nullable=True)
    bio = Column(Text, nullable=True)
    is_agent = Column(Boolean, default=False, nullable=False)
    roles = Column(JSON, nullable=False, default=lambda: ["user"])
    current_role = Column(String(20), nullable=True, default="user")
    preferences = Column(JSON, nullable=True)
    notification_settings = Column(JSON, nullable=True)
    privacy_settings = Column(JSON, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())
