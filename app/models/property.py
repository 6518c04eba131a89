from sqlalchemy import Column, String, Integer, Numeric, Boolean, DateTime, Text, ForeignKey, Index
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
from app.database.connection import Base


PROPERTY_TYPES = ("apartment", "house", "condo", "townhouse")


class Property(Base):
    __tablename__ = "properties"

    id = Column(Integer, primary_key=True, autoincrement=True)
    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    price = Column(Numeric(12, 2), nullable=False)
    location = Column(String(255), nullable=False)  # Street address
    city = Column(String(100), nullable=False, index=True)
    state = Column(String(100), nullable=False)
    zip_code = Column(String(10), nullable=True)
    property_type = Column(String(50), nullable=False, index=True)
    bedrooms = Column(Integer, nullable=False)
    bathrooms = Column(Integer, nullable=False)
    square_footage = Column(Integer, nullable=True)
    year_built = Column(Integer, nullable=True)
    parking = Column(Boolean, default=False, nullable=False)
    pool = Column(Boolean, default=False, nullable=False)
    gym = Column(Boolean, default=False, nullable=False)
    pet_friendly = Column(Boolean, default=False, nullable=False)
    furnished = Column(Boolean, default=False, nullable=False)
    available = Column(Boolean, default=True, nullable=False, index=True)
    featured = Column(Boolean, default=False, nullable=False)
    owner_id = Column(String, ForeignKey("users.id"), nullable=False, index=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    owner = relationship("User", backref="properties")

    # Listing queries filter on availability and sort newest first
    __table_args__ = (
        Index('idx_property_available_created', 'available', 'created_at'),
        Index('idx_property_owner_created', 'owner_id', 'created_at'),
    )


class PropertyImage(Base):
    __tablename__ = "property_images"

    id = Column(Integer, primary_key=True, autoincrement=True)
    property_id = Column(Integer, ForeignKey("properties.id"), nullable=False, index=True)
    image_url = Column(String(500), nullable=False)
    alt_text = Column(String(255), nullable=True)
    is_primary = Column(Boolean, default=False, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    property = relationship("Property", backref="images")
