from sqlalchemy import Column, String, Integer, DateTime, Text, ForeignKey, UniqueConstraint, JSON
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
from app.database.connection import Base


class SearchHistory(Base):
    __tablename__ = "search_history"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(String, ForeignKey("users.id"), nullable=False, index=True)
    search_query = Column(Text, nullable=False)
    filters = Column(JSON, nullable=True)  # Snapshot of the filters used
    created_at = Column(DateTime(timezone=True), server_default=func.now())


class ViewingHistory(Base):
    __tablename__ = "viewing_history"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(String, ForeignKey("users.id"), nullable=False, index=True)
    property_id = Column(Integer, ForeignKey("properties.id"), nullable=False)
    viewed_at = Column(DateTime(timezone=True), server_default=func.now())

    property = relationship("Property")

    # One row per user/property; a repeat view refreshes viewed_at
    __table_args__ = (
        UniqueConstraint('user_id', 'property_id', name='uq_viewing_user_property'),
    )
