"""Travelers whose stays are tracked."""
from sqlalchemy import Column, Integer, String, DateTime
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from staytrack.database import Base


class Traveler(Base):
    __tablename__ = "travelers"

    id = Column(Integer, primary_key=True, index=True)
    full_name = Column(String(255), nullable=False)
    nationality = Column(String(2), nullable=True)  # ISO 3166-1 alpha-2

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    stays = relationship("Stay", back_populates="traveler", order_by="Stay.entry_date")
