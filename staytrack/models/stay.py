"""Stay records: created on entry, closed by appending an exit date. Never deleted."""
from sqlalchemy import Column, Integer, String, Date, ForeignKey, DateTime, Text
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from staytrack.database import Base
from staytrack.domain import StayRecord


class Stay(Base):
    __tablename__ = "stays"

    id = Column(Integer, primary_key=True, index=True)
    traveler_id = Column(Integer, ForeignKey("travelers.id"), nullable=False, index=True)
    jurisdiction_code = Column(String(20), nullable=False, index=True)

    entry_date = Column(Date, nullable=False)
    exit_date = Column(Date, nullable=True)  # null while the traveler is still there

    purpose = Column(String(50), nullable=True)
    notes = Column(Text, nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    traveler = relationship("Traveler", back_populates="stays")

    def to_record(self) -> StayRecord:
        return StayRecord(
            id=str(self.id),
            jurisdiction_code=self.jurisdiction_code,
            entry_date=self.entry_date,
            exit_date=self.exit_date,
            purpose=self.purpose,
            notes=self.notes,
        )
