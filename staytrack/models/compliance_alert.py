"""Warning-level transitions recorded by the daily compliance check. Append-only."""
from sqlalchemy import Column, Integer, String, Date, DateTime, ForeignKey, Enum as SQLEnum
from sqlalchemy.sql import func
from staytrack.database import Base
from staytrack.domain import WarningLevel


class ComplianceAlert(Base):
    __tablename__ = "compliance_alerts"

    id = Column(Integer, primary_key=True, index=True)
    traveler_id = Column(Integer, ForeignKey("travelers.id"), nullable=False, index=True)
    jurisdiction_code = Column(String(20), nullable=False, index=True)

    warning_level = Column(SQLEnum(WarningLevel), nullable=False)
    previous_level = Column(SQLEnum(WarningLevel), nullable=True)  # null for the first check
    days_used = Column(Integer, nullable=False)
    days_remaining = Column(Integer, nullable=False)
    reference_date = Column(Date, nullable=False)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
