"""Stored stay policies. Rows without nationality are base policies; rows with one override them."""
from sqlalchemy import Column, Integer, String, Date, JSON, Enum as SQLEnum
from staytrack.database import Base
from staytrack.domain import CalculationMethod, PolicyType


class PolicyRule(Base):
    __tablename__ = "policy_rules"

    id = Column(Integer, primary_key=True, index=True)
    jurisdiction_code = Column(String(20), nullable=False, index=True)
    nationality = Column(String(2), nullable=True, index=True)

    jurisdiction_name = Column(String(100), nullable=False)
    policy_type = Column(SQLEnum(PolicyType), nullable=False, default=PolicyType.visa_free)
    calculation_method = Column(SQLEnum(CalculationMethod), nullable=False)

    max_days_per_stay = Column(Integer, nullable=True)
    max_days_per_period = Column(Integer, nullable=True)
    period_length_days = Column(Integer, nullable=True)

    description = Column(String(500), nullable=True)
    # null on an override row keeps the base policy's restrictions
    restrictions = Column(JSON, nullable=True)
    sources = Column(JSON, nullable=True)
    last_updated = Column(Date, nullable=True)
