import os

# Configure before any staytrack module reads settings
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["COMPLIANCE_CHECK_ENABLED"] = "false"

from datetime import date

import pytest
from fastapi.testclient import TestClient

from staytrack.database import Base, SessionLocal, engine
from staytrack.domain import CalculationMethod, StayPolicy, StayRecord
from staytrack.main import app


def _record(record_id: str, entry: str, exit_: str | None = None, code: str = "XX") -> StayRecord:
    return StayRecord(
        id=record_id,
        jurisdiction_code=code,
        entry_date=date.fromisoformat(entry),
        exit_date=date.fromisoformat(exit_) if exit_ else None,
    )


@pytest.fixture
def rolling_policy():
    return StayPolicy(
        jurisdiction_code="XX",
        jurisdiction_name="Group X",
        calculation_method=CalculationMethod.rolling_window,
        max_days_per_period=90,
        period_length_days=180,
    )


@pytest.fixture
def per_entry_policy():
    return StayPolicy(
        jurisdiction_code="XX",
        jurisdiction_name="Group X",
        calculation_method=CalculationMethod.per_entry,
        max_days_per_stay=45,
    )


@pytest.fixture
def calendar_policy():
    return StayPolicy(
        jurisdiction_code="XX",
        jurisdiction_name="Group X",
        calculation_method=CalculationMethod.calendar_year,
        max_days_per_stay=60,
        max_days_per_period=180,
        period_length_days=365,
    )


@pytest.fixture
def db():
    Base.metadata.create_all(bind=engine)
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def client(db):
    with TestClient(app) as c:
        yield c


@pytest.fixture
def rec():
    """Build a StayRecord from ISO date strings."""
    return _record
