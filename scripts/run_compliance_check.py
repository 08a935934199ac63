"""Run the daily compliance check once, outside the scheduler.
Run: python scripts/run_compliance_check.py [YYYY-MM-DD]
"""
import os
import sys
from datetime import date

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

from staytrack.database import engine, SessionLocal, Base  # noqa: E402
from staytrack import models  # noqa: F401,E402
from staytrack.services.ledger_store import load_registry  # noqa: E402
from staytrack.services.stay_monitor import run_compliance_check  # noqa: E402

if __name__ == "__main__":
    reference_date = date.fromisoformat(sys.argv[1]) if len(sys.argv) > 1 else None
    Base.metadata.create_all(bind=engine)
    db = SessionLocal()
    try:
        alerts = run_compliance_check(db, load_registry(db), reference_date)
        for a in alerts:
            previous = a.previous_level.value if a.previous_level else "none"
            print(f"  traveler {a.traveler_id} {a.jurisdiction_code}: {previous} -> {a.warning_level.value} ({a.days_used} days)")
        print(f"{len(alerts)} warning-level change(s) recorded.")
    finally:
        db.close()
