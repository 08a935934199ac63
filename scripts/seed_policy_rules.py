"""Standalone script to create DB tables and seed the stay policy catalogue (Module A)."""
import os
import sys

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

from staytrack.database import engine, SessionLocal, Base  # noqa: E402
from staytrack import models  # noqa: F401,E402
from staytrack.seed import seed_policy_rules  # noqa: E402
from staytrack.services.ledger_store import load_registry  # noqa: E402

if __name__ == "__main__":
    Base.metadata.create_all(bind=engine)
    db = SessionLocal()
    try:
        seed_policy_rules(db)
        codes = ", ".join(p.jurisdiction_code for p in load_registry(db).supported_policies())
        print(f"Stay policies seeded: {codes}.")
    finally:
        db.close()
