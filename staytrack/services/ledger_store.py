"""Load core inputs (ledger, policy registry) from the database."""
from sqlalchemy.orm import Session
from staytrack.models.policy_rule import PolicyRule
from staytrack.models.stay import Stay
from staytrack.services.policy_registry import PolicyRegistry
from staytrack.services.stay_ledger import StayLedger


def load_ledger(db: Session, traveler_id: int) -> StayLedger:
    stays = db.query(Stay).filter(Stay.traveler_id == traveler_id).order_by(Stay.entry_date).all()
    return StayLedger(s.to_record() for s in stays)


def load_registry(db: Session) -> PolicyRegistry:
    return PolicyRegistry.from_rules(db.query(PolicyRule).all())
