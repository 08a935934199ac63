"""
All SQLAlchemy models. Schema is the source of truth for new DBs.
Base.metadata.create_all() creates every table.
"""
from staytrack.models.traveler import Traveler
from staytrack.models.stay import Stay
from staytrack.models.policy_rule import PolicyRule
from staytrack.models.compliance_alert import ComplianceAlert

__all__ = [
    "Traveler",
    "Stay",
    "PolicyRule",
    "ComplianceAlert",
]
