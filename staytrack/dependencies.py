"""Shared dependencies: policy registry, traveler lookup."""
from fastapi import Depends, HTTPException, Request
from sqlalchemy.orm import Session
from staytrack.database import get_db
from staytrack.models.traveler import Traveler
from staytrack.services.policy_registry import PolicyRegistry, default_registry


def get_policy_registry(request: Request) -> PolicyRegistry:
    """Registry loaded at startup; the built-in catalogue if startup could not load one."""
    registry = getattr(request.app.state, "policy_registry", None)
    return registry or default_registry()


def get_traveler(traveler_id: int, db: Session = Depends(get_db)) -> Traveler:
    traveler = db.query(Traveler).filter(Traveler.id == traveler_id).first()
    if not traveler:
        raise HTTPException(status_code=404, detail="Traveler not found")
    return traveler
