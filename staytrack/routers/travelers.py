"""Travelers."""
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from staytrack.database import get_db
from staytrack.dependencies import get_traveler
from staytrack.models.traveler import Traveler
from staytrack.schemas.traveler import TravelerCreate, TravelerResponse

router = APIRouter(prefix="/travelers", tags=["travelers"])


@router.post("/", response_model=TravelerResponse)
def create_traveler(data: TravelerCreate, db: Session = Depends(get_db)):
    traveler = Traveler(full_name=data.full_name.strip(), nationality=data.nationality)
    db.add(traveler)
    db.commit()
    db.refresh(traveler)
    return traveler


@router.get("/{traveler_id}", response_model=TravelerResponse)
def read_traveler(traveler: Traveler = Depends(get_traveler)):
    return traveler
