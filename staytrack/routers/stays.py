"""Module C: Stay logging. Entries are created, exits appended; nothing is deleted."""
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session
from staytrack.database import get_db
from staytrack.dependencies import get_traveler
from staytrack.domain import StayRecord
from staytrack.models.stay import Stay
from staytrack.models.traveler import Traveler
from staytrack.schemas.stay import StayCreate, StayExit, StayResponse
from staytrack.services.ledger_store import load_ledger
from staytrack.services.stay_ledger import StayLedger

router = APIRouter(tags=["stays"])


def _reject_overlap(ledger: StayLedger, record: StayRecord) -> None:
    """400 if the record would share a day with another stay in its jurisdiction."""
    for issue in ledger.with_record(record).integrity_issues(record.jurisdiction_code):
        if record.id in issue.record_ids:
            raise HTTPException(status_code=400, detail=issue.message)


@router.post("/travelers/{traveler_id}/stays", response_model=StayResponse)
def log_stay(
    data: StayCreate,
    db: Session = Depends(get_db),
    traveler: Traveler = Depends(get_traveler),
):
    candidate = StayRecord(
        id="new",
        jurisdiction_code=data.jurisdiction_code,
        entry_date=data.entry_date,
        exit_date=data.exit_date,
    )
    _reject_overlap(load_ledger(db, traveler.id), candidate)

    stay = Stay(
        traveler_id=traveler.id,
        jurisdiction_code=data.jurisdiction_code,
        entry_date=data.entry_date,
        exit_date=data.exit_date,
        purpose=data.purpose,
        notes=data.notes,
    )
    db.add(stay)
    db.commit()
    db.refresh(stay)
    return stay


@router.get("/travelers/{traveler_id}/stays", response_model=list[StayResponse])
def list_stays(db: Session = Depends(get_db), traveler: Traveler = Depends(get_traveler)):
    return db.query(Stay).filter(Stay.traveler_id == traveler.id).order_by(Stay.entry_date).all()


@router.patch("/stays/{stay_id}/exit", response_model=StayResponse)
def record_exit(stay_id: int, data: StayExit, db: Session = Depends(get_db)):
    stay = db.query(Stay).filter(Stay.id == stay_id).first()
    if not stay:
        raise HTTPException(status_code=404, detail="Stay not found")
    if stay.exit_date is not None:
        raise HTTPException(status_code=400, detail="Exit already recorded for this stay")
    if data.exit_date < stay.entry_date:
        raise HTTPException(status_code=400, detail="Exit date cannot be before entry date")

    others = StayLedger(r for r in load_ledger(db, stay.traveler_id) if r.id != str(stay.id))
    closed = StayRecord(
        id=str(stay.id),
        jurisdiction_code=stay.jurisdiction_code,
        entry_date=stay.entry_date,
        exit_date=data.exit_date,
    )
    _reject_overlap(others, closed)

    stay.exit_date = data.exit_date
    db.add(stay)
    db.commit()
    db.refresh(stay)
    return stay
