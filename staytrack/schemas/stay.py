"""Stay record schemas."""
from datetime import date
from pydantic import BaseModel, field_validator, model_validator


class StayCreate(BaseModel):
    jurisdiction_code: str
    entry_date: date
    exit_date: date | None = None
    purpose: str | None = None
    notes: str | None = None

    @field_validator("jurisdiction_code")
    @classmethod
    def upper_code(cls, v: str) -> str:
        v = (v or "").strip().upper()
        if not v:
            raise ValueError("Jurisdiction code is required")
        return v

    @model_validator(mode="after")
    def exit_after_entry(self):
        if self.exit_date is not None and self.exit_date < self.entry_date:
            raise ValueError("Exit date cannot be before entry date")
        return self


class StayExit(BaseModel):
    exit_date: date


class StayResponse(BaseModel):
    id: int
    traveler_id: int
    jurisdiction_code: str
    entry_date: date
    exit_date: date | None
    purpose: str | None
    notes: str | None

    class Config:
        from_attributes = True
