"""Traveler schemas."""
from pydantic import BaseModel, field_validator


class TravelerCreate(BaseModel):
    full_name: str
    nationality: str | None = None

    @field_validator("nationality")
    @classmethod
    def normalize_nationality(cls, v: str | None) -> str | None:
        if v is None:
            return None
        v = v.strip().upper()
        if len(v) != 2:
            raise ValueError("Nationality must be a two-letter country code")
        return v


class TravelerResponse(BaseModel):
    id: int
    full_name: str
    nationality: str | None

    class Config:
        from_attributes = True
