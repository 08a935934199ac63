from staytrack.schemas.traveler import TravelerCreate, TravelerResponse
from staytrack.schemas.stay import StayCreate, StayExit, StayResponse
from staytrack.schemas.policy import StayPolicyResponse
from staytrack.schemas.compliance import (
    CountryResultResponse,
    StayStatusResponse,
    TripValidationInput,
    TripValidationResponse,
)
