"""Module A: Stay policies (read-only, pre-seeded)."""
from fastapi import APIRouter, Depends, HTTPException, Query
from staytrack.dependencies import get_policy_registry
from staytrack.schemas.policy import StayPolicyResponse
from staytrack.services.policy_registry import PolicyRegistry

router = APIRouter(prefix="/policies", tags=["policies"])


@router.get("/", response_model=list[StayPolicyResponse])
def list_policies(registry: PolicyRegistry = Depends(get_policy_registry)):
    return [StayPolicyResponse.from_policy(p) for p in registry.supported_policies()]


@router.get("/{jurisdiction_code}", response_model=StayPolicyResponse)
def get_policy(
    jurisdiction_code: str,
    nationality: str | None = Query(None, description="Two-letter nationality, e.g. KR, US"),
    registry: PolicyRegistry = Depends(get_policy_registry),
):
    policy = registry.get_policy(jurisdiction_code, nationality)
    if not policy:
        raise HTTPException(status_code=404, detail="Stay policy not found")
    return StayPolicyResponse.from_policy(policy)
