from __future__ import annotations

from fastapi import APIRouter

from app.adapters.llm.factory import validate_environment
from app.schemas.chat import EnvironmentStatus

router = APIRouter(tags=["Health"])


@router.get("/health")
def health_check() -> dict:
    """Liveness check used by load balancers and monitoring.

    Returns:
        dict: A dictionary with a single "status" key set to "ok".
    """

    return {"status": "ok"}


@router.get("/health/llm", response_model=EnvironmentStatus)
def llm_configuration_check() -> EnvironmentStatus:
    """Report whether text-generation credentials look usable.

    Does not contact the provider; a valid result only means the key and
    endpoint settings are present and well-formed.
    """

    return validate_environment()
