"""Liveness endpoint used by the deployment platform."""

from fastapi import APIRouter

from baronda.utils import now_in_app_timezone

router = APIRouter()


@router.get("/health")
async def health_check() -> dict[str, str]:
    """Return a minimal status payload."""

    return {"status": "ok", "timestamp": now_in_app_timezone().isoformat()}
