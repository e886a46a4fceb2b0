"""Health and readiness routes."""

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from psychic_engine import PSYCHIC_ENGINE_VERSION

from ..dependencies import require_healthcheck_token

router = APIRouter()


@router.get("/")
def read_root() -> dict[str, str]:
    """Info endpoint with a short usage message."""
    return {"message": "Psychic fulfillment webhook. POST intents to /fulfillment."}


@router.get("/alive")
async def alive_check(_: None = Depends(require_healthcheck_token)) -> JSONResponse:
    """Health check endpoint for infrastructure probes."""
    return JSONResponse(
        {
            "status": "ok",
            "message": "The psychic is alive and reading minds.",
            "version": PSYCHIC_ENGINE_VERSION,
        }
    )


__all__ = ["router"]
