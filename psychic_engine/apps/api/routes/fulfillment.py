"""Fulfillment webhook route called by the conversational platform."""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, status

from psychic_engine.apps.api.dependencies import get_service_container
from psychic_engine.core.api_models import (
    FulfillmentRequest,
    FulfillmentResponse,
    build_fulfillment_response,
)
from psychic_engine.core.identifiers import get_log_safe_user_id
from psychic_engine.core.logging import bind_log_user_id, get_logger, reset_log_user_id
from psychic_engine.services import ServiceContainer

router = APIRouter(tags=["fulfillment"])
logger = get_logger(__name__)


def _request_log_payload(body: FulfillmentRequest) -> dict[str, object]:
    """Return the inbound request for logging, without the raw user id."""
    payload = body.model_dump(mode="json", by_alias=True, exclude={"user_id"})
    if body.display_name:
        payload["displayName"] = "<redacted>"
    return payload


@router.post("/fulfillment", response_model=FulfillmentResponse)
async def handle_fulfillment(
    body: FulfillmentRequest,
    services: Annotated[ServiceContainer, Depends(get_service_container)],
) -> FulfillmentResponse:
    """Dispatch one platform intent and return the response directive."""
    intent_router = services.intent_router
    if intent_router is None:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Intent router not configured",
        )

    user_token = bind_log_user_id(
        get_log_safe_user_id(body.user_id)
    )
    try:
        logger.info(
            "fulfillment request received",
            extra={"event": "fulfillment_request", "request": _request_log_payload(body)},
        )
        result = await intent_router.dispatch(body.intent_id, body.to_context(), services)
        logger.info(
            "fulfillment response sent",
            extra={
                "event": "fulfillment_response",
                "intent": result.intent.value if result.intent else None,
                "directive": type(result.directive).__name__,
            },
        )
        return build_fulfillment_response(result.directive, result.session)
    finally:
        reset_log_user_id(user_token)


__all__ = ["router"]
