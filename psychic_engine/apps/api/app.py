"""FastAPI application factory."""

from __future__ import annotations

from contextlib import asynccontextmanager

from fastapi import FastAPI

from psychic_engine import PSYCHIC_ENGINE_VERSION
from psychic_engine.apps.api.middleware import CorrelationIdMiddleware
from psychic_engine.apps.api.routes import fulfillment, health
from psychic_engine.core.config import config
from psychic_engine.core.logging import get_logger
from psychic_engine.services import ServiceContainer

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Log which intents are served and which optional integrations are off."""
    services: ServiceContainer = app.state.services
    router = services.intent_router
    intents = sorted(i.value for i in router.handlers()) if router is not None else []
    logger.info(
        "psychic engine %s starting",
        PSYCHIC_ENGINE_VERSION,
        extra={"event": "startup", "intents": intents},
    )
    if not config.GOOGLE_MAPS_API_KEY:
        logger.warning("GOOGLE_MAPS_API_KEY not set; geocoding and map cards are disabled")
    if services.resolver is None:
        logger.warning("no user record store configured; permission intents will apologize")
    yield
    logger.info("psychic engine shutting down", extra={"event": "shutdown"})


def create_app(services: ServiceContainer | None = None) -> FastAPI:
    """Build the FastAPI application around ``services``."""
    if services is None:
        raise RuntimeError("Service container must be provided when creating the app.")
    app = FastAPI(title="Psychic Engine", version=PSYCHIC_ENGINE_VERSION, lifespan=lifespan)
    app.state.services = services
    app.add_middleware(CorrelationIdMiddleware)
    app.include_router(health.router)
    app.include_router(fulfillment.router)
    return app


__all__ = ["create_app", "lifespan"]
