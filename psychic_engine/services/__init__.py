"""Application service layer for intent handling."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Optional

from psychic_engine.core.ports import GeocoderPort, UserRecordPort

if TYPE_CHECKING:  # pragma: no cover - type narrowing only
    from .intent_router import IntentRouter
    from .resolver import PermissionResolver


@dataclass(slots=True)
class ServiceContainer:
    """Aggregate of application-level services available to handlers."""

    user_records: Optional[UserRecordPort] = None
    geocoder: Optional[GeocoderPort] = None
    resolver: Optional["PermissionResolver"] = None
    intent_router: Optional["IntentRouter"] = None


def build_default_services(
    *,
    user_records_port: Optional[UserRecordPort] = None,
    geocoder_port: Optional[GeocoderPort] = None,
) -> ServiceContainer:
    """Return a service container with the default resolver and intent router wiring."""

    # pylint: disable=import-outside-toplevel
    from .intent_router import IntentRouter
    from .intents import build_default_handlers
    from .resolver import PermissionResolver

    resolver = (
        PermissionResolver(user_records_port, geocoder_port)
        if user_records_port is not None
        else None
    )
    return ServiceContainer(
        user_records=user_records_port,
        geocoder=geocoder_port,
        resolver=resolver,
        intent_router=IntentRouter(build_default_handlers()),
    )


__all__ = ["ServiceContainer", "build_default_services"]
