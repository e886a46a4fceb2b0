"""Intent types recognized by the psychic fulfillment webhook."""

from __future__ import annotations

from enum import Enum
from typing import Optional


class IntentType(str, Enum):
    """Enumeration of all intents the dispatcher has handlers for."""

    WELCOME = "input.welcome"
    UNHANDLED_DEEP_LINK = "deeplink.unknown"
    REQUEST_NAME_PERMISSION = "request_name_permission"
    REQUEST_LOCATION_PERMISSION = "request_location_permission"
    READ_MIND = "read_mind"
    NEW_SURFACE = "new_surface"


# Display names used by newer agent exports for the same intents.
INTENT_ALIASES: dict[str, IntentType] = {
    "Default Welcome Intent": IntentType.WELCOME,
    "Unrecognized Deep Link Fallback": IntentType.UNHANDLED_DEEP_LINK,
    "handle_permission": IntentType.READ_MIND,
}


def parse_intent(intent_id: Optional[str]) -> Optional[IntentType]:
    """Map a raw platform intent identifier to an ``IntentType``, or ``None``."""
    if not intent_id:
        return None
    key = intent_id.strip()
    if key in INTENT_ALIASES:
        return INTENT_ALIASES[key]
    try:
        return IntentType(key)
    except ValueError:
        return None


__all__ = ["IntentType", "INTENT_ALIASES", "parse_intent"]
