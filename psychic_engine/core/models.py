"""Core data transfer objects shared across layers."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Mapping, Optional, Union

NAME_FIELD = "name"
LOCATION_FIELD = "location"
SCREEN_OUTPUT_CAPABILITY = "actions.capability.SCREEN_OUTPUT"


class RequestedFact(str, Enum):
    """Personal data the psychic can ask permission to read.

    Values are the permission names the platform understands.
    """

    NAME = "NAME"
    COARSE_LOCATION = "DEVICE_COARSE_LOCATION"
    PRECISE_LOCATION = "DEVICE_PRECISE_LOCATION"

    @property
    def store_field(self) -> str:
        """Return the user-record field this fact is remembered under."""
        if self is RequestedFact.NAME:
            return NAME_FIELD
        return LOCATION_FIELD

    @property
    def is_location(self) -> bool:
        return self is not RequestedFact.NAME


@dataclass(slots=True, frozen=True)
class Coordinates:
    """Latitude/longitude pair reported by the device."""

    lat: float
    lng: float


@dataclass(slots=True)
class SessionData:
    """Per-conversation scratch state round-tripped through the platform."""

    requested_fact: Optional[RequestedFact] = None
    location: Optional[str] = None


@dataclass(slots=True)
class SessionContext:
    """Everything a handler may read about the current exchange."""

    user_id: str
    raw_input: str = ""
    granted_permission: Optional[bool] = None
    display_name: Optional[str] = None
    device_city: Optional[str] = None
    device_coordinates: Optional[Coordinates] = None
    screen_output: bool = False
    screen_available: bool = False
    session: SessionData = field(default_factory=SessionData)
    # Raw requestedFact echoed by the platform that matched no RequestedFact.
    unrecognized_fact: Optional[str] = None

    @property
    def should_transfer_to_screen(self) -> bool:
        """True when the current surface has no screen but another one does."""
        return not self.screen_output and self.screen_available


@dataclass(slots=True)
class UserRecord:
    """Facts remembered about one user."""

    name: Optional[str] = None
    location: Optional[str] = None

    @classmethod
    def from_mapping(cls, data: Optional[Mapping[str, Any]]) -> "UserRecord":
        """Build a record from a raw store document, ignoring unknown keys."""
        if not data:
            return cls()
        name = data.get(NAME_FIELD)
        location = data.get(LOCATION_FIELD)
        return cls(
            name=name if isinstance(name, str) and name else None,
            location=location if isinstance(location, str) and location else None,
        )

    def get(self, fact: RequestedFact) -> Optional[str]:
        return getattr(self, fact.store_field)


@dataclass(slots=True, frozen=True)
class Image:
    """Image card shown alongside a spoken response on screen surfaces."""

    url: str
    alt: str


@dataclass(slots=True, frozen=True)
class Ask:
    """Speak and keep the conversation open."""

    speech: str


@dataclass(slots=True, frozen=True)
class Tell:
    """Speak and end the conversation."""

    speech: str
    image: Optional[Image] = None


@dataclass(slots=True, frozen=True)
class RequestPermission:
    """Ask the platform to prompt the user for a permission."""

    reason: str
    kind: RequestedFact


@dataclass(slots=True, frozen=True)
class RequestSurfaceTransfer:
    """Ask the platform to move the conversation to a more capable device."""

    context: str
    notification: str
    capability: str = SCREEN_OUTPUT_CAPABILITY


ResponseDirective = Union[Ask, Tell, RequestPermission, RequestSurfaceTransfer]


@dataclass(slots=True, frozen=True)
class ResolvedValue:
    """A fact that is already known."""

    text: str


@dataclass(slots=True, frozen=True)
class PermissionNeeded:
    """A fact that must be requested from the user."""

    reason: str
    kind: RequestedFact


Resolution = Union[ResolvedValue, PermissionNeeded]


__all__ = [
    "NAME_FIELD",
    "LOCATION_FIELD",
    "SCREEN_OUTPUT_CAPABILITY",
    "RequestedFact",
    "Coordinates",
    "SessionData",
    "SessionContext",
    "UserRecord",
    "Image",
    "Ask",
    "Tell",
    "RequestPermission",
    "RequestSurfaceTransfer",
    "ResponseDirective",
    "ResolvedValue",
    "PermissionNeeded",
    "Resolution",
]
