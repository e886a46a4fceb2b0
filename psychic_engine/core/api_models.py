"""API request/response models for the fulfillment webhook."""

from __future__ import annotations

from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

from psychic_engine.core.models import (
    Ask,
    Coordinates,
    RequestedFact,
    RequestPermission,
    RequestSurfaceTransfer,
    ResponseDirective,
    SessionContext,
    SessionData,
    Tell,
)


_KNOWN_FACTS = frozenset(fact.value for fact in RequestedFact)


class _CamelModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


class CoordinatesPayload(_CamelModel):
    """Device latitude/longitude."""

    lat: float = Field(..., ge=-90.0, le=90.0)
    lng: float = Field(..., ge=-180.0, le=180.0)


class SessionPayload(_CamelModel):
    """Session scratch state echoed back by the platform on the next turn."""

    requested_fact: Optional[str] = Field(default=None, alias="requestedFact")
    location: Optional[str] = Field(default=None)


class SurfacePayload(_CamelModel):
    """Screen capabilities of the current and the user's other surfaces."""

    screen_output: bool = Field(default=False, alias="screenOutput")
    screen_available: bool = Field(default=False, alias="screenAvailable")


class FulfillmentRequest(_CamelModel):
    """Request model for POST /fulfillment."""

    intent_id: str = Field(default="", alias="intentId", description="Detected intent")
    user_id: str = Field(..., alias="userId", min_length=1, description="Stable user id")
    raw_input: str = Field(default="", alias="rawInput", description="Raw user utterance")
    granted_permission: Optional[bool] = Field(default=None, alias="grantedPermission")
    display_name: Optional[str] = Field(default=None, alias="displayName")
    device_city: Optional[str] = Field(default=None, alias="deviceCity")
    device_coordinates: Optional[CoordinatesPayload] = Field(
        default=None, alias="deviceCoordinates"
    )
    session: SessionPayload = Field(default_factory=SessionPayload)
    surface: SurfacePayload = Field(default_factory=SurfacePayload)

    def to_context(self) -> SessionContext:
        """Convert the wire payload into the handler-facing session context."""
        requested = self.session.requested_fact
        fact = RequestedFact(requested) if requested in _KNOWN_FACTS else None
        coords = None
        if self.device_coordinates is not None:
            coords = Coordinates(lat=self.device_coordinates.lat, lng=self.device_coordinates.lng)
        return SessionContext(
            user_id=self.user_id,
            raw_input=self.raw_input,
            granted_permission=self.granted_permission,
            display_name=self.display_name,
            device_city=self.device_city,
            device_coordinates=coords,
            screen_output=self.surface.screen_output,
            screen_available=self.surface.screen_available,
            session=SessionData(requested_fact=fact, location=self.session.location),
            unrecognized_fact=requested if requested and fact is None else None,
        )


class ImagePayload(_CamelModel):
    url: str
    alt: str


class DirectivePayload(_CamelModel):
    """Serialized response directive."""

    type: Literal["ask", "tell", "permission", "new_surface"]
    speech: Optional[str] = None
    image: Optional[ImagePayload] = None
    reason: Optional[str] = None
    permissions: Optional[list[RequestedFact]] = None
    context: Optional[str] = None
    notification: Optional[str] = None
    capabilities: Optional[list[str]] = None


class FulfillmentResponse(_CamelModel):
    """Response model for POST /fulfillment."""

    directive: DirectivePayload
    expect_user_response: bool = Field(..., alias="expectUserResponse")
    session: SessionPayload


def directive_to_payload(directive: ResponseDirective) -> DirectivePayload:
    """Serialize a response directive into its wire representation."""
    if isinstance(directive, Ask):
        return DirectivePayload(type="ask", speech=directive.speech)
    if isinstance(directive, Tell):
        image = None
        if directive.image is not None:
            image = ImagePayload(url=directive.image.url, alt=directive.image.alt)
        return DirectivePayload(type="tell", speech=directive.speech, image=image)
    if isinstance(directive, RequestPermission):
        return DirectivePayload(
            type="permission", reason=directive.reason, permissions=[directive.kind]
        )
    if isinstance(directive, RequestSurfaceTransfer):
        return DirectivePayload(
            type="new_surface",
            context=directive.context,
            notification=directive.notification,
            capabilities=[directive.capability],
        )
    raise TypeError(f"unsupported directive: {directive!r}")


def build_fulfillment_response(
    directive: ResponseDirective, session: SessionData
) -> FulfillmentResponse:
    """Assemble the webhook response for ``directive`` and outgoing ``session``."""
    return FulfillmentResponse(
        directive=directive_to_payload(directive),
        expect_user_response=not isinstance(directive, Tell),
        session=SessionPayload(
            requested_fact=session.requested_fact.value if session.requested_fact else None,
            location=session.location,
        ),
    )


__all__ = [
    "CoordinatesPayload",
    "SessionPayload",
    "SurfacePayload",
    "FulfillmentRequest",
    "ImagePayload",
    "DirectivePayload",
    "FulfillmentResponse",
    "directive_to_payload",
    "build_fulfillment_response",
]
