"""Psychic intent handlers: greeting, deep links, permission requests and callbacks."""

from __future__ import annotations

from psychic_engine.core.config import config
from psychic_engine.core.exceptions import (
    MissingPlatformDataError,
    PermissionDeniedError,
    StoreUnavailableError,
    UnrecognizedPermissionKindError,
)
from psychic_engine.core.intents import IntentType
from psychic_engine.core.logging import get_logger
from psychic_engine.core.models import (
    Ask,
    PermissionNeeded,
    RequestedFact,
    RequestPermission,
    RequestSurfaceTransfer,
    ResolvedValue,
    SessionData,
    Tell,
)
from psychic_engine.services import ServiceContainer
from psychic_engine.services import responses
from psychic_engine.services.intent_router import IntentHandler, IntentRequest, IntentResponse
from psychic_engine.services.resolver import PermissionResolver

logger = get_logger(__name__)


def _require_resolver(services: ServiceContainer) -> PermissionResolver:
    resolver = services.resolver
    if resolver is None:
        raise RuntimeError("PermissionResolver has not been configured.")
    return resolver


def _location_fact() -> RequestedFact:
    if config.LOCATION_PERMISSION == "precise":
        return RequestedFact.PRECISE_LOCATION
    return RequestedFact.COARSE_LOCATION


def _answer(request: IntentRequest, fact: RequestedFact, value: str) -> IntentResponse:
    """Speak a resolved fact, moving location answers to a screen when possible."""
    if fact is RequestedFact.NAME:
        return IntentResponse(
            intent=request.intent,
            directive=Tell(responses.say_name(value)),
            session=SessionData(location=request.context.session.location),
        )

    session = SessionData(location=value)
    if request.context.should_transfer_to_screen:
        logger.info("asking platform to move the conversation to a screen surface")
        return IntentResponse(
            intent=request.intent,
            directive=RequestSurfaceTransfer(
                context=responses.NEW_SURFACE_CONTEXT,
                notification=responses.NOTIFICATION_TEXT,
            ),
            session=session,
        )
    return IntentResponse(
        intent=request.intent,
        directive=Tell(responses.say_location(value), image=responses.location_map_image(value)),
        session=session,
    )


async def handle_welcome(request: IntentRequest, services: ServiceContainer) -> IntentResponse:
    """Greet the user and offer to guess their name or location."""
    del services
    return IntentResponse(
        intent=request.intent,
        directive=Ask(responses.GREET_USER),
        session=request.context.session,
    )


async def handle_unhandled_deep_link(
    request: IntentRequest, services: ServiceContainer
) -> IntentResponse:
    """Echo the unrecognized invocation back and keep the conversation going."""
    del services
    return IntentResponse(
        intent=request.intent,
        directive=Ask(responses.unhandled_deep_link(request.context.raw_input)),
        session=request.context.session,
    )


async def _request_fact(
    request: IntentRequest, services: ServiceContainer, fact: RequestedFact
) -> IntentResponse:
    resolver = _require_resolver(services)
    context = request.context
    try:
        resolution = await resolver.resolve(context.user_id, fact)
    except StoreUnavailableError:
        if config.STORE_READ_FAILURE_POLICY == "apologize":
            raise
        logger.warning("user record store unreadable; requesting %s permission again", fact.value)
        resolution = PermissionNeeded(reason=responses.PERMISSION_REASON, kind=fact)

    if isinstance(resolution, ResolvedValue):
        return _answer(request, fact, resolution.text)

    return IntentResponse(
        intent=request.intent,
        directive=RequestPermission(reason=resolution.reason, kind=resolution.kind),
        session=SessionData(requested_fact=fact, location=context.session.location),
    )


async def handle_request_name(
    request: IntentRequest, services: ServiceContainer
) -> IntentResponse:
    """Tell the user their name, asking for the NAME permission if unknown."""
    return await _request_fact(request, services, RequestedFact.NAME)


async def handle_request_location(
    request: IntentRequest, services: ServiceContainer
) -> IntentResponse:
    """Tell the user their city, asking for a location permission if unknown."""
    return await _request_fact(request, services, _location_fact())


async def handle_read_mind(request: IntentRequest, services: ServiceContainer) -> IntentResponse:
    """Handle the permission callback.

    The fact asked for on the previous turn is read from the session once and
    then dropped from the outgoing session.
    """
    context = request.context
    if not context.granted_permission:
        raise PermissionDeniedError("permission not granted")

    fact = context.session.requested_fact
    if fact is None:
        if context.unrecognized_fact:
            raise UnrecognizedPermissionKindError(
                f"unknown permission kind {context.unrecognized_fact!r}"
            )
        raise UnrecognizedPermissionKindError("permission callback without a requested fact")

    resolver = _require_resolver(services)
    value = await resolver.resolve_grant(context.user_id, fact, context)
    return _answer(request, fact, value)


async def handle_new_surface(
    request: IntentRequest, services: ServiceContainer
) -> IntentResponse:
    """Show the location on the screen surface the conversation moved to."""
    context = request.context
    location = context.session.location
    if not location:
        resolution = await _require_resolver(services).resolve(
            context.user_id, RequestedFact.COARSE_LOCATION
        )
        if not isinstance(resolution, ResolvedValue):
            raise MissingPlatformDataError("surface transfer completed without a known location")
        location = resolution.text

    return IntentResponse(
        intent=request.intent,
        directive=Tell(
            responses.say_location(location), image=responses.location_map_image(location)
        ),
        session=SessionData(location=location),
    )


def build_default_handlers() -> dict[IntentType, IntentHandler]:
    """Return the fixed intent → handler table."""
    return {
        IntentType.WELCOME: handle_welcome,
        IntentType.UNHANDLED_DEEP_LINK: handle_unhandled_deep_link,
        IntentType.REQUEST_NAME_PERMISSION: handle_request_name,
        IntentType.REQUEST_LOCATION_PERMISSION: handle_request_location,
        IntentType.READ_MIND: handle_read_mind,
        IntentType.NEW_SURFACE: handle_new_surface,
    }


__all__ = [
    "build_default_handlers",
    "handle_welcome",
    "handle_unhandled_deep_link",
    "handle_request_name",
    "handle_request_location",
    "handle_read_mind",
    "handle_new_surface",
]
