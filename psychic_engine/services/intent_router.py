"""Intent router: the single dispatch boundary for every fulfillment exchange."""

from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType
from typing import TYPE_CHECKING, Awaitable, Callable, Mapping, Optional, Union

from psychic_engine.core.exceptions import (
    GeocodeResolutionFailedError,
    GeocodeServiceError,
    PermissionDeniedError,
    PsychicError,
    UnrecognizedIntentError,
    UnrecognizedPermissionKindError,
)
from psychic_engine.core.intents import IntentType, parse_intent
from psychic_engine.core.logging import get_logger, intent_context
from psychic_engine.core.models import ResponseDirective, SessionContext, SessionData, Tell
from psychic_engine.services.responses import READ_MIND_ERROR, UNRECOGNIZED_INTENT

if TYPE_CHECKING:  # pragma: no cover - import for static analysis only
    from . import ServiceContainer

logger = get_logger(__name__)


@dataclass(slots=True)
class IntentRequest:
    """One intent invocation with the session context it arrived with."""

    intent: IntentType
    context: SessionContext


@dataclass(slots=True)
class IntentResponse:
    """Exactly one directive plus the session state to hand back to the platform."""

    intent: Optional[IntentType]
    directive: ResponseDirective
    session: SessionData


IntentHandler = Callable[[IntentRequest, "ServiceContainer"], Awaitable[IntentResponse]]


class IntentRouter:
    """Dispatch intents to a fixed table of handlers."""

    def __init__(self, handlers: Mapping[IntentType, IntentHandler] | None = None) -> None:
        self._handlers: Mapping[IntentType, IntentHandler] = MappingProxyType(
            dict(handlers or {})
        )

    def handlers(self) -> Mapping[IntentType, IntentHandler]:
        """Return a shallow copy of the intent handler table."""

        return dict(self._handlers)

    def _resolve_handler(
        self, intent_id: Union[IntentType, str, None]
    ) -> tuple[IntentType, IntentHandler]:
        intent = intent_id if isinstance(intent_id, IntentType) else parse_intent(intent_id)
        if intent is None or intent not in self._handlers:
            raise UnrecognizedIntentError(f"No handler registered for intent {intent_id!r}")
        return intent, self._handlers[intent]

    async def dispatch(
        self,
        intent_id: Union[IntentType, str, None],
        context: SessionContext,
        services: "ServiceContainer",
    ) -> IntentResponse:
        """Run the handler for ``intent_id`` and always return one response.

        Any failure raised by a handler ends the exchange with an apology
        ``Tell``; nothing escapes to the transport layer.
        """

        try:
            intent, handler = self._resolve_handler(intent_id)
        except UnrecognizedIntentError as exc:
            logger.warning("%s", exc)
            return IntentResponse(
                intent=None, directive=Tell(UNRECOGNIZED_INTENT), session=SessionData()
            )

        with intent_context(intent.value):
            return await self._run_handler(intent, handler, context, services)

    async def _run_handler(
        self,
        intent: IntentType,
        handler: IntentHandler,
        context: SessionContext,
        services: "ServiceContainer",
    ) -> IntentResponse:
        logger.info("dispatching intent %s", intent.value)
        try:
            return await handler(IntentRequest(intent=intent, context=context), services)
        except PermissionDeniedError:
            logger.info("user declined permission for intent %s", intent.value)
        except GeocodeResolutionFailedError as exc:
            logger.warning("reverse geocoding found no locality: %s", exc)
        except GeocodeServiceError as exc:
            logger.error("reverse geocoding service failure: %s", exc)
        except UnrecognizedPermissionKindError as exc:
            logger.error("unrecognized permission kind: %s", exc)
        except PsychicError as exc:
            logger.warning("intent %s failed: %s", intent.value, exc)
        except Exception:  # pylint: disable=broad-exception-caught
            logger.exception("unhandled error while handling intent %s", intent.value)
        return IntentResponse(intent=intent, directive=Tell(READ_MIND_ERROR), session=SessionData())


__all__ = [
    "IntentRouter",
    "IntentHandler",
    "IntentRequest",
    "IntentResponse",
]
