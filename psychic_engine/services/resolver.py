"""Permission/data resolver: remembered facts, permission escalation, persistence."""

from __future__ import annotations

from typing import Optional

from psychic_engine.core.exceptions import (
    GeocodeServiceError,
    MissingPlatformDataError,
    StoreUnavailableError,
    UnrecognizedPermissionKindError,
)
from psychic_engine.core.logging import get_logger
from psychic_engine.core.models import (
    PermissionNeeded,
    RequestedFact,
    Resolution,
    ResolvedValue,
    SessionContext,
)
from psychic_engine.core.ports import GeocoderPort, UserRecordPort
from psychic_engine.services.responses import PERMISSION_REASON

logger = get_logger(__name__)


class PermissionResolver:
    """Resolve a requested fact from the user-record store or the platform."""

    def __init__(
        self,
        user_records: UserRecordPort,
        geocoder: Optional[GeocoderPort] = None,
        *,
        reason: str = PERMISSION_REASON,
    ) -> None:
        self._user_records = user_records
        self._geocoder = geocoder
        self._reason = reason

    async def resolve(self, user_id: str, fact: RequestedFact) -> Resolution:
        """Return the remembered value for ``fact`` or a permission request.

        Store read failures propagate as ``StoreUnavailableError``; callers
        decide whether to ask for permission again or give up.
        """
        record = await self._user_records.get_user_record(user_id)
        value = record.get(fact)
        if value:
            logger.info("fact %s already known; skipping permission request", fact.value)
            return ResolvedValue(text=value)
        return PermissionNeeded(reason=self._reason, kind=fact)

    async def resolve_grant(
        self, user_id: str, fact: RequestedFact, context: SessionContext
    ) -> str:
        """Read the freshly granted value for ``fact`` and remember it."""
        if fact is RequestedFact.NAME:
            value = (context.display_name or "").strip()
            if not value:
                raise MissingPlatformDataError("name permission granted without a display name")
        elif fact.is_location:
            value = await self._live_location(context)
        else:  # pragma: no cover - exhaustive over RequestedFact
            raise UnrecognizedPermissionKindError(f"unhandled fact kind: {fact!r}")

        await self.remember(user_id, fact, value)
        return value

    async def remember(self, user_id: str, fact: RequestedFact, value: str) -> None:
        """Persist ``value`` for ``fact``; failures are logged, never raised."""
        try:
            await self._user_records.update_user_field(user_id, fact.store_field, value)
        except StoreUnavailableError as exc:
            logger.warning("could not persist %s for user: %s", fact.store_field, exc)

    async def _live_location(self, context: SessionContext) -> str:
        city = (context.device_city or "").strip()
        if city:
            return city
        if context.device_coordinates is None:
            raise MissingPlatformDataError("location permission granted without device location")
        if self._geocoder is None:
            raise GeocodeServiceError("no geocoder configured")
        locality = await self._geocoder.reverse_geocode(context.device_coordinates)
        logger.info("resolved device coordinates to a locality via reverse geocoding")
        return locality


__all__ = ["PermissionResolver"]
