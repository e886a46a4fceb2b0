"""Protocol definitions for infrastructure adapters."""

# pylint: disable=unnecessary-ellipsis

from __future__ import annotations

from typing import Protocol

from psychic_engine.core.models import Coordinates, UserRecord


class UserRecordPort(Protocol):
    """Port exposing per-user fact persistence.

    Implementations raise ``StoreUnavailableError`` when the store cannot be
    reached; a missing user is not an error and yields an empty record.
    """

    async def get_user_record(self, user_id: str) -> UserRecord:
        """Return the remembered facts for ``user_id``."""
        ...

    async def update_user_field(self, user_id: str, field: str, value: str) -> None:
        """Upsert a single field on the record for ``user_id``, keeping siblings."""
        ...


class GeocoderPort(Protocol):
    """Port exposing reverse geocoding."""

    async def reverse_geocode(self, coordinates: Coordinates) -> str:
        """Return the locality name for ``coordinates``.

        Raises ``GeocodeServiceError`` when the service fails and
        ``GeocodeResolutionFailedError`` when no locality is found.
        """
        ...


__all__ = ["UserRecordPort", "GeocoderPort"]
