"""Reverse-geocoding adapter backed by the Google Geocoding API."""

from __future__ import annotations

from typing import Any, Mapping, Optional

import httpx

from psychic_engine.core.config import config
from psychic_engine.core.exceptions import (
    GeocodeResolutionFailedError,
    GeocodeServiceError,
)
from psychic_engine.core.logging import get_logger
from psychic_engine.core.models import Coordinates
from psychic_engine.core.ports import GeocoderPort

logger = get_logger(__name__)

LOCALITY_TYPE = "locality"
# Statuses for a successful call (a match is still checked separately).
_EMPTY_STATUSES = {"OK", "ZERO_RESULTS"}


def _mappings(value: Any) -> list[Mapping[str, Any]]:
    if not isinstance(value, list):
        return []
    return [item for item in value if isinstance(item, Mapping)]


def extract_locality(payload: Mapping[str, Any]) -> Optional[str]:
    """Return the first address component tagged ``locality``, if any.

    Entries of the wrong shape are skipped.
    """
    for result in _mappings(payload.get("results")):
        for component in _mappings(result.get("address_components")):
            types = component.get("types")
            if isinstance(types, list) and LOCALITY_TYPE in types:
                name = component.get("long_name")
                if isinstance(name, str) and name:
                    return name
    return None


class GoogleGeocoderAdapter(GeocoderPort):
    """Concrete adapter calling the Geocoding API with ``httpx``."""

    def __init__(
        self,
        *,
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self._api_key = api_key if api_key is not None else config.GOOGLE_MAPS_API_KEY
        self._base_url = base_url or config.GEOCODING_URL
        self._timeout = timeout if timeout is not None else config.GEOCODING_TIMEOUT_SECONDS
        self._transport = transport

    async def reverse_geocode(self, coordinates: Coordinates) -> str:
        if not self._api_key:
            raise GeocodeServiceError("GOOGLE_MAPS_API_KEY is not configured")

        params = {
            "latlng": f"{coordinates.lat},{coordinates.lng}",
            "key": self._api_key,
        }
        try:
            async with httpx.AsyncClient(
                timeout=self._timeout, transport=self._transport
            ) as client:
                response = await client.get(self._base_url, params=params)
        except httpx.HTTPError as exc:
            raise GeocodeServiceError(f"geocoding request failed: {exc}") from exc

        if response.status_code >= 400:
            logger.error("Geocoding API returned HTTP %s: %s", response.status_code, response.text)
            raise GeocodeServiceError(f"geocoding API returned HTTP {response.status_code}")

        try:
            payload = response.json()
        except ValueError as exc:
            raise GeocodeServiceError("geocoding API returned malformed JSON") from exc
        if not isinstance(payload, dict):
            raise GeocodeServiceError("geocoding API returned an unexpected payload")

        status = payload.get("status", "OK")
        if status not in _EMPTY_STATUSES:
            logger.error(
                "Geocoding API rejected request: %s %s", status, payload.get("error_message", "")
            )
            raise GeocodeServiceError(f"geocoding API status {status}")

        locality = extract_locality(payload)
        if locality is None:
            raise GeocodeResolutionFailedError(
                f"no locality found for {coordinates.lat},{coordinates.lng}"
            )
        return locality


__all__ = ["GoogleGeocoderAdapter", "extract_locality", "LOCALITY_TYPE"]
