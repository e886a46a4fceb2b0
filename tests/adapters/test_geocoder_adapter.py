"""Tests for the Google reverse-geocoding adapter using httpx mock transports."""

from __future__ import annotations

import asyncio
from typing import Any

import httpx
import pytest

from psychic_engine.adapters.geocoder import GoogleGeocoderAdapter, extract_locality
from psychic_engine.core.exceptions import GeocodeResolutionFailedError, GeocodeServiceError
from psychic_engine.core.models import Coordinates

MOUNTAIN_VIEW = Coordinates(lat=37.4, lng=-122.1)


def _payload(*components: dict[str, Any], status: str = "OK") -> dict[str, Any]:
    return {"status": status, "results": [{"address_components": list(components)}]}


def _adapter(handler, api_key: str | None = "maps-key") -> GoogleGeocoderAdapter:
    return GoogleGeocoderAdapter(
        api_key=api_key,
        base_url="https://geocode.test/json",
        transport=httpx.MockTransport(handler),
    )


def test_extract_locality_picks_first_locality_component() -> None:
    payload = _payload(
        {"long_name": "1600", "types": ["street_number"]},
        {"long_name": "Mountain View", "types": ["locality", "political"]},
        {"long_name": "Sunnyvale", "types": ["locality", "political"]},
    )
    assert extract_locality(payload) == "Mountain View"
    assert extract_locality({"results": []}) is None


def test_reverse_geocode_sends_latlng_and_returns_locality() -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(
            200, json=_payload({"long_name": "Mountain View", "types": ["locality"]})
        )

    locality = asyncio.run(_adapter(handler).reverse_geocode(MOUNTAIN_VIEW))

    assert locality == "Mountain View"
    assert seen[0].url.params["latlng"] == "37.4,-122.1"
    assert seen[0].url.params["key"] == "maps-key"


def test_no_locality_is_a_resolution_failure() -> None:
    def handler(_: httpx.Request) -> httpx.Response:
        return httpx.Response(
            200, json=_payload({"long_name": "Santa Clara County", "types": ["administrative_area_level_2"]})
        )

    with pytest.raises(GeocodeResolutionFailedError):
        asyncio.run(_adapter(handler).reverse_geocode(MOUNTAIN_VIEW))


def test_zero_results_is_a_resolution_failure() -> None:
    def handler(_: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"status": "ZERO_RESULTS", "results": []})

    with pytest.raises(GeocodeResolutionFailedError):
        asyncio.run(_adapter(handler).reverse_geocode(MOUNTAIN_VIEW))


@pytest.mark.parametrize(
    "response",
    [
        httpx.Response(500, text="boom"),
        httpx.Response(200, json={"status": "REQUEST_DENIED", "error_message": "bad key"}),
        httpx.Response(200, text="not json"),
    ],
)
def test_service_failures_are_service_errors(response: httpx.Response) -> None:
    def handler(_: httpx.Request) -> httpx.Response:
        return response

    with pytest.raises(GeocodeServiceError):
        asyncio.run(_adapter(handler).reverse_geocode(MOUNTAIN_VIEW))


def test_transport_errors_are_service_errors() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("unreachable", request=request)

    with pytest.raises(GeocodeServiceError):
        asyncio.run(_adapter(handler).reverse_geocode(MOUNTAIN_VIEW))


def test_missing_api_key_is_a_service_error() -> None:
    def handler(_: httpx.Request) -> httpx.Response:  # pragma: no cover - never called
        raise AssertionError("no request expected")

    with pytest.raises(GeocodeServiceError):
        asyncio.run(_adapter(handler, api_key="").reverse_geocode(MOUNTAIN_VIEW))


def test_non_object_payload_is_a_service_error() -> None:
    def handler(_: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json=[])

    with pytest.raises(GeocodeServiceError):
        asyncio.run(_adapter(handler).reverse_geocode(MOUNTAIN_VIEW))


def test_malformed_results_are_skipped() -> None:
    payload = {
        "status": "OK",
        "results": [
            "x",
            {"address_components": ["y", {"long_name": "Nowhere", "types": "locality"}]},
            {"address_components": [{"long_name": "Mountain View", "types": ["locality"]}]},
        ],
    }
    assert extract_locality(payload) == "Mountain View"
    assert extract_locality({"results": "x"}) is None


def test_string_results_are_a_resolution_failure() -> None:
    def handler(_: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"status": "OK", "results": ["x"]})

    with pytest.raises(GeocodeResolutionFailedError):
        asyncio.run(_adapter(handler).reverse_geocode(MOUNTAIN_VIEW))
