"""Pytest configuration: ensure env vars and import path are set early.

This runs before any tests, so modules can import without local path hacks.
Also load .env before setting defaults so real settings are used when present.
"""
from __future__ import annotations

import os
import sys
import tempfile
from pathlib import Path
from typing import Optional

import pytest
from dotenv import load_dotenv

# Ensure repository root is on sys.path for local package imports
sys.path.append(str(Path(__file__).resolve().parents[1]))

load_dotenv(override=False)

# Keep logs and the TinyDB file out of the repository and away from /data.
_TEST_ROOT = Path(tempfile.mkdtemp(prefix="psychic-tests-"))
os.environ.setdefault("LOG_PSEUDONYM_SECRET", "test")
os.environ.setdefault("DATA_DIR", str(_TEST_ROOT / "data"))
os.environ.setdefault("PSYCHIC_LOG_DIR", str(_TEST_ROOT / "logs"))

# pylint: disable=wrong-import-position
from psychic_engine.core.exceptions import StoreUnavailableError  # noqa: E402
from psychic_engine.core.models import Coordinates, UserRecord  # noqa: E402
from psychic_engine.services import ServiceContainer, build_default_services  # noqa: E402


class InMemoryUserRecords:
    """User record port fake that records every write."""

    def __init__(self, records: Optional[dict[str, dict[str, str]]] = None) -> None:
        self.records: dict[str, dict[str, str]] = {
            user_id: dict(fields) for user_id, fields in (records or {}).items()
        }
        self.writes: list[tuple[str, str, str]] = []
        self.fail_reads = False
        self.fail_writes = False

    async def get_user_record(self, user_id: str) -> UserRecord:
        if self.fail_reads:
            raise StoreUnavailableError("store offline")
        return UserRecord.from_mapping(self.records.get(user_id))

    async def update_user_field(self, user_id: str, field: str, value: str) -> None:
        if self.fail_writes:
            raise StoreUnavailableError("store offline")
        self.writes.append((user_id, field, value))
        self.records.setdefault(user_id, {})[field] = value


class StubGeocoder:
    """Geocoder port fake returning a fixed locality or raising ``error``."""

    def __init__(self, locality: str = "Mountain View", error: Optional[Exception] = None) -> None:
        self.locality = locality
        self.error = error
        self.calls: list[Coordinates] = []

    async def reverse_geocode(self, coordinates: Coordinates) -> str:
        self.calls.append(coordinates)
        if self.error is not None:
            raise self.error
        return self.locality


@pytest.fixture
def user_records() -> InMemoryUserRecords:
    return InMemoryUserRecords()


@pytest.fixture
def geocoder() -> StubGeocoder:
    return StubGeocoder()


@pytest.fixture
def services(user_records: InMemoryUserRecords, geocoder: StubGeocoder) -> ServiceContainer:
    return build_default_services(user_records_port=user_records, geocoder_port=geocoder)


@pytest.fixture
def no_maps_key(monkeypatch: pytest.MonkeyPatch) -> None:
    """Disable the static map card so spoken responses have no image."""
    from psychic_engine.core.config import config  # pylint: disable=import-outside-toplevel

    monkeypatch.setattr(config, "GOOGLE_MAPS_API_KEY", None)
