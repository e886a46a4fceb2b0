"""Infrastructure adapter exports."""

from psychic_engine.core.exceptions import (  # noqa: F401
    GeocodeResolutionFailedError,
    GeocodeServiceError,
    StoreUnavailableError,
)

from .geocoder import GoogleGeocoderAdapter
from .user_records import TinyDBUserRecordAdapter

__all__ = [
    "GoogleGeocoderAdapter",
    "TinyDBUserRecordAdapter",
    "GeocodeResolutionFailedError",
    "GeocodeServiceError",
    "StoreUnavailableError",
]
