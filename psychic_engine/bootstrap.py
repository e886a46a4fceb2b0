"""Application bootstrap helpers for assembling the service container."""

from __future__ import annotations

from psychic_engine.adapters.geocoder import GoogleGeocoderAdapter
from psychic_engine.adapters.user_records import TinyDBUserRecordAdapter
from psychic_engine.services import ServiceContainer, build_default_services


def build_default_service_container() -> ServiceContainer:
    """Return the default service container wired to production adapters."""

    return build_default_services(
        user_records_port=TinyDBUserRecordAdapter(),
        geocoder_port=GoogleGeocoderAdapter(),
    )


__all__ = ["build_default_service_container"]
