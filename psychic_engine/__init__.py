"""Psychic fulfillment engine package."""

PSYCHIC_ENGINE_VERSION = "1.0.0"

__all__ = ["PSYCHIC_ENGINE_VERSION"]
