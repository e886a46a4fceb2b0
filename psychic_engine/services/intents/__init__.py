"""Intent handler implementations."""

from .psychic_intents import build_default_handlers

__all__ = ["build_default_handlers"]
