"""Spoken responses and display cards used by the psychic intents."""

from __future__ import annotations

from typing import Optional
from urllib.parse import urlencode
from xml.sax.saxutils import escape

from psychic_engine.core.config import config
from psychic_engine.core.models import Image

PERMISSION_REASON = "To read your mind"
NEW_SURFACE_CONTEXT = "To show you your location"
NOTIFICATION_TEXT = "See you where you are..."
MAP_ALT_TEXT = "City Map"

GREET_USER = (
    "<speak>Welcome to your Psychic! <break time=\"500ms\"/> "
    "My mind is more powerful than you know. "
    "I wonder which of your secrets I shall unlock. "
    "Would you prefer I guess your name, or your location?</speak>"
)

READ_MIND_ERROR = (
    "<speak>Wow! <break time=\"1s\"/> "
    "This has never happened before. I cannot read your mind. "
    "I need more practice. Ask me again later.</speak>"
)

UNRECOGNIZED_INTENT = (
    "<speak>Hmm. <break time=\"500ms\"/> "
    "My crystal ball has gone cloudy and I cannot tell what you are asking. "
    "Please try again later.</speak>"
)


def _ssml_text(value: str) -> str:
    return escape(value.strip())


def say_name(name: str) -> str:
    return (
        "<speak>I am reading your mind now. <break time=\"2s\"/> "
        f"This is easy, you are {_ssml_text(name)}. <break time=\"500ms\"/> "
        "I hope I pronounced that right. <break time=\"500ms\"/> "
        "Okay! I am off to read more minds.</speak>"
    )


def say_location(city: str) -> str:
    return (
        "<speak>I am reading your mind now. <break time=\"2s\"/> "
        f"This is easy, you are in {_ssml_text(city)}. <break time=\"500ms\"/> "
        "That is a beautiful town. <break time=\"500ms\"/> "
        "Okay! I am off to read more minds.</speak>"
    )


def unhandled_deep_link(raw_input: str) -> str:
    return (
        "<speak>Welcome to your Psychic! I can guess many things about you, "
        f"but I cannot make guesses about {_ssml_text(raw_input)}. "
        "Instead, I shall guess your name or location. Which do you prefer?</speak>"
    )


def location_map_image(city: str) -> Optional[Image]:
    """Return a static map card centered on ``city``.

    Returns ``None`` when no Maps API key is configured.
    """
    if not config.GOOGLE_MAPS_API_KEY:
        return None
    query = urlencode(
        {
            "key": config.GOOGLE_MAPS_API_KEY,
            "size": config.STATIC_MAPS_SIZE,
            "center": city,
        }
    )
    return Image(url=f"{config.STATIC_MAPS_URL}?{query}", alt=MAP_ALT_TEXT)


__all__ = [
    "PERMISSION_REASON",
    "NEW_SURFACE_CONTEXT",
    "NOTIFICATION_TEXT",
    "MAP_ALT_TEXT",
    "GREET_USER",
    "READ_MIND_ERROR",
    "UNRECOGNIZED_INTENT",
    "say_name",
    "say_location",
    "unhandled_deep_link",
    "location_map_image",
]
