"""Tests for intent identifier parsing."""

import pytest

from psychic_engine.core.intents import IntentType, parse_intent


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("input.welcome", IntentType.WELCOME),
        ("request_name_permission", IntentType.REQUEST_NAME_PERMISSION),
        ("request_location_permission", IntentType.REQUEST_LOCATION_PERMISSION),
        ("read_mind", IntentType.READ_MIND),
        ("deeplink.unknown", IntentType.UNHANDLED_DEEP_LINK),
        ("new_surface", IntentType.NEW_SURFACE),
    ],
)
def test_parse_intent_known_identifiers(raw: str, expected: IntentType) -> None:
    assert parse_intent(raw) is expected


def test_parse_intent_accepts_display_name_aliases() -> None:
    assert parse_intent("Default Welcome Intent") is IntentType.WELCOME
    assert parse_intent("handle_permission") is IntentType.READ_MIND
    assert parse_intent("Unrecognized Deep Link Fallback") is IntentType.UNHANDLED_DEEP_LINK


@pytest.mark.parametrize("raw", [None, "", "   ", "does.not.exist"])
def test_parse_intent_unknown_returns_none(raw) -> None:
    assert parse_intent(raw) is None
