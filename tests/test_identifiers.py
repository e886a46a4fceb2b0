"""Tests for store-key escaping and log-safe identifier helpers."""

from psychic_engine.core import identifiers
from psychic_engine.core.identifiers import (
    PSEUDONYM_LENGTH,
    clear_log_safe_user_cache,
    encode_store_key,
    get_log_safe_user_id,
    user_record_path,
)


def test_encode_store_key_escapes_every_unsafe_character() -> None:
    """Each store-unsafe character is percent-escaped."""
    assert encode_store_key("a.b#c$d/e[f]g") == "a%2Eb%23c%24d%2Fe%5Bf%5Dg"


def test_encode_store_key_escapes_percent_first() -> None:
    """An existing escape sequence stays distinguishable from an escaped dot."""
    assert encode_store_key("%2E") == "%252E"
    assert encode_store_key(".") == "%2E"
    assert encode_store_key("%2E") != encode_store_key(".")


def test_encode_store_key_leaves_safe_ids_alone() -> None:
    assert encode_store_key("ABwppHE_user-42") == "ABwppHE_user-42"


def test_user_record_path_prefixes_users_collection() -> None:
    assert user_record_path("jane.doe") == "users/jane%2Edoe"


def test_get_log_safe_user_id_is_deterministic(monkeypatch) -> None:
    """Same user id + secret should always yield the same pseudonym."""
    monkeypatch.setattr(identifiers.settings, "LOG_PSEUDONYM_SECRET", "deterministic-secret")
    clear_log_safe_user_cache()

    token_first = get_log_safe_user_id("user-1234")
    token_second = get_log_safe_user_id("user-1234")

    assert token_first == token_second
    assert len(token_first) == PSEUDONYM_LENGTH
    clear_log_safe_user_cache()


def test_get_log_safe_user_id_varies_by_input_and_secret() -> None:
    """Changing the user id or secret should change the pseudonym output."""
    clear_log_safe_user_cache()
    base_token = get_log_safe_user_id("user-1234", secret="deterministic-secret")
    different_secret_token = get_log_safe_user_id("user-1234", secret="alternate-secret")
    different_user_token = get_log_safe_user_id("user-4321", secret="deterministic-secret")

    assert base_token != different_secret_token
    assert base_token != different_user_token
    clear_log_safe_user_cache()


def test_get_log_safe_user_id_uses_configured_secret(monkeypatch) -> None:
    clear_log_safe_user_cache()
    monkeypatch.setattr(identifiers.settings, "LOG_PSEUDONYM_SECRET", "configured")

    assert get_log_safe_user_id("user-1") == get_log_safe_user_id("user-1", secret="configured")
    clear_log_safe_user_cache()
