"""
Tests for structlog processors and request context
"""

from trackly.logging import (
    REDACTED,
    add_request_context,
    bind_user_id,
    clear_request_context,
    redact_sensitive,
    set_request_context,
)


def test_credentials_are_redacted():
    event = redact_sensitive(
        None,
        "info",
        {"event": "User updated", "password": "hunter2", "Authorization": "Bearer x", "id": "1"},
    )

    assert event == {
        "event": "User updated",
        "password": REDACTED,
        "Authorization": REDACTED,
        "id": "1",
    }


def test_request_context_is_attached_and_cleared():
    request_id = set_request_context("req-1")
    bind_user_id("user-1")
    try:
        event = add_request_context(None, "info", {"event": "x"})
        assert request_id == "req-1"
        assert event["request_id"] == "req-1"
        assert event["user_id"] == "user-1"
    finally:
        clear_request_context()

    assert add_request_context(None, "info", {"event": "x"}) == {"event": "x"}


def test_request_id_is_generated():
    try:
        assert set_request_context()
    finally:
        clear_request_context()
