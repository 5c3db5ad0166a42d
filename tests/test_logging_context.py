"""Tests for logging context propagation."""

from rescue_match.logging.context import (
    clear_log_context,
    get_log_context,
    log_context,
    pop_log_context,
    push_log_context,
)


def test_empty_context():
    """Context starts empty."""
    assert get_log_context() == {}


def test_push_and_pop():
    token = push_log_context(request_id="abc123", match_kind="weighted")
    assert get_log_context() == {"request_id": "abc123", "match_kind": "weighted"}
    pop_log_context(token)
    assert get_log_context() == {}


def test_nested_context():
    token1 = push_log_context(request_id="abc123")
    token2 = push_log_context(match_kind="service")
    assert get_log_context() == {"request_id": "abc123", "match_kind": "service"}

    pop_log_context(token2)
    assert get_log_context() == {"request_id": "abc123"}
    pop_log_context(token1)
    assert get_log_context() == {}


def test_inner_push_overrides_field():
    token1 = push_log_context(match_kind="weighted")
    token2 = push_log_context(match_kind="priority")
    assert get_log_context()["match_kind"] == "priority"
    pop_log_context(token2)
    assert get_log_context()["match_kind"] == "weighted"
    pop_log_context(token1)


def test_context_manager_restores_on_exit():
    with log_context(request_id="abc123"):
        assert get_log_context() == {"request_id": "abc123"}
    assert get_log_context() == {}


def test_context_manager_restores_on_exception():
    try:
        with log_context(request_id="abc123"):
            raise RuntimeError("boom")
    except RuntimeError:
        pass
    assert get_log_context() == {}


def test_get_returns_copy():
    with log_context(request_id="abc123"):
        context = get_log_context()
        context["request_id"] = "changed"
        assert get_log_context()["request_id"] == "abc123"


def test_clear_context():
    push_log_context(request_id="abc123")
    clear_log_context()
    assert get_log_context() == {}
