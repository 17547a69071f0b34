"""Tests for switchyard.audit — security event sink."""

from collections.abc import Iterator

import pytest

from switchyard.audit import SecurityEvent, emit_security_event, set_security_event_sink


@pytest.fixture
def events() -> Iterator[list[SecurityEvent]]:
    captured: list[SecurityEvent] = []
    set_security_event_sink(captured.append)
    yield captured
    set_security_event_sink(None)


class TestSecurityEvents:
    def test_no_sink_is_noop(self) -> None:
        set_security_event_sink(None)
        emit_security_event("auth.unauthenticated")

    def test_event_delivered(self, events: list[SecurityEvent]) -> None:
        emit_security_event(
            "validation.failed", method="POST", path="/products", details={"fields": ["name"]}
        )
        assert len(events) == 1
        event = events[0]
        assert event.name == "validation.failed"
        assert event.method == "POST"
        assert event.path == "/products"
        assert event.details == {"fields": ["name"]}
        assert event.timestamp > 0

    def test_details_default_empty(self, events: list[SecurityEvent]) -> None:
        emit_security_event("auth.unauthenticated")
        assert events[0].details == {}
