"""Security audit events.

Small opt-in event channel for authentication and validation telemetry.
Applications can register a sink to forward events to logs, metrics, or SIEM::

    from switchyard.audit import set_security_event_sink

    set_security_event_sink(lambda event: audit_log.append(event))

The dispatcher emits:

- ``auth.unauthenticated`` — a non-public route without an authenticated session
- ``validation.failed`` — submitted data failed validation (``details["fields"]``)
"""

import threading
from collections.abc import Callable
from dataclasses import dataclass, field
from time import time
from typing import Any, TypeAlias


@dataclass(frozen=True, slots=True)
class SecurityEvent:
    """A structured security event."""

    name: str
    timestamp: float = field(default_factory=time)
    path: str | None = None
    method: str | None = None
    details: dict[str, Any] = field(default_factory=dict)


SecurityEventSink: TypeAlias = Callable[[SecurityEvent], None]


_sink_lock = threading.Lock()
_sink: SecurityEventSink | None = None


def set_security_event_sink(sink: SecurityEventSink | None) -> None:
    """Set a process-wide sink for security events.

    Pass ``None`` to disable event delivery.
    """
    global _sink
    with _sink_lock:
        _sink = sink


def emit_security_event(
    name: str,
    *,
    method: str | None = None,
    path: str | None = None,
    details: dict[str, Any] | None = None,
) -> None:
    """Emit a best-effort security event to the configured sink."""
    with _sink_lock:
        sink = _sink
    if sink is None:
        return

    sink(SecurityEvent(name=name, path=path, method=method, details=details or {}))
