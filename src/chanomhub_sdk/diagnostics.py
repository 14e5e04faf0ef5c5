"""
Diagnostic sinks.

Transport and auth code record structured events through a single sink
passed in at construction. The default sink drops everything.
"""
import logging
from typing import List, Optional, Protocol, runtime_checkable

from .types import DiagnosticsEvent


@runtime_checkable
class DiagnosticSink(Protocol):
    """Receives diagnostics events."""
    def record(self, event: DiagnosticsEvent) -> None: ...


class NullDiagnosticSink:
    def record(self, event: DiagnosticsEvent) -> None:
        return None


class LoggingDiagnosticSink:
    """Forward events to a logger; errors at ERROR, everything else at DEBUG."""

    def __init__(self, logger: Optional[logging.Logger] = None):
        self._logger = logger or logging.getLogger("chanomhub_sdk.diagnostics")

    def record(self, event: DiagnosticsEvent) -> None:
        level = logging.ERROR if event.error else logging.DEBUG
        self._logger.log(
            level,
            "[Diagnostics] %s method=%s url=%s status=%s duration=%s error=%s",
            event.name,
            event.method,
            event.url,
            event.status,
            None if event.duration is None else round(event.duration, 4),
            event.error,
        )


class RecordingDiagnosticSink:
    """Keep events in memory so callers (and tests) can inspect them."""

    def __init__(self) -> None:
        self.events: List[DiagnosticsEvent] = []

    def record(self, event: DiagnosticsEvent) -> None:
        self.events.append(event)

    def names(self) -> List[str]:
        return [e.name for e in self.events]

    def clear(self) -> None:
        self.events.clear()
