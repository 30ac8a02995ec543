"""Progress events emitted while an analysis runs."""

import logging
from dataclasses import dataclass
from typing import List, Optional, Protocol

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ProgressEvent:
    """One milestone of an analysis run; percent is 0..100."""

    status: str
    percent: int
    detail: str = ''


INITIAL_EVENT = ProgressEvent('Initializing', 0, 'Starting analysis...')


class ProgressReporter(Protocol):
    def report(self, event: ProgressEvent) -> None:
        ...


class NullReporter:
    """Discards every event."""

    def report(self, event: ProgressEvent) -> None:
        pass


class LoggingReporter:
    """Writes events to the log at INFO level."""

    def report(self, event: ProgressEvent) -> None:
        logger.info("[%3d%%] %s: %s", event.percent, event.status, event.detail)


class RecordingReporter:
    """Keeps every event so callers can poll the latest one."""

    def __init__(self):
        self.events: List[ProgressEvent] = []

    def report(self, event: ProgressEvent) -> None:
        self.events.append(event)

    @property
    def latest(self) -> ProgressEvent:
        return self.events[-1] if self.events else INITIAL_EVENT


class ProgressEmitter:
    """
    Serializes events to a reporter without ever lowering the percentage.

    A late event carrying a smaller percent is reported with the highest
    percent seen so far; percent is clamped to 0..100.
    """

    def __init__(self, reporter: Optional[ProgressReporter] = None):
        self.reporter = reporter or NullReporter()
        self.percent = 0

    def emit(self, status: str, percent: float, detail: str = '') -> ProgressEvent:
        self.percent = max(self.percent, min(100, max(0, int(percent))))
        event = ProgressEvent(status, self.percent, detail)
        self.reporter.report(event)
        return event
