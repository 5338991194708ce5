"""A bounded record of recent reports, used to drop duplicates."""

from __future__ import annotations

import threading
from collections import deque

from txbot.reportables import Report


class ReportQueue:
    """Keeps the last ``size`` reports; the oldest is dropped when full."""

    def __init__(self, size: int = 100) -> None:
        if size < 1:
            raise ValueError("queue size must be at least 1")
        self.size = size
        self._data: deque[Report] = deque(maxlen=size)
        self._lock = threading.Lock()

    def __len__(self) -> int:
        return len(self._data)

    def __contains__(self, report: object) -> bool:
        return isinstance(report, Report) and self.has(report)

    def add(self, report: Report) -> None:
        """Remember a report, evicting the oldest one if the queue is full."""
        with self._lock:
            self._data.append(report)

    def has(self, report: Report) -> bool:
        """Whether a report with the same hash has been seen recently."""
        wanted = report.reportable.get_hash()
        with self._lock:
            return any(item.reportable.get_hash() == wanted for item in self._data)