"""Read access to booked time entries."""
from __future__ import annotations

import threading
from typing import Iterable, Protocol

from timeledger.domain import TimeEntryRecord


class TimeEntryRepository(Protocol):
    """Read-only contract consumed by the consistency engine."""

    def list_entries(self, company: str) -> list[TimeEntryRecord]: ...

    def reset(self) -> None: ...


class InMemoryTimeEntryRepository:
    def __init__(self, entries: Iterable[TimeEntryRecord] = ()) -> None:
        self._entries: list[TimeEntryRecord] = list(entries)
        self._lock = threading.Lock()

    def add_entry(self, entry: TimeEntryRecord) -> None:
        with self._lock:
            self._entries.append(entry)

    def list_entries(self, company: str) -> list[TimeEntryRecord]:
        with self._lock:
            return [entry for entry in self._entries if entry.company == company]

    def reset(self) -> None:
        with self._lock:
            self._entries.clear()
