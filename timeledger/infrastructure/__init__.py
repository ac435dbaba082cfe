"""Infrastructure layer exports."""

from .duckdb_store import DuckDBTaskRepository, DuckDBTimeEntryRepository
from .tasks import InMemoryTaskRepository, TaskRepository
from .time_entries import InMemoryTimeEntryRepository, TimeEntryRepository

__all__ = [
    "DuckDBTaskRepository",
    "DuckDBTimeEntryRepository",
    "InMemoryTaskRepository",
    "InMemoryTimeEntryRepository",
    "TaskRepository",
    "TimeEntryRepository",
]
