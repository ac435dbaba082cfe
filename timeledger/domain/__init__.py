"""Domain layer definitions."""

from .errors import (
    AlreadyAssignedError,
    AlreadyExistsError,
    InvalidArgumentError,
    InvalidCharacterError,
    MissingFieldError,
    NotFoundError,
    TaxonomyError,
    TransientStoreError,
)
from .tasks import SEPARATOR, TaskRecord, TimeEntryRecord, TimeEntryRow, join_key, split_key

__all__ = [
    "SEPARATOR",
    "AlreadyAssignedError",
    "AlreadyExistsError",
    "InvalidArgumentError",
    "InvalidCharacterError",
    "MissingFieldError",
    "NotFoundError",
    "TaskRecord",
    "TaxonomyError",
    "TimeEntryRecord",
    "TimeEntryRow",
    "TransientStoreError",
    "join_key",
    "split_key",
]
