"""Error taxonomy raised by the consistency engine and its stores."""
from __future__ import annotations


class TaxonomyError(Exception):
    """Base class for every error the engine surfaces to callers."""

    kind = "TaxonomyError"
    status_code = 400


class InvalidCharacterError(TaxonomyError):
    """A customer, project or task name contains the reserved separator."""

    kind = "InvalidCharacter"


class MissingFieldError(TaxonomyError):
    kind = "MissingField"


class InvalidArgumentError(TaxonomyError):
    """Zero or both of new customer / new project were supplied."""

    kind = "InvalidArgument"


class AlreadyExistsError(TaxonomyError):
    kind = "AlreadyExists"
    status_code = 409


class AlreadyAssignedError(TaxonomyError):
    """Historical time entries already reference the target combination."""

    kind = "AlreadyAssigned"
    status_code = 409


class NotFoundError(TaxonomyError):
    kind = "NotFound"
    status_code = 404


class TransientStoreError(TaxonomyError):
    """The backing store is unreachable or aborted the operation."""

    kind = "Transient"
    status_code = 503
