from __future__ import annotations

from timeledger.domain import (
    SEPARATOR,
    InvalidArgumentError,
    InvalidCharacterError,
    MissingFieldError,
)


def ensure_no_separator(*values: str, what: str = "customer or project") -> None:
    if any(SEPARATOR in value for value in values):
        raise InvalidCharacterError(f"{SEPARATOR} is not a valid character for {what}")


def ensure_present(value: str | None, field_name: str) -> str:
    if value is None or not str(value).strip():
        raise MissingFieldError(f"{field_name} is required")
    return value


def pick_rename_target(new_customer: str | None, new_project: str | None) -> tuple[str, str]:
    """Return ``(component, value)`` for a customer or project rename.

    Exactly one of the two values must be supplied.
    """

    if new_customer and new_project:
        raise InvalidArgumentError("new customer and new project cannot both be set")
    if new_customer:
        return "customer", new_customer
    if new_project:
        return "project", new_project
    raise InvalidArgumentError("new customer or new project must be set")
