"""Domain entities for the customer/project/task taxonomy."""
from __future__ import annotations

from dataclasses import dataclass, field

SEPARATOR = "#"


def join_key(customer: str, project: str) -> str:
    """Build the ``customer#project`` composite key."""

    return f"{customer}{SEPARATOR}{project}"


def split_key(customer_project: str) -> tuple[str, str]:
    customer, _, project = customer_project.partition(SEPARATOR)
    return customer, project


@dataclass(slots=True)
class TaskRecord:
    """Named tasks booked under one customer/project of a company."""

    company: str
    customer_project: str
    project_type: str
    tasks: set[str] = field(default_factory=set)
    inactive: bool = False

    @property
    def customer(self) -> str:
        return split_key(self.customer_project)[0]

    @property
    def project(self) -> str:
        return split_key(self.customer_project)[1]

    def copy(self) -> TaskRecord:
        return TaskRecord(
            company=self.company,
            customer_project=self.customer_project,
            project_type=self.project_type,
            tasks=set(self.tasks),
            inactive=self.inactive,
        )


@dataclass(slots=True)
class TimeEntryRecord:
    """A booked day for one user, as stored by the time-entry service."""

    uid: str
    date: str
    company: str
    tasks: list[str] = field(default_factory=list)


@dataclass(slots=True)
class TimeEntryRow:
    """One decoded ``customer#project#task#hours`` line of a time entry."""

    user: str
    date: str
    company: str
    customer: str
    project: str
    task: str
    hours: float
