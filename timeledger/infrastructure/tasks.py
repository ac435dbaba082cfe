"""Infrastructure layer for taxonomy persistence."""
from __future__ import annotations

import threading
from typing import Protocol

from timeledger.domain import AlreadyExistsError, NotFoundError, TaskRecord


class TaskRepository(Protocol):
    """Persistence contract for customer/project task records."""

    def get(self, company: str, customer_project: str) -> TaskRecord | None: ...

    def query(
        self,
        company: str,
        *,
        customer_project: str | None = None,
        prefix: str | None = None,
        include_inactive: bool = False,
    ) -> list[TaskRecord]: ...

    def add_task(self, company: str, customer_project: str, project_type: str, task: str) -> None: ...

    def put_tasks(self, company: str, customer_project: str, tasks: set[str]) -> None: ...

    def set_inactive(self, company: str, customer_project: str, inactive: bool) -> bool: ...

    def rename(self, company: str, old_customer_project: str, record: TaskRecord) -> None: ...

    def reset(self) -> None: ...


def matches(
    record: TaskRecord,
    *,
    customer_project: str | None = None,
    prefix: str | None = None,
    include_inactive: bool = False,
) -> bool:
    """Shared record predicate; inactive records are excluded unless asked for."""

    if record.inactive and not include_inactive:
        return False
    if customer_project is not None and record.customer_project != customer_project:
        return False
    if prefix is not None and not record.customer_project.startswith(prefix):
        return False
    return True


class InMemoryTaskRepository:
    """Simple in-memory repository for fast iteration and tests."""

    def __init__(self) -> None:
        self._records: dict[str, dict[str, TaskRecord]] = {}
        self._lock = threading.Lock()

    # ------------------------------------------------------------------
    # reads
    # ------------------------------------------------------------------
    def get(self, company: str, customer_project: str) -> TaskRecord | None:
        with self._lock:
            record = self._records.get(company, {}).get(customer_project)
            return record.copy() if record else None

    def query(
        self,
        company: str,
        *,
        customer_project: str | None = None,
        prefix: str | None = None,
        include_inactive: bool = False,
    ) -> list[TaskRecord]:
        with self._lock:
            partition = self._records.get(company, {})
            return [
                record.copy()
                for record in partition.values()
                if matches(
                    record,
                    customer_project=customer_project,
                    prefix=prefix,
                    include_inactive=include_inactive,
                )
            ]

    # ------------------------------------------------------------------
    # writes
    # ------------------------------------------------------------------
    def add_task(self, company: str, customer_project: str, project_type: str, task: str) -> None:
        with self._lock:
            partition = self._records.setdefault(company, {})
            record = partition.get(customer_project)
            if record is None:
                record = TaskRecord(company=company, customer_project=customer_project, project_type=project_type)
                partition[customer_project] = record
            record.project_type = project_type
            record.inactive = False
            record.tasks.add(task)

    def put_tasks(self, company: str, customer_project: str, tasks: set[str]) -> None:
        with self._lock:
            record = self._records.get(company, {}).get(customer_project)
            if record is None:
                raise NotFoundError(f"customer project {customer_project} not found")
            record.tasks = set(tasks)

    def set_inactive(self, company: str, customer_project: str, inactive: bool) -> bool:
        with self._lock:
            record = self._records.get(company, {}).get(customer_project)
            if record is None:
                return False
            record.inactive = inactive
            return True

    def rename(self, company: str, old_customer_project: str, record: TaskRecord) -> None:
        """Delete the old key and upsert ``record`` as one all-or-nothing step."""
        with self._lock:
            partition = self._records.get(company, {})
            if old_customer_project not in partition:
                raise NotFoundError(f"customer project {old_customer_project} not found")
            current = partition.get(record.customer_project)
            if current is not None and not current.inactive:
                raise AlreadyExistsError("Customer project already exists")

            staged = dict(partition)
            del staged[old_customer_project]
            replacement = record.copy()
            replacement.company = company
            replacement.inactive = False
            staged[record.customer_project] = replacement
            self._records[company] = staged

    def reset(self) -> None:
        with self._lock:
            self._records.clear()
