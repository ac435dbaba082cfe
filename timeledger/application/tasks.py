"""Application service layer: the task-taxonomy consistency engine."""
from __future__ import annotations

import logging

import duckdb

from timeledger.core.entries import decode_entries, is_project_assigned, is_task_assigned
from timeledger.core.settings import Settings
from timeledger.core.validation import ensure_no_separator, ensure_present, pick_rename_target
from timeledger.domain import (
    SEPARATOR,
    AlreadyAssignedError,
    AlreadyExistsError,
    NotFoundError,
    TaskRecord,
    TimeEntryRow,
    TransientStoreError,
    join_key,
)
from timeledger.infrastructure import (
    DuckDBTaskRepository,
    DuckDBTimeEntryRepository,
    InMemoryTaskRepository,
    InMemoryTimeEntryRepository,
    TaskRepository,
    TimeEntryRepository,
)

logger = logging.getLogger(__name__)


class TaskService:
    """Creates, renames and retires taxonomy records.

    Every mutation validates first and writes once; a rejected operation
    leaves the taxonomy store untouched.
    """

    def __init__(self, tasks: TaskRepository, time_entries: TimeEntryRepository) -> None:
        self._tasks = tasks
        self._time_entries = time_entries

    # ------------------------------------------------------------------
    # reads
    # ------------------------------------------------------------------
    def list_customers(self, company: str) -> list[str]:
        records = self._tasks.query(company)
        return sorted({record.customer for record in records})

    def list_projects(self, company: str, customer: str) -> list[str]:
        records = self._tasks.query(company, prefix=f"{customer}{SEPARATOR}")
        return sorted(record.project for record in records)

    def list_tasks(self, company: str, customer: str, project: str) -> list[str]:
        records = self._tasks.query(company, customer_project=join_key(customer, project))
        return sorted(task for record in records for task in record.tasks)

    def read_with_type(self, company: str, customer: str, project: str) -> tuple[list[str], str]:
        """Return the tasks and project type, or ``([], "")`` when nothing is stored."""
        records = self._tasks.query(company, customer_project=join_key(customer, project))
        if not records:
            return [], ""
        tasks = sorted(task for record in records for task in record.tasks)
        return tasks, records[0].project_type

    # ------------------------------------------------------------------
    # mutations
    # ------------------------------------------------------------------
    def create_task(self, company: str, customer: str, project: str, *, project_type: str, task: str) -> None:
        ensure_no_separator(customer, project)
        ensure_no_separator(task, what="task")
        ensure_present(project_type, "projectType")
        ensure_present(task, "task")

        self._tasks.add_task(company, join_key(customer, project), project_type, task)
        logger.info("task %r added to %s/%s (%s)", task, customer, project, project_type)

    def update_customer_project(
        self,
        company: str,
        customer: str,
        project: str,
        *,
        new_customer: str | None = None,
        new_project: str | None = None,
    ) -> None:
        component, new_value = pick_rename_target(new_customer, new_project)
        ensure_no_separator(new_value)

        target_customer = new_value if component == "customer" else customer
        target_project = new_value if component == "project" else project
        old_key = join_key(customer, project)
        new_key = join_key(target_customer, target_project)

        if self._tasks.query(company, customer_project=new_key):
            logger.warning("rename of %s rejected: %s already exists", old_key, new_key)
            raise AlreadyExistsError("Customer project already exists")

        if is_project_assigned(self._booked_rows(company), target_customer, target_project):
            logger.warning("rename of %s rejected: %s already has time entries", old_key, new_key)
            raise AlreadyAssignedError("Customer project already assigned")

        tasks, project_type = self.read_with_type(company, customer, project)
        if not tasks:
            raise NotFoundError(f"customer project {old_key} not found")

        record = TaskRecord(
            company=company,
            customer_project=new_key,
            project_type=project_type,
            tasks=set(tasks),
        )
        self._tasks.rename(company, old_key, record)
        logger.info("%s renamed: %s -> %s", component, old_key, new_key)

    def update_task(
        self,
        company: str,
        customer: str,
        project: str,
        *,
        task: str,
        new_task: str | None,
    ) -> None:
        new_task = ensure_present(new_task, "newTask")
        ensure_no_separator(new_task, what="task")

        if is_task_assigned(self._booked_rows(company), customer, project, new_task):
            logger.warning("task rename to %r rejected: already booked on %s/%s", new_task, customer, project)
            raise AlreadyAssignedError("Task already assigned")

        current, _ = self.read_with_type(company, customer, project)
        if new_task in current:
            raise AlreadyExistsError("Task already exists")
        if task not in current:
            raise NotFoundError(f"task {task} not found for {customer}/{project}")

        tasks = set(current)
        tasks.discard(task)
        tasks.add(new_task)
        self._tasks.put_tasks(company, join_key(customer, project), tasks)
        logger.info("task renamed on %s/%s: %r -> %r", customer, project, task, new_task)

    def set_customer_project_inactive(self, company: str, customer: str, project: str, *, inactive: bool) -> None:
        key = join_key(customer, project)
        if not self._tasks.set_inactive(company, key, inactive):
            raise NotFoundError(f"customer project {key} not found")
        logger.info("%s marked %s", key, "inactive" if inactive else "active")

    # ------------------------------------------------------------------
    # helpers
    # ------------------------------------------------------------------
    def _booked_rows(self, company: str) -> list[TimeEntryRow]:
        return decode_entries(self._time_entries.list_entries(company))

    def reset(self) -> None:
        self._tasks.reset()
        self._time_entries.reset()


_service = TaskService(InMemoryTaskRepository(), InMemoryTimeEntryRepository())


def configure_task_service(service: TaskService) -> None:
    """Install the service used by the HTTP routes and scripts."""

    global _service
    _service = service


def get_task_service() -> TaskService:
    """Return the singleton task service for the process."""

    return _service


def reset_task_state() -> None:
    """Reset the configured stores (used in tests)."""

    _service.reset()


def build_task_service(settings: Settings) -> TaskService:
    """Wire a task service to the store selected by ``settings``."""

    if settings.store != "duckdb":
        return TaskService(InMemoryTaskRepository(), InMemoryTimeEntryRepository())

    settings.db_path.parent.mkdir(parents=True, exist_ok=True)
    try:
        connection = duckdb.connect(str(settings.db_path))
    except duckdb.Error as exc:
        raise TransientStoreError(f"could not open store {settings.db_path}: {exc}") from exc
    return TaskService(
        DuckDBTaskRepository(connection=connection),
        DuckDBTimeEntryRepository(connection=connection),
    )
