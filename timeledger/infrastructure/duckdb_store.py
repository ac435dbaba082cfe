"""DuckDB-backed taxonomy and time-entry stores."""
from __future__ import annotations

import json
import logging
import threading
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Iterator

import duckdb

from timeledger.domain import (
    AlreadyExistsError,
    NotFoundError,
    TaskRecord,
    TimeEntryRecord,
    TransientStoreError,
)

logger = logging.getLogger(__name__)

TASK_TABLE = """
CREATE TABLE IF NOT EXISTS task (
    company VARCHAR NOT NULL,
    customer_project VARCHAR NOT NULL,
    project_type VARCHAR NOT NULL,
    tasks VARCHAR NOT NULL,
    inactive BOOLEAN NOT NULL DEFAULT FALSE,
    PRIMARY KEY (company, customer_project)
)
"""

TIME_ENTRY_TABLE = """
CREATE TABLE IF NOT EXISTS time_entry (
    uid VARCHAR NOT NULL,
    entry_date VARCHAR NOT NULL,
    company VARCHAR NOT NULL,
    tasks VARCHAR[] NOT NULL
)
"""


def _encode_tasks(tasks: set[str]) -> str:
    return json.dumps(sorted(tasks), ensure_ascii=False)


def _decode_tasks(value: str | None) -> set[str]:
    if not value:
        return set()
    return set(json.loads(value))


def _is_key_conflict(exc: duckdb.Error) -> bool:
    # NOT NULL and CHECK failures are also ConstraintException; only duplicate keys count
    if isinstance(exc, duckdb.TransactionException):
        return True
    return isinstance(exc, duckdb.ConstraintException) and "duplicate key" in str(exc).lower()


class _DuckDBStore:
    """Connection handling shared by the DuckDB repositories.

    Each repository owns a cursor and a lock; a cursor must not be used
    from several threads at once.
    """

    schema: str = ""

    def __init__(
        self,
        database: str | Path = ":memory:",
        *,
        connection: duckdb.DuckDBPyConnection | None = None,
    ) -> None:
        try:
            # a cursor is an independent connection to the same database
            self._conn = connection.cursor() if connection is not None else duckdb.connect(str(database))
            self._conn.execute(self.schema)
        except duckdb.Error as exc:
            raise TransientStoreError(f"could not open store {database}: {exc}") from exc
        self._lock = threading.Lock()

    @contextmanager
    def _read(self) -> Iterator[duckdb.DuckDBPyConnection]:
        with self._lock:
            try:
                yield self._conn
            except duckdb.Error as exc:
                raise TransientStoreError(f"store read failed: {exc}") from exc

    @contextmanager
    def _transaction(self, *, conflict: str | None = None) -> Iterator[duckdb.DuckDBPyConnection]:
        """Run a transaction; with ``conflict`` set, key conflicts raise AlreadyExistsError."""
        with self._lock:
            try:
                self._conn.begin()
                try:
                    yield self._conn
                except BaseException:
                    self._conn.rollback()
                    raise
                self._conn.commit()
            except duckdb.Error as exc:
                if conflict is not None and _is_key_conflict(exc):
                    raise AlreadyExistsError(conflict) from exc
                raise TransientStoreError(f"store transaction aborted: {exc}") from exc

    def close(self) -> None:
        self._conn.close()


class DuckDBTaskRepository(_DuckDBStore):
    schema = TASK_TABLE

    @staticmethod
    def _to_record(row: tuple[Any, ...]) -> TaskRecord:
        company, customer_project, project_type, tasks, inactive = row
        return TaskRecord(
            company=company,
            customer_project=customer_project,
            project_type=project_type,
            tasks=_decode_tasks(tasks),
            inactive=bool(inactive),
        )

    @staticmethod
    def _select(
        company: str,
        *,
        customer_project: str | None = None,
        prefix: str | None = None,
        include_inactive: bool = False,
    ) -> tuple[str, list[Any]]:
        """Build the single SELECT every read goes through."""

        clauses = ["company = ?"]
        params: list[Any] = [company]
        if customer_project is not None:
            clauses.append("customer_project = ?")
            params.append(customer_project)
        if prefix is not None:
            clauses.append("starts_with(customer_project, ?)")
            params.append(prefix)
        if not include_inactive:
            clauses.append("NOT inactive")
        sql = (
            "SELECT company, customer_project, project_type, tasks, inactive FROM task WHERE "
            + " AND ".join(clauses)
            + " ORDER BY customer_project"
        )
        return sql, params

    def _fetch(self, conn: duckdb.DuckDBPyConnection, company: str, customer_project: str) -> TaskRecord | None:
        sql, params = self._select(company, customer_project=customer_project, include_inactive=True)
        row = conn.execute(sql, params).fetchone()
        return self._to_record(row) if row else None

    # ------------------------------------------------------------------
    # reads
    # ------------------------------------------------------------------
    def get(self, company: str, customer_project: str) -> TaskRecord | None:
        with self._read() as conn:
            return self._fetch(conn, company, customer_project)

    def query(
        self,
        company: str,
        *,
        customer_project: str | None = None,
        prefix: str | None = None,
        include_inactive: bool = False,
    ) -> list[TaskRecord]:
        sql, params = self._select(
            company,
            customer_project=customer_project,
            prefix=prefix,
            include_inactive=include_inactive,
        )
        with self._read() as conn:
            return [self._to_record(row) for row in conn.execute(sql, params).fetchall()]

    # ------------------------------------------------------------------
    # writes
    # ------------------------------------------------------------------
    def add_task(self, company: str, customer_project: str, project_type: str, task: str) -> None:
        with self._transaction() as conn:
            record = self._fetch(conn, company, customer_project)
            if record is None:
                conn.execute(
                    "INSERT INTO task VALUES (?, ?, ?, ?, FALSE)",
                    [company, customer_project, project_type, _encode_tasks({task})],
                )
                return
            conn.execute(
                "UPDATE task SET project_type = ?, tasks = ?, inactive = FALSE "
                "WHERE company = ? AND customer_project = ?",
                [project_type, _encode_tasks(record.tasks | {task}), company, customer_project],
            )

    def put_tasks(self, company: str, customer_project: str, tasks: set[str]) -> None:
        with self._transaction() as conn:
            if self._fetch(conn, company, customer_project) is None:
                raise NotFoundError(f"customer project {customer_project} not found")
            conn.execute(
                "UPDATE task SET tasks = ? WHERE company = ? AND customer_project = ?",
                [_encode_tasks(tasks), company, customer_project],
            )

    def set_inactive(self, company: str, customer_project: str, inactive: bool) -> bool:
        with self._transaction() as conn:
            if self._fetch(conn, company, customer_project) is None:
                return False
            conn.execute(
                "UPDATE task SET inactive = ? WHERE company = ? AND customer_project = ?",
                [inactive, company, customer_project],
            )
            return True

    def rename(self, company: str, old_customer_project: str, record: TaskRecord) -> None:
        """Delete the old key and upsert ``record`` inside one transaction."""
        with self._transaction(conflict="Customer project already exists") as conn:
            if self._fetch(conn, company, old_customer_project) is None:
                raise NotFoundError(f"customer project {old_customer_project} not found")
            current = self._fetch(conn, company, record.customer_project)
            if current is not None and not current.inactive:
                raise AlreadyExistsError("Customer project already exists")

            conn.execute(
                "DELETE FROM task WHERE company = ? AND customer_project = ?",
                [company, old_customer_project],
            )
            values = [record.project_type, _encode_tasks(record.tasks), company, record.customer_project]
            if current is None:
                conn.execute(
                    "INSERT INTO task (project_type, tasks, company, customer_project, inactive) "
                    "VALUES (?, ?, ?, ?, FALSE)",
                    values,
                )
            else:
                conn.execute(
                    "UPDATE task SET project_type = ?, tasks = ?, inactive = FALSE "
                    "WHERE company = ? AND customer_project = ?",
                    values,
                )
        logger.debug("renamed %s to %s", old_customer_project, record.customer_project)

    def reset(self) -> None:
        with self._transaction() as conn:
            conn.execute("DELETE FROM task")


class DuckDBTimeEntryRepository(_DuckDBStore):
    """Time entries as booked by the time-entry service; read-only for the engine."""

    schema = TIME_ENTRY_TABLE

    def add_entry(self, entry: TimeEntryRecord) -> None:
        with self._transaction() as conn:
            conn.execute(
                "INSERT INTO time_entry VALUES (?, ?, ?, ?)",
                [entry.uid, entry.date, entry.company, list(entry.tasks)],
            )

    def list_entries(self, company: str) -> list[TimeEntryRecord]:
        with self._read() as conn:
            rows = conn.execute(
                "SELECT uid, entry_date, company, tasks FROM time_entry WHERE company = ? ORDER BY entry_date, uid",
                [company],
            ).fetchall()
        return [
            TimeEntryRecord(uid=uid, date=entry_date, company=row_company, tasks=list(tasks or []))
            for uid, entry_date, row_company, tasks in rows
        ]

    def reset(self) -> None:
        with self._transaction() as conn:
            conn.execute("DELETE FROM time_entry")
