from __future__ import annotations

import logging
from typing import Iterable

from timeledger.domain import SEPARATOR, TimeEntryRecord, TimeEntryRow

logger = logging.getLogger(__name__)


def decode_entry(entry: TimeEntryRecord) -> list[TimeEntryRow]:
    """Split each ``customer#project#task#hours`` line of a booked entry."""

    rows: list[TimeEntryRow] = []
    for line in entry.tasks:
        parts = line.split(SEPARATOR)
        if len(parts) < 4:
            logger.warning("skipping malformed time entry line %r (uid=%s, date=%s)", line, entry.uid, entry.date)
            continue
        customer, project, task, hours = parts[:4]
        try:
            parsed_hours = float(hours)
        except ValueError:
            logger.warning("skipping time entry line with invalid hours %r (uid=%s)", line, entry.uid)
            continue
        rows.append(
            TimeEntryRow(
                user=entry.uid,
                date=entry.date,
                company=entry.company,
                customer=customer,
                project=project,
                task=task,
                hours=parsed_hours,
            )
        )
    return rows


def decode_entries(entries: Iterable[TimeEntryRecord]) -> list[TimeEntryRow]:
    rows: list[TimeEntryRow] = []
    for entry in entries:
        rows.extend(decode_entry(entry))
    return rows


def is_project_assigned(rows: Iterable[TimeEntryRow], customer: str, project: str) -> bool:
    return any(row.customer == customer and row.project == project for row in rows)


def is_task_assigned(rows: Iterable[TimeEntryRow], customer: str, project: str, task: str) -> bool:
    return any(row.customer == customer and row.project == project and row.task == task for row in rows)
