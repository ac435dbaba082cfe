"""One-time bootstrap of the taxonomy from a CSV data file."""
from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING

import pandas as pd

from timeledger.domain import TaxonomyError

if TYPE_CHECKING:
    from timeledger.application import TaskService

logger = logging.getLogger(__name__)

SEED_COLUMNS = ["company", "customer", "project", "project_type", "task"]


class SeedImportError(RuntimeError):
    """Raised when some seed rows could not be imported."""

    def __init__(self, failures: list[tuple[int, str]], imported: int) -> None:
        self.failures = failures
        self.imported = imported
        rows = ", ".join(str(row) for row, _ in failures)
        super().__init__(f"{len(failures)} seed row(s) rejected (rows {rows}); {imported} imported")


def read_seed(path: Path) -> pd.DataFrame:
    df = pd.read_csv(path, dtype=str, keep_default_na=False)
    df.columns = [str(column).strip() for column in df.columns]
    missing = [column for column in SEED_COLUMNS if column not in df.columns]
    if missing:
        raise ValueError(f"seed file {path} is missing columns: {', '.join(missing)}")
    return df[SEED_COLUMNS]


def import_seed(service: TaskService, path: Path) -> int:
    """Create every task listed in ``path`` and return the imported row count.

    Valid rows are imported even when others fail; the failures are then
    reported together through :class:`SeedImportError`.
    """

    df = read_seed(path)
    failures: list[tuple[int, str]] = []
    imported = 0
    for index, row in enumerate(df.itertuples(index=False), start=2):
        try:
            service.create_task(
                row.company.strip(),
                row.customer.strip(),
                row.project.strip(),
                project_type=row.project_type.strip(),
                task=row.task.strip(),
            )
        except TaxonomyError as exc:
            logger.warning("seed row %s rejected: %s", index, exc)
            failures.append((index, str(exc)))
            continue
        imported += 1

    logger.info("imported %s seed row(s) from %s", imported, path)
    if failures:
        raise SeedImportError(failures, imported)
    return imported
