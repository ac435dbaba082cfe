from __future__ import annotations

import csv
import sys
from pathlib import Path

import pytest

sys.path.append(str(Path(__file__).resolve().parents[1]))

from timeledger.application import TaskService
from timeledger.core.seed import SeedImportError, import_seed
from timeledger.infrastructure import InMemoryTaskRepository, InMemoryTimeEntryRepository

SEED_FILE = Path(__file__).resolve().parents[1] / "data" / "seed_tasks.csv"


@pytest.fixture()
def service():
    return TaskService(InMemoryTaskRepository(), InMemoryTimeEntryRepository())


def _write_seed(tmp_path: Path, rows: list[dict]) -> Path:
    path = tmp_path / "seed.csv"
    with path.open("w", encoding="utf-8", newline="") as fp:
        writer = csv.DictWriter(fp, fieldnames=["company", "customer", "project", "project_type", "task"])
        writer.writeheader()
        writer.writerows(rows)
    return path


@pytest.mark.parametrize(
    ("customer", "project", "expected"),
    [
        ("Claranet", "Funzionale", ["Attività di portfolio", "Management"]),
        ("Claranet", "Slack time", ["formazione"]),
        ("test customer", "SOR Sviluppo", ["Iterazione 1", "Iterazione 2"]),
    ],
)
def test_bundled_seed_file(service, customer, project, expected):
    import_seed(service, SEED_FILE)
    assert service.list_tasks("it", customer, project) == expected


def test_invalid_rows_are_reported_after_valid_ones(service, tmp_path):
    path = _write_seed(
        tmp_path,
        [
            {"company": "it", "customer": "Acme", "project": "Website", "project_type": "billable", "task": "design"},
            {"company": "it", "customer": "Ac#me", "project": "Website", "project_type": "billable", "task": "design"},
            {"company": "it", "customer": "Acme", "project": "Mobile", "project_type": "", "task": "qa"},
        ],
    )

    with pytest.raises(SeedImportError) as excinfo:
        import_seed(service, path)

    assert excinfo.value.imported == 1
    assert [row for row, _ in excinfo.value.failures] == [3, 4]
    assert service.list_tasks("it", "Acme", "Website") == ["design"]


def test_missing_columns(service, tmp_path):
    path = tmp_path / "seed.csv"
    path.write_text("company,customer,task\nit,Acme,design\n", encoding="utf-8")
    with pytest.raises(ValueError, match="project"):
        import_seed(service, path)
