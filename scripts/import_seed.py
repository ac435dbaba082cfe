#!/usr/bin/env python
from __future__ import annotations

import argparse
import sys
from pathlib import Path

from timeledger.application import build_task_service
from timeledger.core.observability import configure_logging
from timeledger.core.seed import SeedImportError, import_seed
from timeledger.core.settings import load_settings


def main() -> int:
    parser = argparse.ArgumentParser(description="Bootstrap the task taxonomy from a seed CSV")
    parser.add_argument(
        "--input",
        default=str(Path(__file__).resolve().parents[1] / "data" / "seed_tasks.csv"),
        help="seed CSV with company,customer,project,project_type,task columns",
    )
    parser.add_argument("--db", help="DuckDB file to import into (overrides TIMELEDGER_DB_PATH)")
    args = parser.parse_args()

    settings = load_settings()
    settings.store = "duckdb"
    if args.db:
        settings.db_path = Path(args.db).expanduser()
    configure_logging(settings.log_level)

    service = build_task_service(settings)
    try:
        imported = import_seed(service, Path(args.input))
    except SeedImportError as exc:
        print(f"seed import incomplete: {exc}", file=sys.stderr)
        return 1

    print(f"{imported} seed rows imported into {settings.db_path}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
