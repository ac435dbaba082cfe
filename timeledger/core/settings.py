from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path

DEFAULT_CORS_ORIGINS = ["http://localhost:3000", "http://127.0.0.1:3000"]


@dataclass(slots=True)
class Settings:
    store: str = "memory"
    db_path: Path = Path("timeledger.duckdb")
    log_level: str = "INFO"
    cors_origins: list[str] = field(default_factory=lambda: list(DEFAULT_CORS_ORIGINS))


def load_settings() -> Settings:
    """Read runtime settings from the environment."""

    store = (os.getenv("TIMELEDGER_STORE") or "memory").strip().lower()
    if store not in {"memory", "duckdb"}:
        raise ValueError(f"TIMELEDGER_STORE must be memory or duckdb, got {store!r}")

    db_path = Path(os.getenv("TIMELEDGER_DB_PATH") or "timeledger.duckdb").expanduser()

    origins_env = os.getenv("API_CORS_ORIGINS", "")
    origins = [origin.strip() for origin in origins_env.split(",") if origin.strip()]

    return Settings(
        store=store,
        db_path=db_path,
        log_level=(os.getenv("TIMELEDGER_LOG_LEVEL") or "INFO").upper(),
        cors_origins=origins or list(DEFAULT_CORS_ORIGINS),
    )
