"""
Logging setup with the calling company injected into every record.

The company is kept in a context variable so concurrent requests for
different tenants do not mix up their log lines.
"""
from __future__ import annotations

import contextvars
import logging

cv_company = contextvars.ContextVar("company", default="-")


class CompanyContextFilter(logging.Filter):
    """Inject the current company into log records."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.company = cv_company.get() or "-"
        return True


def set_log_company(company: str | None) -> contextvars.Token:
    return cv_company.set(company or "-")


def reset_log_company(token: contextvars.Token) -> None:
    cv_company.reset(token)


def configure_logging(level: int | str = logging.INFO) -> None:
    """Configure root logging for the API process and the CLI scripts."""
    root = logging.getLogger()
    root.handlers.clear()
    root.setLevel(level)

    handler = logging.StreamHandler()
    handler.setFormatter(
        logging.Formatter(
            "%(asctime)s [%(levelname)s] %(name)s | c=%(company)s | %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
    )
    handler.addFilter(CompanyContextFilter())
    root.addHandler(handler)

    # Reduce noise from HTTP libraries
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)

    logging.getLogger(__name__).info("Logging configured (level=%s)", logging.getLevelName(root.level))
