"""Logging setup for the service.

Each ``log_level_*`` setting controls a group of loggers. ``setup_logging``
is called once from the FastAPI lifespan; tests may call it directly with
their own Settings.
"""

import logging
import sys

from learnpass.config import Settings, get_settings

LOG_FORMAT = "%(asctime)s %(levelname)-8s %(name)s: %(message)s"

# Settings field → logger names it governs.
LOGGER_GROUPS: dict[str, tuple[str, ...]] = {
    "log_level_sql": ("sqlalchemy.engine", "sqlalchemy.pool", "aiosqlite", "asyncpg"),
    "log_level_http": ("httpx", "httpcore"),
    "log_level_uvicorn": ("uvicorn", "uvicorn.access", "uvicorn.error"),
    "log_level_workflow": ("learnpass.workflow", "learnpass.application.services"),
    "log_level_gateway": ("learnpass.infrastructure.razorpay",),
}


def to_level(name: str | None, default: int = logging.INFO) -> int:
    """Map a level name such as ``"debug"`` to its logging constant."""
    value = logging.getLevelName((name or "").upper())
    return value if isinstance(value, int) else default


def setup_logging(settings: Settings | None = None) -> dict[str, int]:
    """Apply the configured levels and return them keyed by logger name."""
    settings = settings or get_settings()

    root = logging.getLogger()
    root.setLevel(to_level(settings.log_level))
    if not root.handlers:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        root.addHandler(handler)

    applied: dict[str, int] = {}
    for field_name, logger_names in LOGGER_GROUPS.items():
        level = to_level(getattr(settings, field_name, None))
        for name in logger_names:
            logging.getLogger(name).setLevel(level)
            applied[name] = level

    logging.getLogger(__name__).debug(
        "Logging configured (root=%s, workflow=%s, gateway=%s)",
        settings.log_level, settings.log_level_workflow, settings.log_level_gateway,
    )
    return applied
