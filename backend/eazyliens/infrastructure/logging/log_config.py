"""Centralized logging configuration.

Each noisy subsystem (SQL, outbound HTTP, uvicorn, the change stream) gets
its own level from Settings, so the SQL echo can be silenced without
losing realtime reconnect messages and vice versa.

Usage:
    from eazyliens.infrastructure.logging.log_config import setup_logging
    setup_logging()   # once, from the FastAPI lifespan
"""

import logging
import sys

from eazyliens.config import Settings, get_settings

LOG_FORMAT = "%(asctime)s %(levelname)-8s %(name)s — %(message)s"

# Settings field → logger names it controls
_CATEGORY_MAP: dict[str, tuple[str, ...]] = {
    "log_level_sql": ("sqlalchemy.engine", "sqlalchemy.pool", "aiosqlite", "asyncpg"),
    "log_level_http": ("httpx", "httpcore"),
    "log_level_uvicorn": ("uvicorn", "uvicorn.access", "uvicorn.error"),
    "log_level_realtime": (
        "eazyliens.application.services.change_notifier",
        "eazyliens.client.realtime",
    ),
}


def setup_logging(settings: Settings | None = None) -> None:
    """Apply the root level and every per-category level from settings."""
    settings = settings or get_settings()

    root = logging.getLogger()
    root.setLevel(_parse_level(settings.log_level))
    # uvicorn installs its own handler; a bare process (tests, scripts) has none
    if not root.handlers:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        root.addHandler(handler)

    levels: dict[str, str] = {}
    for field_name, logger_names in _CATEGORY_MAP.items():
        raw_level = getattr(settings, field_name, "INFO")
        levels[field_name] = raw_level
        for name in logger_names:
            logging.getLogger(name).setLevel(_parse_level(raw_level))

    logging.getLogger(__name__).debug("Logging configured — root=%s %s", settings.log_level, levels)


def _parse_level(raw: str) -> int:
    """Convert a level name to a logging constant, defaulting to INFO."""
    numeric = getattr(logging, raw.upper(), None)
    if isinstance(numeric, int):
        return numeric
    return logging.INFO
