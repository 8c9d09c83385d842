"""
projectinsight/utils/logger.py: per-module loggers with two modes.

file (default): write to logs/<module>.log, rotated at midnight, keeping
``LOG_RETENTION`` days of history, plus an optional console echo.

stdout: console only (leave rotation/aggregation to Docker/systemd).

Settings come from ``LOG_*`` environment variables (or ``.env``) and are
overlaid by the Quart ``app.config`` when an app context is active.
"""

# projectinsight/utils/logger.py
from __future__ import annotations

import logging
import os
import sys
import threading
from logging.handlers import TimedRotatingFileHandler
from pathlib import Path
from typing import Optional

# Quart may not be importable when this util is loaded from a script
try:
    from quart import current_app, has_app_context  # type: ignore
except ImportError:  # pragma: no cover
    current_app = None  # type: ignore
    has_app_context = None  # type: ignore

from pydantic_settings import BaseSettings, SettingsConfigDict


def _detect_project_root() -> Path:
    """
    Find the project root:
    - PROJECT_ROOT env var
    - first parent holding pyproject.toml or .git
    - fallback: two levels above this file
    """
    env_root = os.getenv("PROJECT_ROOT")
    if env_root:
        return Path(env_root).resolve()

    here = Path(__file__).resolve()
    for p in here.parents:
        if (p / "pyproject.toml").exists() or (p / ".git").exists():
            return p
    return here.parents[2]


# ==========
# Settings
# ==========
class LogSettings(BaseSettings):
    """
    Configuration via ENV (prefix LOG_) / .env / Quart app.config overlay

      - LOG_MODE=file|stdout
      - LOG_LEVEL=INFO|DEBUG|WARNING|ERROR
      - LOG_FORMAT="%(asctime)s %(levelname)s %(name)s: %(message)s"
      - LOG_DATEFMT="%Y-%m-%d %H:%M:%S"
      - LOG_RETENTION=90
      - LOG_ROOT_DIR="/path/to/project" (optional; autodetected)
      - LOG_CONSOLE=true|false
      - LOG_CONSOLE_LEVEL=INFO|DEBUG|... (optional; defaults to LOG_LEVEL)
      - LOG_USE_UTC=false|true
    """

    model_config = SettingsConfigDict(
        env_prefix="LOG_",
        extra="ignore",
        env_file=str(_detect_project_root() / ".env"),
        env_file_encoding="utf-8",
    )

    mode: str = "file"
    level: str = "INFO"
    format: str = "%(asctime)s %(levelname)s %(name)s: %(message)s"
    datefmt: str = "%Y-%m-%d %H:%M:%S"
    retention: int = 90
    root_dir: Optional[Path] = None
    console: bool = True
    console_level: Optional[str] = None
    use_utc: bool = False


_OVERLAY_KEYS = (
    "LOG_MODE",
    "LOG_LEVEL",
    "LOG_FORMAT",
    "LOG_DATEFMT",
    "LOG_RETENTION",
    "LOG_ROOT_DIR",
    "LOG_CONSOLE",
    "LOG_CONSOLE_LEVEL",
    "LOG_USE_UTC",
)


def _overlay_with_quart(s: LogSettings) -> LogSettings:
    """Quart app.config wins over ENV/.env when an app context exists."""
    if current_app is None or has_app_context is None or not has_app_context():
        return s

    cfg = current_app.config
    overrides = {
        key[4:].lower(): cfg[key] for key in _OVERLAY_KEYS if key in cfg
    }
    if not overrides:
        return s
    return s.model_copy(update=overrides)


def _to_level(level: str) -> int:
    return getattr(logging, str(level).upper(), logging.INFO)


def _console_handler(s: LogSettings, formatter: logging.Formatter) -> logging.Handler:
    ch = logging.StreamHandler(sys.stdout)
    ch.setLevel(_to_level(s.console_level or s.level))
    ch.setFormatter(formatter)
    return ch


def _file_handler(
    s: LogSettings, name: str, formatter: logging.Formatter
) -> logging.Handler:
    # one file per module, named after the last segment of the logger name
    last_segment = (name.rsplit(".", 1)[-1] or "app").replace(":", "_")
    log_dir = (s.root_dir or _detect_project_root()) / "logs"
    log_dir.mkdir(parents=True, exist_ok=True)

    fh = TimedRotatingFileHandler(
        filename=str(log_dir / f"{last_segment}.log"),
        when="midnight",
        backupCount=int(s.retention),
        encoding="utf-8",
        utc=bool(s.use_utc),
    )
    fh.setLevel(_to_level(s.level))
    fh.setFormatter(formatter)
    return fh


# ===================================
# get_logger(name): lazy & race-safe
# ===================================
_init_lock = threading.Lock()
_inited_loggers: set[str] = set()


def get_logger(name: str) -> logging.Logger:
    """
    Return a configured logger:
      - file mode: logs/<last-segment>.log, daily rotation + retention
      - stdout mode: console only
      - idempotent & thread-safe (no duplicated handlers)
      - overlays Quart app.config when called inside an app context
    """
    s = _overlay_with_quart(LogSettings())
    mode = (s.mode or "file").lower().strip()

    logger = logging.getLogger(name)
    logger.setLevel(_to_level(s.level))
    logger.propagate = False

    # Fast path
    if name in _inited_loggers and logger.handlers:
        return logger

    with _init_lock:
        if name in _inited_loggers and logger.handlers:
            return logger

        formatter = logging.Formatter(fmt=s.format, datefmt=s.datefmt)

        if mode == "stdout":
            logger.addHandler(_console_handler(s, formatter))
        else:
            logger.addHandler(_file_handler(s, name, formatter))
            if s.console:
                logger.addHandler(_console_handler(s, formatter))

        _inited_loggers.add(name)

    return logger
