# src/smart_calendar/logging_setup.py

from __future__ import annotations

import logging
import sys
from pathlib import Path

from .config import Settings

PACKAGE_ROOT = __name__.partition(".")[0]


class ConsoleNoiseFilter(logging.Filter):
    """
    Keep the goal console readable: records from this package pass at the
    handler level, anything else (third-party, 'py.warnings') only at ERROR+.
    """

    def __init__(self, package: str = PACKAGE_ROOT) -> None:
        super().__init__()
        self._package = package

    def filter(self, record: logging.LogRecord) -> bool:
        name = record.name
        if name == self._package or name.startswith(self._package + "."):
            return True
        return record.levelno >= logging.ERROR


def level_from_name(name: str, default: int = logging.INFO) -> int:
    level = logging.getLevelName(str(name).strip().upper())
    return level if isinstance(level, int) else default


def log_file_for(settings: Settings) -> Path:
    """<data_dir>/<app_name>.log, with the app name made filesystem-safe."""
    stem = "".join(c if c.isalnum() or c in "-_" else "_" for c in settings.app_name) or PACKAGE_ROOT
    return Path(settings.data_dir) / f"{stem}.log"


def setup_logging(settings: Settings, *, file_level: int = logging.DEBUG) -> Path:
    """
    Configure root logging from settings and return the log file path:
    - stderr at settings.log_level, filtered by ConsoleNoiseFilter
    - full log file under settings.data_dir

    Call this ONCE, very early (before first logger.info).
    """
    log_file = log_file_for(settings)
    log_file.parent.mkdir(parents=True, exist_ok=True)

    root = logging.getLogger()
    root.setLevel(logging.DEBUG)

    for h in list(root.handlers):
        root.removeHandler(h)

    fmt = logging.Formatter(
        fmt="%(asctime)s.%(msecs)03d %(levelname)s %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    ch = logging.StreamHandler(sys.stderr)
    ch.setLevel(level_from_name(settings.log_level))
    ch.setFormatter(fmt)
    ch.addFilter(ConsoleNoiseFilter())
    root.addHandler(ch)

    fh = logging.FileHandler(str(log_file), encoding="utf-8")
    fh.setLevel(file_level)
    fh.setFormatter(fmt)
    root.addHandler(fh)

    logging.captureWarnings(True)
    return log_file
