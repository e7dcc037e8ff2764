"""Centralized logger for the chadoxml tools.

Diagnostics meant for the person running a tool go through a reporter
(see reporter.py).  This module is the other channel: an operator log that
records every state transition worth reconstructing after a multi-gigabyte
run goes wrong.

Usage in any module:
    from .logger import get_logger
    log = get_logger(__name__)
    log.info("opened sidecar %s", path)

Nothing is written anywhere until a log directory or debug mode is
configured.  The log file rotates at 5 MB and keeps the last 5 files.
"""

import logging
import os
import sys
import traceback
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional, Union

# ── Singleton state ──────────────────────────────────────────

_initialized = False
_log_dir: Optional[Path] = None

LOG_FORMAT = "%(asctime)s.%(msecs)03d | %(levelname)-5s | %(name)s | %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def init_logging(
    log_dir: Optional[Union[str, Path]] = None,
    level: int = logging.INFO,
    debug: bool = False,
) -> None:
    """Initialise the package logger.  Safe to call more than once.

    Later calls may add a file handler or a stderr handler that an earlier
    lazy initialisation did not install, but never duplicate one.
    """
    global _initialized, _log_dir

    root = logging.getLogger("chadoclean")
    if not _initialized:
        _initialized = True
        root.addHandler(logging.NullHandler())
        root.propagate = False

    if debug or os.environ.get("CHADOCLEAN_DEBUG"):
        level = logging.DEBUG
    root.setLevel(level)

    fmt = logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT)

    if log_dir and _log_dir is None:
        _log_dir = Path(log_dir)
        _log_dir.mkdir(parents=True, exist_ok=True)
        log_path = _log_dir / "chadoclean.log"

        handler = RotatingFileHandler(
            str(log_path),
            maxBytes=5 * 1024 * 1024,   # 5 MB per file
            backupCount=5,
            encoding="utf-8",
        )
        handler.setLevel(logging.DEBUG)
        handler.setFormatter(fmt)
        root.addHandler(handler)
        root.info(
            "=== Logging initialised === pid=%d python=%s log=%s",
            os.getpid(),
            sys.version.split()[0],
            log_path,
        )

    if level <= logging.DEBUG and not _has_stderr_handler(root):
        stderr_handler = logging.StreamHandler(sys.stderr)
        stderr_handler.setLevel(logging.DEBUG)
        stderr_handler.setFormatter(fmt)
        root.addHandler(stderr_handler)


def _has_stderr_handler(logger: logging.Logger) -> bool:
    return any(
        type(h) is logging.StreamHandler and getattr(h, "stream", None) is sys.stderr
        for h in logger.handlers
    )


def get_logger(name: str) -> logging.Logger:
    """Return a child logger under the 'chadoclean' namespace.

    Automatically initialises logging on first call so that even
    imports before init_logging() still get a working logger.
    """
    if not _initialized:
        init_logging()
    if name.startswith("chadoclean."):
        return logging.getLogger(name)
    return logging.getLogger(f"chadoclean.{name}")


# ── Convenience helpers ──────────────────────────────────────

def log_exception(logger: logging.Logger, msg: str, exc: BaseException) -> None:
    """Log an exception with full traceback."""
    tb = traceback.format_exception(type(exc), exc, exc.__traceback__)
    logger.error("%s: %s\n%s", msg, exc, "".join(tb))


def truncate(text: str, max_len: int = 200) -> str:
    """Truncate a line for log readability."""
    if not text:
        return "(empty)"
    text = text.replace("\n", "\\n")
    if len(text) <= max_len:
        return text
    return text[:max_len] + f"...[{len(text)} chars]"
