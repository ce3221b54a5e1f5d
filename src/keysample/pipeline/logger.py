# keysample/pipeline/logger.py
"""
Logging setup for a sampling session.

A session logs to stderr (``-v``), to one file per session, or both. The log
file is named after the instances being sampled so that logs from repeated
runs against different clusters are easy to tell apart.
"""

from __future__ import annotations

import logging
import re
from datetime import datetime
from pathlib import Path
from typing import Optional, Sequence

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Handlers installed here carry this name so a later call can replace them
# without touching handlers that belong to the embedding application.
HANDLER_NAME = "keysample"

_UNSAFE = re.compile(r"[^A-Za-z0-9._-]+")


def session_log_name(addresses: Sequence[str], when: Optional[datetime] = None) -> str:
    """
    File name for a session log, e.g. ``keysample_cache-a-6379+2_20250818_123456.log``.

    The first address identifies the session; ``+N`` counts the others.
    """
    stamp = (when or datetime.now()).strftime("%Y%m%d_%H%M%S")
    if not addresses:
        return f"keysample_{stamp}.log"
    tag = _UNSAFE.sub("-", addresses[0]).strip("-") or "instance"
    if len(addresses) > 1:
        tag += f"+{len(addresses) - 1}"
    return f"keysample_{tag}_{stamp}.log"


def configure_logging(
    *,
    log_dir: Optional[str | Path] = None,
    addresses: Sequence[str] = (),
    verbose: bool = False,
    level: int = logging.INFO,
) -> Optional[Path]:
    """
    Route keysample logs to a session file under ``log_dir`` and/or stderr.

    Handlers from an earlier call are replaced. Returns the log file path, or
    None when no file was requested.
    """
    root = logging.getLogger()
    for h in list(root.handlers):
        if h.get_name() == HANDLER_NAME:
            root.removeHandler(h)
            h.close()

    fmt = logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT)
    handlers = []
    log_path = None

    if log_dir is not None:
        directory = Path(log_dir).expanduser()
        directory.mkdir(parents=True, exist_ok=True)
        log_path = directory / session_log_name(addresses)
        handlers.append(logging.FileHandler(log_path, mode="w", encoding="utf-8"))
    if verbose:
        handlers.append(logging.StreamHandler())

    for h in handlers:
        h.set_name(HANDLER_NAME)
        h.setLevel(level)
        h.setFormatter(fmt)
        root.addHandler(h)
    if handlers and (root.level == logging.NOTSET or root.level > level):
        root.setLevel(level)

    if log_path is not None:
        root.info("Logging session for %s to: %s", ", ".join(addresses) or "-", log_path)
    return log_path
