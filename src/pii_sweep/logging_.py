"""Logging utilities.

Standard `logging` with the same line format everywhere:
- console handler on stderr (stdout carries the scan report)
- optional file handler at `<log_dir>/<run_id>.log`
"""

from __future__ import annotations
import logging
import os
from typing import List, Optional

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s | %(message)s"
DATE_FORMAT = "%Y-%m-%dT%H:%M:%S"

# handlers installed by setup_logging(), replaced on the next call
_installed: List[logging.Handler] = []


def setup_logging(run_id: str, log_dir: Optional[str] = None, level: int = logging.INFO) -> Optional[str]:
    """
    Setup logging configuration.

    Args:
        run_id: Run identifier, used for the log file name
        log_dir: Directory for the log file (None: console only)
        level: Root log level

    Returns:
        Path of the log file, if one was configured
    """
    root = logging.getLogger()
    root.setLevel(level)
    while _installed:
        h = _installed.pop()
        root.removeHandler(h)
        h.close()

    fmt = logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT)

    # Console
    ch = logging.StreamHandler()
    ch.setFormatter(fmt)
    root.addHandler(ch)
    _installed.append(ch)

    if not log_dir:
        return None

    # File
    os.makedirs(log_dir, exist_ok=True)
    log_path = os.path.join(log_dir, f"{run_id}.log")
    fh = logging.FileHandler(log_path, encoding="utf-8")
    fh.setFormatter(fmt)
    root.addHandler(fh)
    _installed.append(fh)
    return log_path
