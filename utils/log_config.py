"""
Centralised logging setup.
Every module does:  ``log = get_logger(__name__)``
"""

from __future__ import annotations

import logging
import sys
import warnings
from pathlib import Path
from typing import Iterable, List, Optional

_CONFIGURED = False

LOG_FORMAT = "%(asctime)s │ %(levelname)-7s │ %(threadName)-14s │ %(message)s"
DATE_FORMAT = "%H:%M:%S"

# Third-party loggers that drown out source-level messages
NOISY_LOGGERS = (
    "urllib3", "urllib3.connectionpool", "requests",
    "chardet", "charset_normalizer",
    "bs4",
    "concurrent",
)


def _silence(names: Iterable[str]) -> None:
    for name in names:
        logger = logging.getLogger(name)
        logger.setLevel(logging.ERROR)
        logger.propagate = False


def setup_root(log_file: Path, verbose: bool = False, console: bool = True) -> None:
    """
    Configure logging once at startup.

    ``console=False`` logs to the file only, so stdout can carry JSON.
    """
    global _CONFIGURED
    if _CONFIGURED:
        return

    log_file.parent.mkdir(parents=True, exist_ok=True)
    handlers: List[logging.Handler] = [logging.FileHandler(str(log_file), encoding="utf-8")]
    if console:
        handlers.append(logging.StreamHandler(sys.stdout))

    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format=LOG_FORMAT,
        datefmt=DATE_FORMAT,
        handlers=handlers,
    )
    _silence(NOISY_LOGGERS)
    _silence(n for n in list(logging.Logger.manager.loggerDict) if n.startswith("urllib3."))

    # scraped pages trip bs4's "looks like a URL" heuristics
    warnings.filterwarnings("ignore", module="bs4")

    _CONFIGURED = True


def get_logger(name: Optional[str] = None) -> logging.Logger:
    return logging.getLogger(name or "locationspy")
