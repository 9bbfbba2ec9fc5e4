"""
Logging setup - file + optional console handlers.

Every line carries a timestamp in Config.LOG_TIMEZONE. The login flow logs
through term_logger() so each line is labelled with the term it serves.
"""

from __future__ import annotations

import logging
import sys
from datetime import datetime
from zoneinfo import ZoneInfo

from webregautoin.config import Config


def _local_time(seconds: float | None):
    return datetime.fromtimestamp(seconds or 0, ZoneInfo(Config.LOG_TIMEZONE)).timetuple()


def setup_logging(name: str = "webregautoin", log_file: str | None = None) -> logging.Logger:
    """
    Configure and return a logger that writes to file (and optionally console).

    Args:
        name: Logger name.
        log_file: Optional filename override. Defaults to '{name}_{date}.log'.
    """
    Config.ensure_dirs()

    logger = logging.getLogger(name)
    logger.setLevel(getattr(logging, Config.LOG_LEVEL.upper(), logging.DEBUG))

    # Prevent duplicate handlers on repeated calls
    if logger.handlers:
        return logger

    formatter = logging.Formatter(
        fmt="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    formatter.converter = _local_time

    # ── File handler ────────────────────────────────────────────
    if log_file is None:
        date_str = datetime.now().strftime("%Y%m%d")
        log_file = f"{name}_{date_str}.log"

    fh = logging.FileHandler(Config.LOG_DIR / log_file, encoding="utf-8")
    fh.setLevel(logging.DEBUG)  # Always capture everything in file
    fh.setFormatter(formatter)
    logger.addHandler(fh)

    # ── Console handler ─────────────────────────────────────────
    if Config.VERBOSE:
        ch = logging.StreamHandler(sys.stdout)
        ch.setLevel(logging.INFO)
        ch.setFormatter(formatter)
        logger.addHandler(ch)

    return logger


class TermLogAdapter(logging.LoggerAdapter):
    """Prefix every message with the term label, e.g. '[SP22] ...'."""

    def process(self, msg, kwargs):
        return f"[{self.extra['term']}] {msg}", kwargs


def term_logger(logger: logging.Logger, term: str | None) -> TermLogAdapter:
    """Wrap a logger so its lines are labelled with a term name (or 'ALL')."""
    return TermLogAdapter(logger, {"term": term or "ALL"})
