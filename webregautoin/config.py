"""
Centralized configuration - loads from .env with sensible defaults.
"""

from __future__ import annotations

import os
from pathlib import Path
from dotenv import load_dotenv

# Load .env from project root
_PROJECT_ROOT = Path(__file__).resolve().parent.parent
load_dotenv(_PROJECT_ROOT / ".env")


def _flag(name: str, default: str) -> bool:
    return os.getenv(name, default).lower() == "true"


class Config:
    """All project settings in one place."""

    # Paths
    PROJECT_ROOT: Path = _PROJECT_ROOT
    BROWSER_DATA_DIR: Path = _PROJECT_ROOT / os.getenv("BROWSER_DATA_DIR", "browser_data")
    LOG_DIR: Path = _PROJECT_ROOT / os.getenv("LOG_DIR", "logs")

    # Browser
    HEADLESS: bool = _flag("HEADLESS", "true")
    SLOW_MO: int = int(os.getenv("SLOW_MO", "0"))
    STEALTH: bool = _flag("STEALTH", "true")

    # Typing speed per keystroke (ms)
    TYPING_SPEED_MIN: int = int(os.getenv("TYPING_SPEED_MIN", "20"))
    TYPING_SPEED_MAX: int = int(os.getenv("TYPING_SPEED_MAX", "60"))

    # WebReg endpoints
    WEBREG_URL: str = os.getenv("WEBREG_URL", "https://act.ucsd.edu/webreg2/start")
    WEBREG_COOKIE_URL: str = os.getenv(
        "WEBREG_COOKIE_URL", "https://act.ucsd.edu/webreg2/svc/wradapter/get-term"
    )
    WEBREG_TERM_COOKIE_URL: str = os.getenv(
        "WEBREG_TERM_COOKIE_URL",
        "https://act.ucsd.edu/webreg2/svc/wradapter/secure/sched-get-schednames?termcode={term}",
    )

    # Login flow timing (ms)
    SETTLE_DELAY_MS: int = int(os.getenv("SETTLE_DELAY_MS", "3000"))
    POST_CLASSIFY_DELAY_MS: int = int(os.getenv("POST_CLASSIFY_DELAY_MS", "4000"))
    GO_BUTTON_TIMEOUT_MS: int = int(os.getenv("GO_BUTTON_TIMEOUT_MS", "30000"))
    DUO_POLL_INTERVAL_MS: int = int(os.getenv("DUO_POLL_INTERVAL_MS", "500"))
    DUO_STEP_DELAY_MS: int = int(os.getenv("DUO_STEP_DELAY_MS", "1000"))
    SMS_STEP_DELAY_MS: int = int(os.getenv("SMS_STEP_DELAY_MS", "1500"))
    SELECTOR_TIMEOUT_MS: int = int(os.getenv("SELECTOR_TIMEOUT_MS", "30000"))

    # Give up after this many ambiguous login checks in one call
    MAX_ATTEMPTS: int = int(os.getenv("MAX_ATTEMPTS", "6"))

    # Logging
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "DEBUG")
    VERBOSE: bool = _flag("VERBOSE", "true")
    LOG_TIMEZONE: str = os.getenv("LOG_TIMEZONE", "America/Los_Angeles")

    # Account
    WEBREG_USERNAME: str = os.getenv("WEBREG_USERNAME", "")
    WEBREG_PASSWORD: str = os.getenv("WEBREG_PASSWORD", "")
    WEBREG_TERM: str = os.getenv("WEBREG_TERM", "")  # e.g. "SP22"; empty = any term
    LOGIN_TYPE: str = os.getenv("LOGIN_TYPE", "push")  # "push" or "sms"
    SMS_PASSCODES: str = os.getenv("SMS_PASSCODES", "")  # comma-separated
    AUTOMATIC_PUSH: bool = _flag("AUTOMATIC_PUSH", "false")

    @classmethod
    def ensure_dirs(cls) -> None:
        """Create required directories if they don't exist."""
        cls.BROWSER_DATA_DIR.mkdir(parents=True, exist_ok=True)
        cls.LOG_DIR.mkdir(parents=True, exist_ok=True)
