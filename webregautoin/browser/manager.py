"""
Browser lifecycle manager - launch, persist, close.

Uses a persistent Chromium context so Duo's "remember me" cookie and the
TritonLink session survive restarts.
"""

from __future__ import annotations

from pathlib import Path
from patchright.async_api import async_playwright, BrowserContext, Playwright

from webregautoin.browser.automation import PlaywrightAutomation
from webregautoin.browser.stealth import apply_stealth
from webregautoin.config import Config
from webregautoin.log import setup_logging

log = setup_logging("browser")

# Chromium leaves these behind after a crash and refuses to reuse the dir
_LOCK_FILES = ("SingletonLock", "SingletonSocket", "SingletonCookie")


def _cleanup_stale_locks(data_dir: Path) -> None:
    """Remove stale singleton lock files that prevent browser launch."""
    for name in _LOCK_FILES:
        path = data_dir / name
        if path.exists() or path.is_symlink():
            try:
                path.unlink()
                log.info(f"Removed stale lock file: {name}")
            except OSError as e:
                log.warning(f"Could not remove {name}: {e}")


class BrowserManager:
    """Manages a single persistent Chromium browser context."""

    def __init__(self, data_dir: Path | None = None) -> None:
        self._data_dir = data_dir or Config.BROWSER_DATA_DIR
        self._playwright: Playwright | None = None
        self._context: BrowserContext | None = None

    async def start(self) -> BrowserContext:
        """
        Launch a persistent Chromium context.

        Cleans up stale lock files from previous crashed sessions and applies
        stealth patches when Config.STEALTH is set.
        """
        Config.ensure_dirs()
        self._data_dir.mkdir(parents=True, exist_ok=True)
        _cleanup_stale_locks(self._data_dir)

        log.info("Launching browser...")
        self._playwright = await async_playwright().start()
        self._context = await self._playwright.chromium.launch_persistent_context(
            user_data_dir=str(self._data_dir),
            headless=Config.HEADLESS,
            slow_mo=Config.SLOW_MO,
            locale="en-US",
            timezone_id=Config.LOG_TIMEZONE,
            args=[
                "--disable-blink-features=AutomationControlled",
                "--no-first-run",
                "--no-default-browser-check",
            ],
        )

        if Config.STEALTH:
            await apply_stealth(self._context)

        log.info(f"Browser ready (headless={Config.HEADLESS})")
        return self._context

    @property
    def context(self) -> BrowserContext:
        """Get the browser context."""
        if self._context is None:
            raise RuntimeError("Browser not started. Call start() first.")
        return self._context

    def automation(self) -> PlaywrightAutomation:
        """Browser automation bound to the running context."""
        return PlaywrightAutomation(self.context)

    async def close(self) -> None:
        """Gracefully close the browser context and playwright instance."""
        log.info("Closing browser...")
        try:
            if self._context:
                await self._context.close()
            if self._playwright:
                await self._playwright.stop()
        except Exception as e:
            log.error(f"Error closing browser: {e}")
        finally:
            self._context = None
            self._playwright = None
            log.info("Browser closed")
