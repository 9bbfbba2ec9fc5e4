"""
Stealth wrapper - configures playwright-stealth so the sign-on and Duo pages
see an ordinary Chrome.
"""

from __future__ import annotations

from patchright.async_api import BrowserContext
from playwright_stealth import Stealth

from webregautoin.log import setup_logging

log = setup_logging("stealth")

# Single Stealth instance shared by every context
_stealth = Stealth()


async def apply_stealth(context: BrowserContext) -> None:
    """Apply stealth patches to every current and future page of a context."""
    await _stealth.apply_stealth_async(context)
    log.info("Stealth patches applied to browser context")
