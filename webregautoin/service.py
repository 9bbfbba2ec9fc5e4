"""
Cookie service - owns the browser and hands out fresh WebReg cookies.

Logins that share a browser must run one at a time (each attempt closes
the other pages), so fetch() serializes them with a lock.
"""

from __future__ import annotations

import asyncio

from webregautoin.auth.orchestrator import AuthOrchestrator
from webregautoin.browser.manager import BrowserManager
from webregautoin.config import Config
from webregautoin.log import setup_logging
from webregautoin.models import AuthContext, Credentials, PushLogin, SessionResult, SmsLogin
from webregautoin.portal.webreg import WebRegPortal
from webregautoin.term import term_context

log = setup_logging("service")


def context_from_config() -> AuthContext:
    """Build an AuthContext from the WEBREG_* / LOGIN_TYPE settings."""
    if not Config.WEBREG_USERNAME or not Config.WEBREG_PASSWORD:
        raise ValueError("WEBREG_USERNAME and WEBREG_PASSWORD must be set")

    login_type = Config.LOGIN_TYPE.strip().lower()
    if login_type == "sms":
        passcodes = [c.strip() for c in Config.SMS_PASSCODES.split(",") if c.strip()]
        if not passcodes:
            raise ValueError("LOGIN_TYPE=sms needs at least one code in SMS_PASSCODES")
        login = SmsLogin(passcodes=passcodes)
    elif login_type == "push":
        login = PushLogin()
    else:
        raise ValueError(f"LOGIN_TYPE must be 'push' or 'sms', not {Config.LOGIN_TYPE!r}")

    return AuthContext(
        credentials=Credentials(username=Config.WEBREG_USERNAME, password=Config.WEBREG_PASSWORD),
        term=term_context(Config.WEBREG_TERM) if Config.WEBREG_TERM else None,
        login=login,
        automatic_push_enabled=Config.AUTOMATIC_PUSH,
    )


class CookieService:
    """Serializes login calls on one browser."""

    def __init__(self, browser: BrowserManager | None = None) -> None:
        self._browser = browser or BrowserManager()
        self._orchestrator: AuthOrchestrator | None = None
        self._lock = asyncio.Lock()

    async def start(self) -> None:
        await self._browser.start()
        self._orchestrator = AuthOrchestrator(WebRegPortal(self._browser.automation()))
        log.info("Cookie service ready")

    async def fetch(self, ctx: AuthContext) -> SessionResult:
        """
        Log in for `ctx` and return its cookies.

        The call is the initial one until a login for this context has
        succeeded, i.e. while ctx.session.start is still 0.
        """
        if self._orchestrator is None:
            raise RuntimeError("Cookie service not started. Call start() first.")
        async with self._lock:
            is_init = ctx.session.start == 0
            return await self._orchestrator.acquire_session(ctx, is_init)

    async def close(self) -> None:
        self._orchestrator = None
        await self._browser.close()
