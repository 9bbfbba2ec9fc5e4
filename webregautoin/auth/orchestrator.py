"""
Authentication orchestrator - logs into WebReg and returns session cookies.

One call of acquire_session():

1. opens a fresh page and navigates to WebReg,
2. signs in to TritonLink if the sign-on form is showing,
3. races the WebReg 'go' button against the Duo frame,
4. retries when neither shows up (at most Config.MAX_ATTEMPTS times),
5. answers Duo (push or SMS) when it is demanded,
6. waits for the WebReg start page, selects the term if one was given,
7. extracts the cookies and records the success on the caller's session.

Failures never escape as exceptions for expected cases: they come back as
SoftFailure (try again later) or HardFailure (stop trying).
"""

from __future__ import annotations

import logging
import time

from webregautoin.auth.duo import complete_two_factor
from webregautoin.auth.errors import (
    AutomationError,
    ContractViolationError,
    ElementMissingError,
    LoginError,
    NavigationError,
    PostLoginTimeoutError,
    UnrecoverableLoginError,
)
from webregautoin.auth.race import classify_login
from webregautoin.config import Config
from webregautoin.log import setup_logging, term_logger
from webregautoin.models import (
    AuthContext,
    FailureKind,
    HardFailure,
    LoginState,
    PushLogin,
    SessionResult,
    SoftFailure,
    Success,
)
from webregautoin.portal.webreg import WebRegPortal

logger = setup_logging("orchestrator")


def _now_ms() -> int:
    return int(time.time() * 1000)


class AuthOrchestrator:
    """
    Drives a WebRegPortal through the login flow.

    The portal's browser must not be used by another login at the same
    time: every attempt closes all but one of its pages.
    """

    def __init__(self, portal: WebRegPortal, max_attempts: int | None = None) -> None:
        self._portal = portal
        self._max_attempts = Config.MAX_ATTEMPTS if max_attempts is None else max_attempts

    async def acquire_session(self, ctx: AuthContext, is_init: bool) -> SessionResult:
        """
        Log in and return the session cookies.

        Args:
            ctx: Credentials, term, 2FA preference and the caller's session record.
            is_init: True if no session has been established yet. When False,
                a push-configured context must not be asked for 2FA again.
        """
        log = term_logger(logger, ctx.term_label)
        log.info("Fetching WebReg cookies.")
        try:
            cookies = await self._login(ctx, is_init, log)
        except UnrecoverableLoginError as e:
            log.error(f"Giving up ({e.kind.value}): {e}")
            return HardFailure(kind=e.kind, reason=str(e))
        except LoginError as e:
            log.warning(f"Login failed, try again later: {e}")
            return SoftFailure(reason=str(e))
        except AutomationError as e:
            log.warning(f"Browser error, try again later: {e}")
            return SoftFailure(reason=f"browser error: {e}")

        if cookies is None:
            log.error(f"Unable to authenticate after {self._max_attempts} attempts, giving up.")
            return HardFailure(kind=FailureKind.ATTEMPTS_EXHAUSTED, reason="attempts exhausted")

        ctx.session.record_success(_now_ms())
        log.info(f"Extracted cookies for term '{ctx.term_label}'.")
        return Success(cookies=cookies)

    async def _login(
        self, ctx: AuthContext, is_init: bool, log: logging.LoggerAdapter
    ) -> str | None:
        """Cookie string, or None once the attempt budget is spent."""
        portal = self._portal
        attempts = 0

        while True:
            await portal.fresh_page()
            log.info("Opened new page. Connecting to WebReg.")

            try:
                resp = await portal.open_start_page()
            except AutomationError as e:
                raise NavigationError(f"Could not reach WebReg: {e}") from e

            if resp is None:
                # Counted, but only ambiguous logins enforce the budget
                attempts += 1
                log.warning(f"No response from WebReg. Retrying (attempt count: {attempts}).")
                continue

            log.info(f"Reached {resp.url} with status code {resp.status}.")
            if not resp.ok:
                raise NavigationError(f"WebReg returned status {resp.status}")

            await portal.wait(Config.SETTLE_DELAY_MS)
            if await portal.shows_sign_on_form():
                log.info("Signing in to TritonLink.")
                await portal.submit_credentials(ctx.credentials)

            log.info("Waiting for the Duo 2FA frame or the 'Go' button.")
            state = await classify_login(
                portal, Config.GO_BUTTON_TIMEOUT_MS, Config.DUO_POLL_INTERVAL_MS
            )

            if state is LoginState.UNCLASSIFIED:
                attempts += 1
                if attempts >= self._max_attempts:
                    return None
                log.info(
                    f"Found neither the 'Go' button nor the Duo frame. "
                    f"Retrying ({attempts}/{self._max_attempts})."
                )
                continue

            if state is LoginState.LOGGED_IN:
                log.info("'Go' button found. No 2FA needed.")
            else:
                log.info("Duo 2FA frame found. Do not accept the initial request.")

            await portal.wait(Config.POST_CLASSIFY_DELAY_MS)

            if state is LoginState.NEEDS_TWO_FACTOR:
                if not is_init and isinstance(ctx.login, PushLogin):
                    raise ContractViolationError(
                        "Duo 2FA was requested although the session should have been remembered"
                    )
                try:
                    await complete_two_factor(portal, ctx, log)
                except AutomationError as e:
                    raise ElementMissingError(f"Duo frame stopped responding: {e}") from e

            return await self._extract_cookies(ctx, log)

    async def _extract_cookies(self, ctx: AuthContext, log: logging.LoggerAdapter) -> str:
        portal = self._portal
        try:
            await portal.wait_for_term_controls()
        except AutomationError as e:
            raise PostLoginTimeoutError(f"Could not find the term dropdown or 'Go' button: {e}") from e

        log.info("Logged into WebReg successfully.")
        if ctx.term is not None:
            await portal.select_term(ctx.term)

        return await portal.cookie_string(portal.cookie_url(ctx.term))
