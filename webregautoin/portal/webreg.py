"""
WebReg portal adapter - the login flow's view of TritonLink, Duo and WebReg.

Turns the selector vocabulary in Selectors and the configured URLs into
semantic steps (submit credentials, find the Duo frame, read the SMS hint...)
over a BrowserAutomation. The orchestrator only talks to this class.
"""

from __future__ import annotations

import asyncio
from typing import Any

from webregautoin.auth.errors import (
    AutomationError,
    ElementMissingError,
    LoginError,
    SelectorTimeoutError,
    SignOnError,
)
from webregautoin.browser.automation import BrowserAutomation
from webregautoin.config import Config
from webregautoin.log import setup_logging
from webregautoin.models import Credentials, NavigationResponse, TermContext, serialize_cookies
from webregautoin.selectors import Selectors

log = setup_logging("portal")


def parse_sms_hint(text: str | None) -> str:
    """
    Extract the leading digits from Duo's SMS hint.

    'Your next SMS Passcode starts with 7' -> '7'
    """
    if not text:
        raise ElementMissingError("SMS passcode hint has no text")
    text = text.strip()
    if not text.startswith(Selectors.SMS_HINT_PREFIX):
        raise ElementMissingError(f"Unexpected SMS passcode hint: {text!r}")
    hint = text[len(Selectors.SMS_HINT_PREFIX):].strip()
    if not hint:
        raise ElementMissingError(f"SMS passcode hint has no digits: {text!r}")
    return hint.split()[-1]


class WebRegPortal:
    """Drives one page of a shared browser through the WebReg login."""

    def __init__(self, automation: BrowserAutomation) -> None:
        self._automation = automation
        self._page: Any | None = None

    @property
    def page(self) -> Any:
        if self._page is None:
            raise RuntimeError("No page open. Call fresh_page() first.")
        return self._page

    async def wait(self, ms: int) -> None:
        await self._automation.wait_ms(ms)

    # ── Page lifecycle ──────────────────────────────────────────

    async def fresh_page(self) -> None:
        """Close every page but one, then open a new page to work in."""
        pages = await self._automation.pages()
        while len(pages) > 1:
            await self._automation.close_page(pages[-1])
            pages = await self._automation.pages()
        self._page = await self._automation.open_page()

    async def open_start_page(self) -> NavigationResponse | None:
        """Navigate to WebReg. Raises AutomationError if navigation fails."""
        return await self._automation.navigate(self.page, Config.WEBREG_URL)

    # ── TritonLink sign-on ──────────────────────────────────────

    async def shows_sign_on_form(self) -> bool:
        content = await self._automation.content(self.page)
        return all(marker in content for marker in Selectors.SIGN_ON_MARKERS)

    async def submit_credentials(self, credentials: Credentials) -> None:
        """Fill in and submit the sign-on form. Raises SignOnError if a field is missing."""
        username = await self._require(self.page, Selectors.USERNAME_INPUT, "username field", SignOnError)
        await self._automation.type(username, credentials.username)
        password = await self._require(self.page, Selectors.PASSWORD_INPUT, "password field", SignOnError)
        await self._automation.type(password, credentials.password)
        submit = await self._require(self.page, Selectors.SIGN_ON_SUBMIT, "sign-on button", SignOnError)
        await self._automation.click(submit)

    # ── Login detection ─────────────────────────────────────────

    async def wait_for_go_button(self, timeout_ms: int) -> bool:
        """True once the 'go' button is visible, False on timeout or error."""
        try:
            await self._automation.wait_for_selector(
                self.page, Selectors.GO_BUTTON, visible=True, timeout_ms=timeout_ms
            )
        except SelectorTimeoutError:
            return False
        except AutomationError as e:
            log.debug(f"Waiting for 'go' button failed: {e}")
            return False
        return True

    async def duo_prompt_ready(self) -> bool:
        """True if the Duo frame is attached and shows its 'remember me' box."""
        try:
            frame = await self._find_duo_frame()
            if frame is None:
                return False
            return await self._automation.query(frame, Selectors.DUO_REMEMBER_ME) is not None
        except AutomationError as e:
            # The page is mid-navigation while we poll
            log.debug(f"Duo frame check failed: {e}")
            return False

    async def wait_for_term_controls(self) -> None:
        """Wait for the term dropdown and 'go' button. Raises SelectorTimeoutError."""
        await asyncio.gather(
            self._automation.wait_for_selector(self.page, Selectors.TERM_SELECT, visible=True),
            self._automation.wait_for_selector(self.page, Selectors.GO_BUTTON, visible=True),
        )

    # ── Duo frame ───────────────────────────────────────────────

    async def duo_frame(self) -> Any:
        """Return the Duo frame. Raises ElementMissingError if absent or detached."""
        element = await self._automation.query(self.page, Selectors.DUO_IFRAME)
        if element is None:
            raise ElementMissingError("No Duo frame found")
        frame = await self._automation.content_frame(element)
        if frame is None:
            raise ElementMissingError("Duo frame is not attached")
        return frame

    async def cancel_pending_push(self, frame: Any) -> bool:
        """Click 'cancel' if Duo already sent a push. Returns whether it did."""
        cancel = await self._automation.query(frame, Selectors.DUO_CANCEL)
        if cancel is None:
            return False
        await self._automation.click(cancel)
        return True

    async def remember_device(self, frame: Any) -> None:
        await self._click_in(frame, Selectors.DUO_REMEMBER_ME, "'remember me' box")

    async def send_push(self, frame: Any) -> None:
        await self._click_in(frame, Selectors.DUO_PUSH_BUTTON, "'send me a push' button")

    async def choose_passcode(self, frame: Any) -> None:
        await self._click_in(frame, Selectors.DUO_PASSCODE_BUTTON, "'enter a passcode' button")

    async def sms_hint(self, frame: Any) -> str:
        """The digits the next SMS passcode starts with."""
        element = await self._require(frame, Selectors.DUO_SMS_HINT, "SMS passcode hint")
        return parse_sms_hint(await self._automation.element_text(element))

    async def enter_passcode(self, frame: Any, passcode: str) -> None:
        box = await self._require(frame, Selectors.DUO_PASSCODE_INPUT, "SMS passcode box")
        await self._automation.type(box, passcode)

    async def submit_passcode(self, frame: Any) -> None:
        await self._click_in(frame, Selectors.DUO_PASSCODE_BUTTON, "'log in' button")

    async def passcode_rejected(self, frame: Any) -> bool:
        """True if Duo reports the passcode as incorrect."""
        try:
            content = await self._automation.content(frame)
        except AutomationError:
            # An accepted passcode tears the frame down
            return False
        return Selectors.INCORRECT_PASSCODE in content

    # ── Term & cookies ──────────────────────────────────────────

    async def select_term(self, term: TermContext) -> None:
        await self._automation.select(self.page, Selectors.TERM_SELECT, term.selector_value)
        go = await self._require(self.page, Selectors.GO_BUTTON, "'go' button")
        await self._automation.click(go)

    def cookie_url(self, term: TermContext | None) -> str:
        if term is None:
            return Config.WEBREG_COOKIE_URL
        return Config.WEBREG_TERM_COOKIE_URL.format(term=term.term_name)

    async def cookie_string(self, url: str) -> str:
        cookies = await self._automation.cookies(self.page, url)
        return serialize_cookies(cookies)

    # ── Helpers ─────────────────────────────────────────────────

    async def _find_duo_frame(self) -> Any | None:
        element = await self._automation.query(self.page, Selectors.DUO_IFRAME)
        if element is None:
            return None
        return await self._automation.content_frame(element)

    async def _require(
        self, target: Any, selector: str, what: str, error: type[LoginError] = ElementMissingError
    ) -> Any:
        element = await self._automation.query(target, selector)
        if element is None:
            raise error(f"Could not find the {what}")
        return element

    async def _click_in(self, target: Any, selector: str, what: str) -> None:
        await self._automation.click(await self._require(target, selector, what))
