import asyncio

import pytest

from webregautoin.auth.errors import (
    AutomationError,
    ElementMissingError,
    SelectorTimeoutError,
    SignOnError,
)
from webregautoin.models import (
    AuthContext,
    Cookie,
    Credentials,
    NavigationResponse,
    PushLogin,
    SessionRecord,
    SmsLogin,
    TermContext,
)

OK = NavigationResponse(status=200, url="https://act.ucsd.edu/webreg2/start")


class FakePortal:
    """
    Scripted stand-in for WebRegPortal.

    `outcomes` says, per attempt, what the page shows after sign-on:
      "go"       - the WebReg 'go' button (already logged in)
      "duo"      - the Duo frame; the 'go' button never shows
      "go_late_duo" - 'go' shows at once, Duo only after a few polls
      "none"     - neither; the 'go' wait times out
    `responses` gives the navigation result per attempt (a response, None,
    or an exception to raise). Both default to a successful login.
    """

    def __init__(
        self,
        outcomes=None,
        responses=None,
        sign_on=True,
        sign_on_missing=False,
        hint="7",
        reject_passcode=False,
        pending_push=False,
        duo_missing=False,
        term_controls=True,
        cookies="a=1; b=2",
    ):
        self.outcomes = list(outcomes or ["go"])
        self.responses = list(responses or [])
        self.sign_on = sign_on
        self.sign_on_missing = sign_on_missing
        self.hint = hint
        self.reject_passcode = reject_passcode
        self.pending_push = pending_push
        self.duo_missing = duo_missing
        self.term_controls = term_controls
        self.cookies = cookies

        self.attempt = -1
        self.navigations = 0
        self.calls = []
        self.entered_passcode = None
        self.selected_term = None
        self.cookie_urls = []
        self._duo_polls = 0

    @property
    def outcome(self):
        return self.outcomes[min(self.attempt, len(self.outcomes) - 1)]

    async def wait(self, ms):
        await asyncio.sleep(0)

    async def fresh_page(self):
        self.attempt += 1
        self._duo_polls = 0
        self.calls.append("fresh_page")

    async def open_start_page(self):
        self.navigations += 1
        if not self.responses:
            return OK
        resp = self.responses.pop(0)
        if isinstance(resp, Exception):
            raise resp
        return resp

    async def shows_sign_on_form(self):
        return self.sign_on

    async def submit_credentials(self, credentials):
        if self.sign_on_missing:
            raise SignOnError("Could not find the password field")
        self.calls.append(("submit_credentials", credentials.username))

    async def wait_for_go_button(self, timeout_ms):
        if self.outcome == "go":
            return True
        if self.outcome == "go_late_duo":
            # Let the Duo waiter poll once before the button shows up
            await asyncio.sleep(0)
            return True
        if self.outcome == "duo":
            await asyncio.sleep(3600)
        await asyncio.sleep(0)
        return False

    async def duo_prompt_ready(self):
        self._duo_polls += 1
        if self.outcome == "duo":
            return self._duo_polls >= 2
        if self.outcome == "go_late_duo":
            return self._duo_polls >= 3
        return False

    async def wait_for_term_controls(self):
        if not self.term_controls:
            raise SelectorTimeoutError("wait for #startpage-select-term: timeout")

    async def duo_frame(self):
        self.calls.append("duo_frame")
        if self.duo_missing:
            raise ElementMissingError("No Duo frame found")
        return "duo-frame"

    async def cancel_pending_push(self, frame):
        self.calls.append("cancel_pending_push")
        return self.pending_push

    async def remember_device(self, frame):
        self.calls.append("remember_device")

    async def send_push(self, frame):
        self.calls.append("send_push")

    async def choose_passcode(self, frame):
        self.calls.append("choose_passcode")

    async def sms_hint(self, frame):
        return self.hint

    async def enter_passcode(self, frame, passcode):
        self.entered_passcode = passcode

    async def submit_passcode(self, frame):
        self.calls.append("submit_passcode")

    async def passcode_rejected(self, frame):
        return self.reject_passcode

    async def select_term(self, term):
        self.selected_term = term

    def cookie_url(self, term):
        return f"term:{term.term_name}" if term else "default"

    async def cookie_string(self, url):
        self.cookie_urls.append(url)
        return self.cookies


class FakeElement:
    def __init__(self, name, text=None, frame=None):
        self.name = name
        self.text = text
        self.frame = frame
        self.typed = ""
        self.clicks = 0


class FakeAutomation:
    """
    In-memory BrowserAutomation.

    `elements` maps (target, selector) to a FakeElement; `contents` maps a
    target to its HTML. A target can be any hashable (we use strings).
    Targets listed in `detached` raise AutomationError on every access.
    """

    def __init__(self, pages=None):
        self.page_list = list(pages or ["page-0"])
        self.elements = {}
        self.contents = {}
        self.detached = set()
        self.cookie_jar = {}
        self.selected = []
        self.closed = []
        self.waits = []
        self.response = OK
        self._opened = 0

    def _check(self, target):
        if target in self.detached:
            raise AutomationError(f"{target} is detached")

    async def pages(self):
        return list(self.page_list)

    async def open_page(self):
        self._opened += 1
        page = f"new-page-{self._opened}"
        self.page_list.append(page)
        return page

    async def close_page(self, page):
        self.page_list.remove(page)
        self.closed.append(page)

    async def navigate(self, page, url):
        return self.response

    async def content(self, target):
        self._check(target)
        return self.contents.get(target, "")

    async def query(self, target, selector):
        self._check(target)
        return self.elements.get((target, selector))

    async def type(self, element, text):
        element.typed += text

    async def click(self, element):
        element.clicks += 1

    async def wait_for_selector(self, page, selector, *, visible=True, timeout_ms=None):
        self._check(page)
        element = self.elements.get((page, selector))
        if element is None:
            raise SelectorTimeoutError(f"wait for {selector}: timeout")
        return element

    async def wait_ms(self, ms):
        self.waits.append(ms)

    async def select(self, page, selector, value):
        self.selected.append((selector, value))

    async def cookies(self, page, url):
        return self.cookie_jar.get(url, [])

    async def content_frame(self, element):
        return element.frame

    async def element_text(self, element):
        return element.text


def run(coro):
    return asyncio.run(coro)


@pytest.fixture
def credentials():
    return Credentials(username="tritontest", password="hunter2")


@pytest.fixture
def push_ctx(credentials):
    return AuthContext(credentials=credentials, login=PushLogin(), session=SessionRecord())


@pytest.fixture
def sms_ctx(credentials):
    return AuthContext(
        credentials=credentials,
        login=SmsLogin(passcodes=["512345", "734521", "798123"]),
        session=SessionRecord(),
    )


@pytest.fixture
def term():
    return TermContext(seq_id=5200, term_name="SP22")


@pytest.fixture
def automation():
    return FakeAutomation()


@pytest.fixture
def sample_cookies():
    return [Cookie(name="a", value="1"), Cookie(name="b", value="2")]
