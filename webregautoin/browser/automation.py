"""
Browser automation capability - the primitive operations the login flow needs.

BrowserAutomation is the interface; PlaywrightAutomation implements it on a
patchright BrowserContext. Handles (pages, frames, elements) are opaque to
callers. Every patchright failure is re-raised as AutomationError, and
selector timeouts as SelectorTimeoutError.
"""

from __future__ import annotations

import asyncio
import random
from contextlib import contextmanager
from typing import Any, Iterator, Protocol

from patchright.async_api import BrowserContext, ElementHandle, Frame, Page
from patchright.async_api import Error as PlaywrightError
from patchright.async_api import TimeoutError as PlaywrightTimeoutError

from webregautoin.auth.errors import AutomationError, SelectorTimeoutError
from webregautoin.config import Config
from webregautoin.log import setup_logging
from webregautoin.models import Cookie, NavigationResponse

log = setup_logging("automation")


class BrowserAutomation(Protocol):
    """Operations on a shared browser. `target` is a page or a frame."""

    async def pages(self) -> list[Any]: ...

    async def open_page(self) -> Any: ...

    async def close_page(self, page: Any) -> None: ...

    async def navigate(self, page: Any, url: str) -> NavigationResponse | None: ...

    async def content(self, target: Any) -> str: ...

    async def query(self, target: Any, selector: str) -> Any | None: ...

    async def type(self, element: Any, text: str) -> None: ...

    async def click(self, element: Any) -> None: ...

    async def wait_for_selector(
        self, page: Any, selector: str, *, visible: bool = True, timeout_ms: int | None = None
    ) -> Any: ...

    async def wait_ms(self, ms: int) -> None: ...

    async def select(self, page: Any, selector: str, value: str) -> None: ...

    async def cookies(self, page: Any, url: str) -> list[Cookie]: ...

    async def content_frame(self, element: Any) -> Any | None: ...

    async def element_text(self, element: Any) -> str | None: ...


@contextmanager
def _translated(action: str) -> Iterator[None]:
    """Re-raise patchright errors as our own."""
    try:
        yield
    except PlaywrightTimeoutError as e:
        raise SelectorTimeoutError(f"{action}: {e}") from e
    except PlaywrightError as e:
        raise AutomationError(f"{action}: {e}") from e


class PlaywrightAutomation:
    """BrowserAutomation on top of a patchright BrowserContext."""

    def __init__(self, context: BrowserContext) -> None:
        self._context = context

    # ── Pages ───────────────────────────────────────────────────

    async def pages(self) -> list[Page]:
        return list(self._context.pages)

    async def open_page(self) -> Page:
        with _translated("open page"):
            return await self._context.new_page()

    async def close_page(self, page: Page) -> None:
        with _translated("close page"):
            await page.close()

    async def navigate(self, page: Page, url: str) -> NavigationResponse | None:
        log.debug(f"Navigating to {url}")
        with _translated(f"navigate to {url}"):
            resp = await page.goto(url)
        if resp is None:
            return None
        return NavigationResponse(status=resp.status, url=resp.url)

    # ── Queries ─────────────────────────────────────────────────

    async def content(self, target: Page | Frame) -> str:
        with _translated("read content"):
            return await target.content()

    async def query(self, target: Page | Frame, selector: str) -> ElementHandle | None:
        with _translated(f"query {selector}"):
            return await target.query_selector(selector)

    async def content_frame(self, element: ElementHandle) -> Frame | None:
        with _translated("resolve content frame"):
            return await element.content_frame()

    async def element_text(self, element: ElementHandle) -> str | None:
        with _translated("read element text"):
            return await element.text_content()

    async def wait_for_selector(
        self,
        page: Page,
        selector: str,
        *,
        visible: bool = True,
        timeout_ms: int | None = None,
    ) -> ElementHandle:
        timeout = Config.SELECTOR_TIMEOUT_MS if timeout_ms is None else timeout_ms
        with _translated(f"wait for {selector}"):
            element = await page.wait_for_selector(
                selector, state="visible" if visible else "attached", timeout=timeout
            )
        if element is None:
            raise AutomationError(f"wait for {selector}: no element")
        return element

    # ── Actions ─────────────────────────────────────────────────

    async def type(self, element: ElementHandle, text: str) -> None:
        delay = random.randint(Config.TYPING_SPEED_MIN, Config.TYPING_SPEED_MAX)
        with _translated("type"):
            await element.type(text, delay=delay)

    async def click(self, element: ElementHandle) -> None:
        with _translated("click"):
            await element.click()

    async def select(self, page: Page, selector: str, value: str) -> None:
        with _translated(f"select {value} in {selector}"):
            await page.select_option(selector, value)

    async def wait_ms(self, ms: int) -> None:
        await asyncio.sleep(ms / 1000)

    async def cookies(self, page: Page, url: str) -> list[Cookie]:
        with _translated(f"read cookies for {url}"):
            raw = await page.context.cookies(url)
        return [Cookie(name=c["name"], value=c["value"]) for c in raw]
