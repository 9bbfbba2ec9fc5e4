"""
Login classification - race the WebReg 'go' button against the Duo frame.

Two waiters run as tasks on the event loop:

- the 'go' waiter waits (bounded) for the WebReg start page, which means the
  session is already authenticated;
- the Duo waiter polls for the two-factor frame and stops on its own once
  the 'go' waiter has flagged a login.

Whichever finishes first decides. The other task is cancelled and awaited.
"""

from __future__ import annotations

import asyncio
import contextlib

from webregautoin.models import LoginState
from webregautoin.portal.webreg import WebRegPortal


async def classify_login(
    portal: WebRegPortal, go_timeout_ms: int, poll_interval_ms: int
) -> LoginState:
    logged_in = False

    async def wait_for_go() -> LoginState:
        nonlocal logged_in
        if not await portal.wait_for_go_button(go_timeout_ms):
            return LoginState.UNCLASSIFIED
        logged_in = True
        return LoginState.LOGGED_IN

    async def poll_for_duo() -> LoginState | None:
        while not logged_in:
            if await portal.duo_prompt_ready():
                return LoginState.NEEDS_TWO_FACTOR
            await portal.wait(poll_interval_ms)
        return None

    go_task = asyncio.create_task(wait_for_go())
    duo_task = asyncio.create_task(poll_for_duo())
    try:
        done, _ = await asyncio.wait({go_task, duo_task}, return_when=asyncio.FIRST_COMPLETED)
    finally:
        for task in (go_task, duo_task):
            if not task.done():
                task.cancel()
                with contextlib.suppress(asyncio.CancelledError):
                    await task

    if go_task in done and go_task.result() is LoginState.LOGGED_IN:
        return LoginState.LOGGED_IN
    if duo_task in done and duo_task.result() is LoginState.NEEDS_TWO_FACTOR:
        return LoginState.NEEDS_TWO_FACTOR
    return LoginState.UNCLASSIFIED
