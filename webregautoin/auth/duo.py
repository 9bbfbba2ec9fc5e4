"""
Duo two-factor sub-flow.

Runs once the Duo frame has been detected: optionally cancels a push Duo
sent on its own, ticks 'remember me', then either enters an SMS passcode or
sends a fresh push. Push approval happens outside this process and is
noticed later, when the WebReg start page appears.
"""

from __future__ import annotations

import logging

from webregautoin.auth.errors import PasscodeMismatchError
from webregautoin.config import Config
from webregautoin.models import AuthContext, SmsLogin
from webregautoin.portal.webreg import WebRegPortal


def pick_passcode(hint: str, passcodes: list[str]) -> str:
    """First passcode, in the caller's order, that starts with the hint."""
    for code in passcodes:
        if code.startswith(hint):
            return code
    raise PasscodeMismatchError(f"No SMS passcode starts with '{hint}'")


async def complete_two_factor(
    portal: WebRegPortal, ctx: AuthContext, log: logging.LoggerAdapter
) -> None:
    """
    Answer the Duo prompt according to ctx.login.

    Raises ElementMissingError if the frame or one of its controls is gone,
    PasscodeMismatchError if no passcode fits or Duo rejects it.
    """
    log.info("Beginning Duo 2FA process. Do not accept yet.")
    frame = await portal.duo_frame()

    if ctx.automatic_push_enabled:
        # Duo may have sent a push on page load
        await portal.wait(Config.DUO_STEP_DELAY_MS)
        if await portal.cancel_pending_push(frame):
            log.info("Cancelled the initial 2FA request. Do not respond to it.")

    await portal.wait(Config.DUO_STEP_DELAY_MS)
    await portal.remember_device(frame)
    log.info("Checked the 'Remember me' box.")
    await portal.wait(Config.DUO_STEP_DELAY_MS)

    if isinstance(ctx.login, SmsLogin):
        await _enter_sms_passcode(portal, frame, ctx.login, log)
    else:
        await portal.send_push(frame)
        log.info("A Duo push was sent. Please respond to the new 2FA request.")


async def _enter_sms_passcode(
    portal: WebRegPortal, frame, login: SmsLogin, log: logging.LoggerAdapter
) -> None:
    await portal.choose_passcode(frame)
    await portal.wait(Config.SMS_STEP_DELAY_MS)

    hint = await portal.sms_hint(frame)
    code = pick_passcode(hint, login.passcodes)
    log.info(f"Code should start with '{hint}'. Using code '{code}'.")
    await portal.wait(Config.SMS_STEP_DELAY_MS)

    await portal.enter_passcode(frame, code)
    await portal.wait(Config.SMS_STEP_DELAY_MS)
    await portal.submit_passcode(frame)
    log.info(f"Entered SMS code '{code}' and clicked 'Log In'.")
    await portal.wait(Config.SMS_STEP_DELAY_MS)

    if await portal.passcode_rejected(frame):
        raise PasscodeMismatchError(f"Duo rejected SMS passcode '{code}'")
