"""
Centralized DOM selectors for TritonLink sign-on, Duo and WebReg.

All selectors live here so when the portal updates its UI, we only
change this one file. Only the portal adapter reads them.
"""

from __future__ import annotations


class Selectors:
    """CSS selectors for the WebReg login flow."""

    # ── TritonLink sign-on form ─────────────────────────────────
    USERNAME_INPUT = "#ssousername"
    PASSWORD_INPUT = "#ssopassword"
    SIGN_ON_SUBMIT = 'button[type="submit"]'

    # Text that identifies the sign-on page (all must be present)
    SIGN_ON_MARKERS = ("Signing on using:", "TritonLink user name")

    # ── WebReg start page (visible once logged in) ──────────────
    TERM_SELECT = "#startpage-select-term"
    GO_BUTTON = "#startpage-button-go"

    # ── Duo two-factor iframe ───────────────────────────────────
    DUO_IFRAME = "iframe[id='duo_iframe']"

    # Inside the Duo frame
    DUO_REMEMBER_ME = "#remember_me_label_text"
    DUO_CANCEL = ".btn-cancel"
    DUO_PUSH_BUTTON = "#auth_methods > fieldset > div.row-label.push-label > button"

    # The passcode button doubles as "Enter a Passcode" and "Log In"
    DUO_PASSCODE_BUTTON = "#passcode"
    DUO_SMS_HINT = "#auth_methods > fieldset > div.passcode-label.row-label > div > div"
    DUO_PASSCODE_INPUT = "#auth_methods > fieldset > div.passcode-label.row-label > div > input"

    # ── Duo text ────────────────────────────────────────────────
    SMS_HINT_PREFIX = "Your next SMS Passcode starts with"
    INCORRECT_PASSCODE = "Incorrect passcode. Enter a passcode from Duo Mobile or a text."
