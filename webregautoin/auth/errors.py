"""
Failure taxonomy of the login flow.

Browser-level problems surface as AutomationError. The login flow raises the
LoginError subclasses below; AuthOrchestrator turns them into a SessionResult
at its boundary.
"""

from __future__ import annotations

from webregautoin.models import FailureKind


class AutomationError(Exception):
    """A browser operation failed (page closed, frame detached, ...)."""


class SelectorTimeoutError(AutomationError):
    """An element did not reach the awaited state in time."""


class LoginError(Exception):
    """Base class for failures of one login call."""


# ── Soft: caller retries the whole call later ──────────────────


class NavigationError(LoginError):
    """WebReg could not be reached or answered with a non-2xx status."""


class PostLoginTimeoutError(LoginError):
    """The term dropdown / 'go' button never appeared after logging in."""


class SignOnError(LoginError):
    """The TritonLink sign-on form is missing one of its fields."""


# ── Hard: give up for this call ────────────────────────────────


class UnrecoverableLoginError(LoginError):
    kind: FailureKind


class ElementMissingError(UnrecoverableLoginError):
    """An element the two-factor flow depends on is missing."""
    kind = FailureKind.ELEMENT_MISSING


class PasscodeMismatchError(UnrecoverableLoginError):
    """No passcode fits the hint, or Duo rejected the one we entered."""
    kind = FailureKind.PASSCODE_MISMATCH


class ContractViolationError(UnrecoverableLoginError):
    """Two-factor was demanded on a call that expected a remembered session."""
    kind = FailureKind.CONTRACT_VIOLATION
