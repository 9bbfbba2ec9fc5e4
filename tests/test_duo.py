"""Tests for the Duo two-factor sub-flow."""

from __future__ import annotations

import logging

import pytest

from conftest import FakePortal, run
from webregautoin.auth.duo import complete_two_factor, pick_passcode
from webregautoin.auth.errors import PasscodeMismatchError
from webregautoin.log import term_logger

log = term_logger(logging.getLogger("test_duo"), "SP22")


def test_pick_passcode_keeps_caller_order() -> None:
    assert pick_passcode("7", ["512345", "734521", "798123"]) == "734521"


def test_pick_passcode_multi_digit_hint() -> None:
    assert pick_passcode("79", ["734521", "798123"]) == "798123"


def test_pick_passcode_without_match() -> None:
    with pytest.raises(PasscodeMismatchError):
        pick_passcode("4", ["512345", "734521"])


def test_push_remembers_device_then_sends_push(push_ctx) -> None:
    portal = FakePortal()

    run(complete_two_factor(portal, push_ctx, log))

    assert portal.calls == ["duo_frame", "remember_device", "send_push"]


def test_automatic_push_is_cancelled_first(push_ctx) -> None:
    push_ctx.automatic_push_enabled = True
    portal = FakePortal(pending_push=True)

    run(complete_two_factor(portal, push_ctx, log))

    assert portal.calls == ["duo_frame", "cancel_pending_push", "remember_device", "send_push"]


def test_sms_enters_matching_passcode(sms_ctx) -> None:
    portal = FakePortal(hint="7")

    run(complete_two_factor(portal, sms_ctx, log))

    assert portal.entered_passcode == "734521"
    assert portal.calls == ["duo_frame", "remember_device", "choose_passcode", "submit_passcode"]
    assert "send_push" not in portal.calls


def test_sms_rejected_passcode(sms_ctx) -> None:
    portal = FakePortal(hint="5", reject_passcode=True)

    with pytest.raises(PasscodeMismatchError):
        run(complete_two_factor(portal, sms_ctx, log))

    assert portal.entered_passcode == "512345"
