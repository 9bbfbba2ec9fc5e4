"""Tests for the session data models."""

import pytest
from pydantic import TypeAdapter, ValidationError

from webregautoin.models import (
    AuthContext,
    Cookie,
    LoginPreference,
    NavigationResponse,
    PushLogin,
    SessionRecord,
    SmsLogin,
    serialize_cookies,
)


def test_serialize_cookies(sample_cookies):
    assert serialize_cookies(sample_cookies) == "a=1; b=2"


def test_serialize_no_cookies():
    assert serialize_cookies([]) == ""


def test_serialize_keeps_order():
    cookies = [Cookie(name="z", value="9"), Cookie(name="jlinksessionidx", value="abc")]
    assert serialize_cookies(cookies) == "z=9; jlinksessionidx=abc"


class TestSessionRecord:

    def test_first_success_sets_start(self):
        session = SessionRecord()

        session.record_success(1_000)

        assert session.start == 1_000
        assert session.call_history == []

    def test_later_successes_append(self):
        session = SessionRecord()
        for ts in (1_000, 2_000, 3_000):
            session.record_success(ts)

        assert session.start == 1_000
        assert session.call_history == [2_000, 3_000]

    def test_history_never_goes_backwards(self):
        session = SessionRecord()
        for ts in (5_000, 5_000, 4_000, 6_000):
            session.record_success(ts)

        assert session.call_history == [5_001, 5_001, 6_000]
        assert all(t > session.start for t in session.call_history)


class TestLoginPreference:

    def test_sms_requires_passcodes(self):
        with pytest.raises(ValidationError):
            SmsLogin(passcodes=[])

    def test_parses_tagged_variant(self):
        adapter = TypeAdapter(LoginPreference)

        assert isinstance(adapter.validate_python({"method": "push"}), PushLogin)
        sms = adapter.validate_python({"method": "sms", "passcodes": ["123456"]})
        assert isinstance(sms, SmsLogin)
        assert sms.passcodes == ["123456"]

    def test_unknown_method_rejected(self):
        with pytest.raises(ValidationError):
            TypeAdapter(LoginPreference).validate_python({"method": "bogus"})

    def test_context_defaults_to_push(self, credentials):
        ctx = AuthContext(credentials=credentials)

        assert isinstance(ctx.login, PushLogin)
        assert ctx.term_label == "ALL"
        assert ctx.session.start == 0


def test_password_not_in_repr(credentials):
    assert "hunter2" not in repr(credentials)


@pytest.mark.parametrize("status,ok", [(200, True), (204, True), (299, True), (302, False), (503, False)])
def test_navigation_response_ok(status, ok):
    assert NavigationResponse(status=status).ok is ok
