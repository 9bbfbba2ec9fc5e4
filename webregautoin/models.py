"""
Data models for WebReg login sessions.
"""

from __future__ import annotations

from enum import Enum
from typing import Annotated, Literal, Union

from pydantic import BaseModel, ConfigDict, Field


class Credentials(BaseModel):
    """TritonLink username and password."""
    model_config = ConfigDict(frozen=True)

    username: str
    password: str = Field(repr=False)


class TermContext(BaseModel):
    """A specific term to select before extracting cookies."""
    model_config = ConfigDict(frozen=True)

    seq_id: int = Field(description="WebReg sequence id, e.g. 5200")
    term_name: str = Field(description="Term code, e.g. 'SP22'")

    @property
    def selector_value(self) -> str:
        """Value of the matching option in the term dropdown."""
        return f"{self.seq_id}:::{self.term_name}"


class PushLogin(BaseModel):
    """Authenticate the two-factor prompt with a Duo push."""
    model_config = ConfigDict(frozen=True)

    method: Literal["push"] = "push"


class SmsLogin(BaseModel):
    """Authenticate the two-factor prompt with a pre-provisioned SMS passcode."""
    model_config = ConfigDict(frozen=True)

    method: Literal["sms"] = "sms"
    passcodes: list[str] = Field(min_length=1, description="Candidate passcodes, in priority order")


LoginPreference = Annotated[Union[PushLogin, SmsLogin], Field(discriminator="method")]


class SessionRecord(BaseModel):
    """
    Usage record of one long-lived session, owned by the caller.

    Timestamps are unix milliseconds. `start` is set by the first successful
    cookie extraction; every later success is appended to `call_history`.
    """
    start: int = Field(default=0, description="First successful extraction, 0 until then")
    call_history: list[int] = Field(default_factory=list)

    def record_success(self, now_ms: int) -> None:
        if self.start == 0:
            self.start = now_ms
            return
        # Keep history ordered and after `start` even if the wall clock steps back
        floor = self.call_history[-1] if self.call_history else self.start + 1
        self.call_history.append(max(now_ms, floor))


class AuthContext(BaseModel):
    """Everything one login call needs. Only `session` is mutated."""
    credentials: Credentials
    term: TermContext | None = None
    login: LoginPreference = Field(default_factory=PushLogin)
    automatic_push_enabled: bool = False
    session: SessionRecord = Field(default_factory=SessionRecord)

    @property
    def term_label(self) -> str:
        return self.term.term_name if self.term else "ALL"


class LoginState(str, Enum):
    """Outcome of racing the 'go' button against the Duo frame."""
    LOGGED_IN = "logged_in"
    NEEDS_TWO_FACTOR = "needs_two_factor"
    UNCLASSIFIED = "unclassified"


class FailureKind(str, Enum):
    """Why a login call gave up for good."""
    ATTEMPTS_EXHAUSTED = "attempts_exhausted"
    CONTRACT_VIOLATION = "contract_violation"
    ELEMENT_MISSING = "element_missing"
    PASSCODE_MISMATCH = "passcode_mismatch"


class Success(BaseModel):
    """Cookies were extracted."""
    status: Literal["success"] = "success"
    cookies: str = Field(description="'name=value' pairs joined by '; '")


class SoftFailure(BaseModel):
    """Transient problem; the caller may simply try again later."""
    status: Literal["soft_failure"] = "soft_failure"
    reason: str = ""


class HardFailure(BaseModel):
    """The call cannot succeed without outside intervention."""
    status: Literal["hard_failure"] = "hard_failure"
    kind: FailureKind
    reason: str = ""


SessionResult = Union[Success, SoftFailure, HardFailure]


class Cookie(BaseModel):
    """A browser cookie (only the fields we forward)."""
    name: str
    value: str


class NavigationResponse(BaseModel):
    """Main-frame response of a navigation."""
    status: int
    url: str = ""

    @property
    def ok(self) -> bool:
        return 200 <= self.status < 300


def serialize_cookies(cookies: list[Cookie]) -> str:
    """Render cookies as a Cookie header value, preserving order."""
    return "; ".join(f"{c.name}={c.value}" for c in cookies)
