"""Session management models."""

from typing import NewType

from pydantic import Field

from ezbase.core.db import StoredModel
from ezbase.utils import unix_now

SessionToken = NewType("SessionToken", str)

SESSION_COOKIE = "session"


class Session(StoredModel):
    """Authenticated session with a sliding expiry.

    Indexed on session_id. Expiry is an absolute Unix timestamp and an exclusive bound:
    the session is usable strictly before `active_period_expires_at`.
    """

    session_id: str
    email: str
    created_at: int = Field(default_factory=unix_now)
    active_period_expires_at: int
