from pydantic import Field

from ezbase.core.db import StoredModel
from ezbase.utils import unix_now


class RequestLog(StoredModel):
    """One served HTTP request."""

    method: str
    path: str
    status_code: int
    duration_ms: float
    client: str | None = None
    timestamp: int = Field(default_factory=unix_now)
