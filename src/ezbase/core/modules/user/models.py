from pydantic import BaseModel, Field

from ezbase.core.db import StoredModel
from ezbase.utils import unix_now


class User(StoredModel):
    """User account with credentials."""

    email: str
    password_hash: str  # bcrypt hash
    created_at: int = Field(default_factory=unix_now)


class UserView(BaseModel):
    """User account information (API representation)."""

    id: str = Field(..., description="User ID")
    email: str = Field(..., description="Email address")

    @classmethod
    def from_domain(cls, user: User) -> "UserView":
        """Create view model from domain model."""
        return cls(id=user.id, email=user.email)
