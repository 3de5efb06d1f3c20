import bcrypt
import structlog

from ezbase.core.core import Service
from ezbase.core.modules.user.models import User
from ezbase.core.modules.user.validators import MAX_PASSWORD_BYTES, normalize_email, validate_password
from ezbase.core.store import DocumentStore
from ezbase.errors import ValidationError

logger = structlog.get_logger(__name__)


class UserService(Service):
    """Manages email/password accounts."""

    def __init__(self, store: DocumentStore) -> None:
        super().__init__(store)
        self._collection = store.collection("users")

    async def on_start(self) -> None:
        await self._collection.create_index("email")

    async def get_user_by_email(self, email: str) -> User | None:
        record = await self._collection.find_one("email", email.strip().lower())
        return User.model_validate(record) if record is not None else None

    async def create_user(self, email: str, password: str) -> User:
        """Create user with hashed password."""
        email = normalize_email(email)
        validate_password(password)
        if await self.get_user_by_email(email) is not None:
            raise ValidationError(f"User '{email}' already exists")

        password_hash = bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt()).decode("utf-8")
        user = User(email=email, password_hash=password_hash)
        await self._collection.insert(user.to_document())
        logger.info("user_created", email=email)
        return user

    async def verify_password(self, email: str, password: str) -> User | None:
        """Return the user if the password matches its stored hash."""
        encoded = password.encode("utf-8")
        if len(encoded) > MAX_PASSWORD_BYTES:
            return None
        user = await self.get_user_by_email(email)
        if user is None:
            return None
        if not bcrypt.checkpw(encoded, user.password_hash.encode("utf-8")):
            return None
        return user
