import secrets

import structlog

from ezbase.core.core import Service
from ezbase.core.modules.session.models import Session, SessionToken
from ezbase.core.store import DeleteMatched, DocumentStore, SetField
from ezbase.errors import StoreError
from ezbase.utils import unix_now

logger = structlog.get_logger(__name__)


class SessionService(Service):
    """Creates, validates and invalidates sliding-expiry sessions."""

    def __init__(self, store: DocumentStore) -> None:
        super().__init__(store)
        self._collection = store.collection("user_session")

    @property
    def session_time(self) -> int:
        return self.core.config.session_time

    async def on_start(self) -> None:
        """Create indexes on startup."""
        await self._collection.create_index("session_id")

    async def create_session(self, email: str) -> Session:
        now = unix_now()
        session = Session(
            session_id=secrets.token_urlsafe(32),
            email=email,
            created_at=now,
            active_period_expires_at=now + self.session_time,
        )
        await self._collection.insert(session.to_document())
        logger.info("session_created", email=email, expires_at=session.active_period_expires_at)
        return session

    async def validate_session(self, token: SessionToken) -> bool:
        """Admit a live session and slide its expiry to now + session_time.

        Every failure returns False; the cause is only visible in the logs.
        """
        try:
            record = await self._collection.find_one("session_id", token)
        except StoreError:
            logger.warning("session_store_failure", stage="lookup", exc_info=True)
            return False

        if record is None:
            logger.info("session_not_found")
            return False

        expires_at = record.get("active_period_expires_at")
        if isinstance(expires_at, bool) or not isinstance(expires_at, int):
            logger.warning("session_malformed", session_record_id=record.get("_id"))
            return False

        now = unix_now()
        if now >= expires_at:
            logger.info("session_expired", email=record.get("email"), expired_at=expires_at, now=now)
            return False

        new_expiry = now + self.session_time
        try:
            matched = await self._collection.update_matching(
                "session_id", token, SetField(field="active_period_expires_at", value=new_expiry)
            )
        except StoreError:
            logger.warning("session_store_failure", stage="extend", exc_info=True)
            return False

        if matched == 0:
            # Logged out between lookup and extension
            logger.info("session_not_found")
            return False

        logger.debug("session_extended", email=record.get("email"), expires_at=new_expiry)
        return True

    async def invalidate_session(self, token: SessionToken) -> int:
        """Remove every record carrying this token and return how many were removed."""
        removed = await self._collection.update_matching("session_id", token, DeleteMatched())
        logger.info("session_invalidated", removed=removed)
        return removed
