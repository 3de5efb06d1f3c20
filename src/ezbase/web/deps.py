from typing import Annotated, cast

import structlog
from fastapi import Depends, Request

from ezbase.app import App
from ezbase.core.modules.session.models import SessionToken
from ezbase.core.modules.session.utils import extract_session_token
from ezbase.errors import AuthenticationError

logger = structlog.get_logger(__name__)


async def get_app(request: Request) -> App:
    return cast(App, request.app.state.app)


async def get_session_token(request: Request) -> SessionToken | None:
    """Session token from the raw Cookie header, None when absent or unreadable."""
    return extract_session_token(request.headers.get("cookie"))


async def require_session(
    app: Annotated[App, Depends(get_app)],
    token: Annotated[SessionToken | None, Depends(get_session_token)],
) -> SessionToken:
    """Session gate for protected routes.

    Runs before the route handler. Every rejection raises the same AuthenticationError,
    which the error handlers turn into an empty 401.
    """
    if token is None:
        logger.info("session_cookie_missing")
        raise AuthenticationError
    if not await app.validate_session(token):
        raise AuthenticationError
    return token


# Type aliases for dependencies
AppDep = Annotated[App, Depends(get_app)]
SessionTokenDep = Annotated[SessionToken | None, Depends(get_session_token)]
