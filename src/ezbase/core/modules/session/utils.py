from starlette.requests import cookie_parser

from ezbase.core.modules.session.models import SESSION_COOKIE, SessionToken


def extract_session_token(cookie_header: str | None) -> SessionToken | None:
    """Pull the session token out of a raw Cookie header.

    Returns None when the header is absent, has no session cookie, or the value is empty
    once surrounding quotes are stripped.
    """
    if not cookie_header:
        return None
    value = cookie_parser(cookie_header).get(SESSION_COOKIE)
    if value is None:
        return None
    token = value.strip('"')
    if not token:
        return None
    return SessionToken(token)
