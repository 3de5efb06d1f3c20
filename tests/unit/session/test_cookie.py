"""Tests for session token extraction from the Cookie header."""

from ezbase.core.modules.session.utils import extract_session_token


class TestExtractSessionToken:
    def test_missing_header(self):
        assert extract_session_token(None) is None
        assert extract_session_token("") is None

    def test_no_session_cookie(self):
        assert extract_session_token("theme=dark; lang=en") is None

    def test_plain_token(self):
        assert extract_session_token("session=abc123") == "abc123"

    def test_quoted_token_is_unwrapped(self):
        assert extract_session_token('session="abc123"') == "abc123"

    def test_token_among_other_cookies(self):
        assert extract_session_token('theme=dark; session="abc123"; lang=en') == "abc123"

    def test_empty_value_is_rejected(self):
        assert extract_session_token("session=") is None
        assert extract_session_token('session=""') is None
