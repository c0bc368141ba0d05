"""Tests for the HTTP client."""

import pytest
from jwmd.http import AsyncHttpClient, HttpResponse


def _response(status_code: int, content: bytes = b"", content_type: str = "text/html") -> HttpResponse:
    return HttpResponse(
        status_code=status_code,
        content=content,
        content_type=content_type,
        headers={"Content-Type": content_type},
        url="https://www.jw.org/en/",
    )


class TestHttpResponse:
    """Tests for HttpResponse."""

    @pytest.mark.parametrize("status_code,ok", [(200, True), (204, True), (301, False), (404, False), (503, False)])
    def test_ok(self, status_code, ok):
        """Test only 2xx responses are ok."""
        assert _response(status_code).ok is ok


class TestDecoding:
    """Tests for response decoding."""

    def test_declared_charset(self):
        """Test the Content-Type charset is used."""
        client = AsyncHttpClient()
        response = _response(200, "Noël".encode("iso-8859-1"), "text/html; charset=ISO-8859-1")

        assert client.decode_content(response) == "Noël"

    def test_quoted_charset(self):
        """Test a quoted charset value is accepted."""
        client = AsyncHttpClient()
        response = _response(200, "Café".encode("utf-8"), 'text/html; charset="utf-8"')

        assert client.decode_content(response) == "Café"

    def test_unknown_charset_detected(self):
        """Test an unknown declared charset falls back to detection."""
        client = AsyncHttpClient()
        text = "<p>Jehovah is a God of love and justice.</p>"
        response = _response(200, text.encode("utf-8"), "text/html; charset=bogus")

        assert client.decode_content(response) == text

    def test_no_charset(self):
        """Test plain ASCII without a charset."""
        client = AsyncHttpClient()

        assert client.decode_content(_response(200, b"<p>Hello world</p>")) == "<p>Hello world</p>"


class TestClient:
    """Tests for client setup."""

    def test_retry_delay_grows(self):
        """Test the backoff delay doubles per attempt."""
        client = AsyncHttpClient(retry_base_delay=1.0)

        assert 1.0 <= client._calculate_retry_delay(0) <= 2.0
        assert 4.0 <= client._calculate_retry_delay(2) <= 5.0

    @pytest.mark.asyncio
    async def test_get_requires_session(self):
        """Test get outside the context manager fails."""
        client = AsyncHttpClient()

        with pytest.raises(RuntimeError, match="async with"):
            await client.get("https://www.jw.org/en/")

    @pytest.mark.asyncio
    async def test_session_lifecycle(self):
        """Test the session is opened and closed with the context."""
        client = AsyncHttpClient(user_agent="jwmd-test")

        async with client:
            assert client._session is not None
            assert client._session.headers["User-Agent"] == "jwmd-test"

        assert client._session is None
