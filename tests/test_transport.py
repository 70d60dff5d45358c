"""Tests for the HTTP transport. Uses respx for mocking HTTP requests."""

import json

import httpx
import pytest
import respx
from httpx import Response

from unifi_api.api.session import SessionState
from unifi_api.api.transport import Transport
from unifi_api.exceptions import AuthenticationError, ConnectionError

from .conftest import BASE_URL, ok


@pytest.fixture
def session() -> SessionState:
    return SessionState()


@pytest.fixture
def transport(config, session) -> Transport:
    return Transport(config, session)


class TestTransportRequest:
    """Tests for Transport.request()."""

    @pytest.mark.asyncio
    @respx.mock
    async def test_sends_session_credentials(self, transport, session):
        """Stored cookies and CSRF token are attached to every request."""
        session.cookies = "unifises=abc"
        session.csrf_token = "tok"
        route = respx.get(f"{BASE_URL}/api/self").mock(return_value=Response(200, json=ok([])))

        await transport.request("GET", "/api/self")

        request = route.calls.last.request
        assert request.headers["Cookie"] == "unifises=abc"
        assert request.headers["X-Csrf-Token"] == "tok"
        assert request.headers["Content-Type"] == "application/json"

    @pytest.mark.asyncio
    @respx.mock
    async def test_captures_cookies(self, transport, session):
        """Set-Cookie headers replace the stored cookie value."""
        respx.post(f"{BASE_URL}/api/login").mock(
            return_value=Response(
                200,
                json=ok(),
                headers=[
                    ("Set-Cookie", "unifises=abc; Path=/; HttpOnly"),
                    ("Set-Cookie", "csrf_token=xyz; Path=/"),
                ],
            )
        )

        await transport.request("POST", "/api/login", json={"username": "admin"})

        assert session.cookies == "unifises=abc; csrf_token=xyz"

    @pytest.mark.asyncio
    @respx.mock
    async def test_sends_json_body(self, transport):
        """JSON bodies are serialized."""
        route = respx.post(f"{BASE_URL}/api/s/default/cmd/devmgr").mock(
            return_value=Response(200, json=ok([]))
        )

        await transport.request("POST", "/api/s/default/cmd/devmgr", json={"cmd": "restart"})

        assert json.loads(route.calls.last.request.content) == {"cmd": "restart"}

    @pytest.mark.asyncio
    @respx.mock
    async def test_401_invalidates_session(self, transport, session):
        """HTTP 401 clears the authenticated flag and raises AuthenticationError."""
        session.is_authenticated = True
        respx.get(f"{BASE_URL}/api/self").mock(return_value=Response(401))

        with pytest.raises(AuthenticationError) as exc_info:
            await transport.request("GET", "/api/self")

        assert exc_info.value.message == "Authentication failed"
        assert session.is_authenticated is False

    @pytest.mark.asyncio
    @respx.mock
    async def test_connect_error_mapped(self, transport):
        """Connection refused surfaces as ConnectionError naming the base URL."""
        respx.get(f"{BASE_URL}/api/self").mock(side_effect=httpx.ConnectError("refused"))

        with pytest.raises(ConnectionError) as exc_info:
            await transport.request("GET", "/api/self")

        assert exc_info.value.message == f"Cannot connect to UniFi Controller at {BASE_URL}"
        assert isinstance(exc_info.value.__cause__, httpx.ConnectError)

    @pytest.mark.asyncio
    @respx.mock
    async def test_other_status_reraised(self, transport, session):
        """Other error statuses propagate unmodified and keep the session."""
        session.is_authenticated = True
        respx.get(f"{BASE_URL}/api/self").mock(return_value=Response(500))

        with pytest.raises(httpx.HTTPStatusError):
            await transport.request("GET", "/api/self")

        assert session.is_authenticated is True

    @pytest.mark.asyncio
    @respx.mock
    async def test_timeout_reraised(self, transport):
        """Timeouts are not reclassified."""
        respx.get(f"{BASE_URL}/api/self").mock(side_effect=httpx.ReadTimeout("slow"))

        with pytest.raises(httpx.ReadTimeout):
            await transport.request("GET", "/api/self")

    @pytest.mark.asyncio
    async def test_aclose(self, transport):
        """aclose() closes the underlying client."""
        await transport.aclose()

        assert transport.is_closed is True
