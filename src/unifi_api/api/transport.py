"""HTTP transport for the UniFi controller.

Wraps an ``httpx.AsyncClient``: injects session credentials into every
request, captures cookies from every response, and classifies transport
failures into the client's exception hierarchy.

Classification:
- HTTP 401: session invalidated, AuthenticationError
- connection refused / host not found: ConnectionError naming the target
- anything else (other HTTP statuses, timeouts): re-raised unmodified
"""

from typing import Any, Optional

import httpx
import structlog

from unifi_api.config import ControllerConfig
from unifi_api.exceptions import AuthenticationError, ConnectionError

from .session import SessionState

logger = structlog.get_logger(__name__)

USER_AGENT = "unifi-api-python/1.0"


class Transport:
    """Credential-aware HTTP transport bound to one controller.

    Attributes:
        config: Connection configuration.
        session: Session state shared with the owning client.
    """

    def __init__(
        self,
        config: ControllerConfig,
        session: SessionState,
        client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        """Initialize the transport.

        Args:
            config: Connection configuration.
            session: Session state to read credentials from and write cookies to.
            client: Pre-built httpx client (tests); built from config if omitted.
        """
        self.config = config
        self.session = session
        self._client = client or httpx.AsyncClient(
            base_url=config.base_url,
            timeout=config.timeout_seconds,
            verify=config.strict_ssl,
            headers={
                "Content-Type": "application/json",
                "Accept": "application/json",
                "User-Agent": USER_AGENT,
            },
        )

    @property
    def base_url(self) -> str:
        """Base URL of the controller."""
        return self.config.base_url

    @property
    def is_closed(self) -> bool:
        """Whether the underlying HTTP client has been closed."""
        return self._client.is_closed

    async def request(
        self,
        method: str,
        path: str,
        json: Any = None,
    ) -> httpx.Response:
        """Send one request with session credentials attached.

        Args:
            method: HTTP method (GET, POST, PUT, DELETE, PATCH).
            path: Path relative to the controller base URL.
            json: Optional JSON body.

        Returns:
            The successful (2xx) response.

        Raises:
            AuthenticationError: The controller answered 401.
            ConnectionError: The controller could not be reached.
            httpx.HTTPStatusError: Any other error status.
            httpx.HTTPError: Any other transport failure (e.g. timeout).
        """
        headers = self.session.request_headers()

        try:
            response = await self._client.request(method, path, json=json, headers=headers)
        except httpx.ConnectError as e:
            logger.warning("controller_unreachable", target=self.base_url, error=str(e))
            raise ConnectionError(target=self.base_url) from e

        self._capture_cookies(response)

        if response.status_code == 401:
            self.session.invalidate()
            logger.info("session_rejected", path=path, status_code=401)
            raise AuthenticationError("Authentication failed")

        response.raise_for_status()
        return response

    def _capture_cookies(self, response: httpx.Response) -> None:
        """Store cookies issued by the controller in the session state."""
        if self.session.update_cookies(response.headers.get_list("set-cookie")):
            logger.debug("session_cookies_updated")
        # SessionState owns the cookie blob; keep httpx's jar from merging its own
        self._client.cookies.clear()

    async def aclose(self) -> None:
        """Close the underlying HTTP client."""
        await self._client.aclose()
