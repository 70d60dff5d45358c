"""Session state for an authenticated controller connection.

The state is owned by exactly one UnifiClient and is only mutated by the
transport (cookies, 401 handling) and by login/logout. Nothing here is ever
written to disk.
"""

from dataclasses import dataclass
from typing import Dict, Iterable


@dataclass
class SessionState:
    """Credentials of the current controller session.

    Attributes:
        cookies: ``name=value`` pairs exactly as issued by the controller,
            joined with ``"; "``. Replaced wholesale whenever a response
            sets new cookies.
        csrf_token: Anti-forgery token issued at login, echoed on every request.
        is_authenticated: True between a successful login and logout or a 401.
    """

    cookies: str = ""
    csrf_token: str = ""
    is_authenticated: bool = False

    def update_cookies(self, set_cookie_headers: Iterable[str]) -> bool:
        """Replace the stored cookies with those from Set-Cookie headers.

        Cookie attributes (Path, HttpOnly, Expires...) are dropped; only the
        leading ``name=value`` pair of each header is kept.

        Returns:
            True if the response carried any cookies.
        """
        pairs = [header.split(";", 1)[0].strip() for header in set_cookie_headers]
        pairs = [pair for pair in pairs if pair]
        if not pairs:
            return False
        self.cookies = "; ".join(pairs)
        return True

    def request_headers(self) -> Dict[str, str]:
        """Headers carrying the session credentials, if any are held."""
        headers: Dict[str, str] = {}
        if self.cookies:
            headers["Cookie"] = self.cookies
        if self.csrf_token:
            headers["X-Csrf-Token"] = self.csrf_token
        return headers

    def invalidate(self) -> None:
        """Mark the session unauthenticated, keeping cookies for diagnostics."""
        self.is_authenticated = False

    def clear(self) -> None:
        """Forget all session credentials (logout)."""
        self.cookies = ""
        self.csrf_token = ""
        self.is_authenticated = False
