"""Tests for SessionState."""

from unifi_api.api.session import SessionState


class TestSessionState:
    """Tests for SessionState dataclass."""

    def test_initial_state(self):
        """A new session holds no credentials."""
        state = SessionState()

        assert state.cookies == ""
        assert state.csrf_token == ""
        assert state.is_authenticated is False
        assert state.request_headers() == {}

    def test_update_cookies_keeps_name_value_pairs(self):
        """Cookie attributes are dropped and pairs joined with '; '."""
        state = SessionState()

        changed = state.update_cookies(
            [
                "unifises=abc123; Path=/; Secure; HttpOnly",
                "csrf_token=xyz; Path=/; Secure",
            ]
        )

        assert changed is True
        assert state.cookies == "unifises=abc123; csrf_token=xyz"

    def test_update_cookies_replaces_previous(self):
        """New cookies replace the stored value wholesale."""
        state = SessionState(cookies="old=1")

        state.update_cookies(["unifises=new; Path=/"])

        assert state.cookies == "unifises=new"

    def test_update_cookies_without_headers(self):
        """Responses without Set-Cookie leave cookies untouched."""
        state = SessionState(cookies="unifises=abc")

        assert state.update_cookies([]) is False
        assert state.cookies == "unifises=abc"

    def test_request_headers(self):
        """Cookies and CSRF token are attached when held."""
        state = SessionState(cookies="unifises=abc", csrf_token="tok")

        assert state.request_headers() == {"Cookie": "unifises=abc", "X-Csrf-Token": "tok"}

    def test_invalidate_keeps_cookies(self):
        """invalidate() only flips the authenticated flag."""
        state = SessionState(cookies="unifises=abc", csrf_token="tok", is_authenticated=True)

        state.invalidate()

        assert state.is_authenticated is False
        assert state.cookies == "unifises=abc"

    def test_clear(self):
        """clear() forgets everything."""
        state = SessionState(cookies="unifises=abc", csrf_token="tok", is_authenticated=True)

        state.clear()

        assert state == SessionState()
