"""Custom exceptions for UniFi API operations.

All exceptions inherit from UnifiAPIError for consistent error handling.
Each exception carries an ErrorCode so callers can branch on the kind of
failure without matching message text, plus a helpful hint for non-experts.
"""

from typing import Optional

from unifi_api.models import ErrorCode


class UnifiAPIError(Exception):
    """Base exception for all UniFi API errors.

    Attributes:
        message: Human-readable error message.
        hint: Optional troubleshooting hint for non-experts.
        exit_code: Suggested exit code for CLI applications.
        code: Discriminable error kind.
    """

    exit_code: int = 1
    code: ErrorCode = ErrorCode.API_ERROR

    def __init__(
        self,
        message: str,
        hint: Optional[str] = None,
        exit_code: Optional[int] = None,
    ) -> None:
        self.message = message
        self.hint = hint
        if exit_code is not None:
            self.exit_code = exit_code
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        """Format the exception message with optional hint."""
        if self.hint:
            return f"{self.message}\n\nHint: {self.hint}"
        return self.message


class ConfigurationError(UnifiAPIError):
    """Connection configuration is incomplete or invalid.

    Raised synchronously while building a ControllerConfig, before any
    network activity happens.
    """

    code = ErrorCode.CONFIGURATION_ERROR

    def __init__(
        self,
        message: str = "Host, username, and password are required",
        hint: Optional[str] = None,
    ) -> None:
        super().__init__(message=message, hint=hint, exit_code=1)


class AuthenticationError(UnifiAPIError):
    """Authentication failed with the UniFi Controller.

    This typically occurs when:
    - Using cloud/SSO credentials instead of local admin account
    - Incorrect username or password
    - The controller invalidated the session (HTTP 401)
    """

    exit_code: int = 3
    code = ErrorCode.INVALID_CREDENTIALS

    def __init__(
        self,
        message: str = "Authentication failed",
        hint: Optional[str] = None,
    ) -> None:
        if hint is None:
            hint = (
                "Ensure you're using a LOCAL admin account, not cloud SSO. "
                "Create a local admin in UniFi OS Console > Admins & Users."
            )
        super().__init__(message=message, hint=hint, exit_code=3)


class ConnectionError(UnifiAPIError):
    """Cannot reach the UniFi Controller.

    This typically occurs when:
    - Controller is not running
    - Incorrect hostname/IP address
    - Firewall blocking the connection

    Attributes:
        target: The address that could not be reached.
    """

    exit_code: int = 2
    code = ErrorCode.CONNECTION_ERROR

    def __init__(
        self,
        message: Optional[str] = None,
        target: Optional[str] = None,
        hint: Optional[str] = None,
    ) -> None:
        self.target = target
        if message is None:
            message = (
                f"Cannot connect to UniFi Controller at {target}"
                if target
                else "Cannot connect to UniFi Controller"
            )
        if hint is None:
            hint = (
                "Is the UniFi Controller running? Check network connectivity. "
                "Common ports are 443 (UDM), 8443 (self-hosted), 11443 (UniFi OS Server)."
            )
        super().__init__(message=message, hint=hint, exit_code=2)


class ApiResponseError(UnifiAPIError):
    """The controller answered, but its response envelope reports a failure.

    Attributes:
        server_message: The ``meta.msg`` value supplied by the controller, if any.
    """

    code = ErrorCode.API_ERROR

    def __init__(self, server_message: Optional[str] = None) -> None:
        self.server_message = server_message
        super().__init__(message=f"API Error: {server_message or 'Unknown error'}")


class NotFoundError(UnifiAPIError):
    """No record with the requested identifier exists in the fetched collection."""

    code = ErrorCode.NOT_FOUND

    def __init__(self, kind: str, identifier: str) -> None:
        self.kind = kind
        self.identifier = identifier
        super().__init__(message=f"{kind} with MAC {identifier} not found")


class EventParseError(UnifiAPIError):
    """An inbound event frame could not be decoded.

    Reported through the ``error`` notification; the stream keeps running.
    """

    code = ErrorCode.EVENT_PARSE_ERROR

    def __init__(self, detail: str) -> None:
        super().__init__(message=f"Failed to parse event data: {detail}")
