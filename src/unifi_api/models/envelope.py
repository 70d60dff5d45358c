"""Response envelope returned by every synchronous controller call.

The controller wraps payloads as ``{"meta": {"rc": "ok", ...}, "data": ...}``.
``data`` may be missing, an object, or an array depending on the endpoint.
"""

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field

# Result code the controller uses to signal success
SUCCESS_RC = "ok"


class ResponseMeta(BaseModel):
    """Metadata section of a response envelope."""

    model_config = ConfigDict(extra="allow")

    rc: Optional[str] = Field(default=None, description="Result code ('ok' on success)")
    msg: Optional[str] = Field(default=None, description="Server-supplied message")
    csrf_token: Optional[str] = Field(default=None, description="Anti-forgery token (login only)")


class ResponseEnvelope(BaseModel):
    """A parsed controller response."""

    model_config = ConfigDict(extra="allow")

    meta: ResponseMeta = Field(default_factory=ResponseMeta)
    data: Any = None

    @property
    def ok(self) -> bool:
        """Whether the result code is the success sentinel."""
        return self.meta.rc == SUCCESS_RC

    @classmethod
    def from_payload(cls, payload: Any) -> "ResponseEnvelope":
        """Build an envelope from decoded JSON, tolerating unexpected shapes.

        Anything that is not an object with an object ``meta`` section yields
        an envelope without a result code, which callers treat as a failure.
        """
        if not isinstance(payload, dict) or not isinstance(payload.get("meta"), dict):
            return cls()
        return cls.model_validate(payload)
