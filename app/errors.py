"""Typed errors surfaced to the form caller"""

from enum import Enum
from typing import Any, Dict, Optional


class ErrorKind(str, Enum):
    """Caller-visible error codes"""
    MISSING_FIELD = "missing_field"
    TURNSTILE_MISSING = "turnstile_missing"
    TURNSTILE_FAILED = "turnstile_failed"
    MISSING_TO_EMAILS = "missing_to_emails"
    MISSING_API_KEY = "missing_api_key"
    MAILCHANNELS_FAILED_INTERNAL = "mailchannels_failed_internal"
    SERVER_ERROR = "server_error"

    @property
    def status_code(self) -> int:
        return _STATUS_CODES[self]


_STATUS_CODES = {
    ErrorKind.MISSING_FIELD: 400,
    ErrorKind.TURNSTILE_MISSING: 400,
    ErrorKind.TURNSTILE_FAILED: 400,
    ErrorKind.MISSING_TO_EMAILS: 500,
    ErrorKind.MISSING_API_KEY: 500,
    ErrorKind.MAILCHANNELS_FAILED_INTERNAL: 502,
    ErrorKind.SERVER_ERROR: 500,
}


class BookingError(Exception):
    """
    Error that aborts the booking pipeline with a visible response.

    The ``error`` value of the response body is the kind's code, except for
    missing fields where the message itself names the field.
    """

    def __init__(
        self,
        kind: ErrorKind,
        message: Optional[str] = None,
        detail: Any = None,
        upstream_status: Optional[int] = None,
    ):
        self.kind = kind
        self.message = message or kind.value
        self.detail = detail
        self.upstream_status = upstream_status
        super().__init__(self.message)

    @classmethod
    def missing_field(cls, name: str) -> "BookingError":
        return cls(ErrorKind.MISSING_FIELD, message=f"Missing field: {name}")

    @property
    def status_code(self) -> int:
        return self.kind.status_code

    def to_body(self) -> Dict[str, Any]:
        body: Dict[str, Any] = {"error": self.message}
        if self.kind == ErrorKind.MAILCHANNELS_FAILED_INTERNAL:
            body["status"] = self.upstream_status
        if self.detail is not None:
            body["detail"] = self.detail
        return body


class EmailDeliveryError(Exception):
    """The email provider rejected a message or could not be reached"""

    def __init__(self, detail: str, status: Optional[int] = None):
        self.detail = detail
        self.status = status
        super().__init__(f"Email delivery failed (status={status}): {detail}")
