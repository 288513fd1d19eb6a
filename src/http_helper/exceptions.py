"""Structured exception classes for the HTTP helper.

None of these are raised into the caller of ``fetch_json`` or
``fetch_data``. They are delivered as the ``error`` argument of the
result callback.
"""

import json
from typing import Any, Dict, Optional


class HttpHelperError(Exception):
    """Base class for errors delivered to fetch callbacks.

    :param message: Human-readable message
    :param code: Stable code callers can branch on (class name by default)
    :param details: Extra context such as the URL or the exceeded limit
    """

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code or type(self).__name__
        self.details = dict(details or {})

    def __repr__(self) -> str:
        return f"{type(self).__name__}(code={self.code!r}, message={self.message!r})"

    def to_dict(self) -> Dict[str, Any]:
        """Error as a plain mapping: ``{"error": code, "message", "details"}``."""
        return {"error": self.code, "message": self.message, "details": self.details}

    def to_json(self) -> str:
        return json.dumps(self.to_dict(), default=str)


class TransportFailureError(HttpHelperError):
    """Raised when a request was dispatched but no response was received.

    Covers connection drops, DNS failures, redirect limits and similar
    conditions reported by ``httpx`` as ``httpx.RequestError``.

    :param message: Description of the transport failure
    :param url: Optional URL of the failed request
    :param cause: Optional underlying exception from the HTTP client
    """

    def __init__(
        self,
        message: str,
        url: Optional[str] = None,
        cause: Optional[BaseException] = None,
    ):
        """Initialize transport failure with message and optional cause."""
        details: Dict[str, Any] = {}
        if url:
            details["url"] = url
        if cause is not None:
            details["error_type"] = type(cause).__name__
        super().__init__(message=message, code="TRANSPORT_ERROR", details=details)
        self.url = url
        self.cause = cause


class RequestTimeoutError(TransportFailureError):
    """Raised when no response arrived within the configured timeout.

    :param message: Description of the timeout
    :param url: Optional URL of the request that timed out
    :param timeout: Optional effective timeout in seconds
    :param cause: Optional underlying ``httpx.TimeoutException``
    """

    def __init__(
        self,
        message: str,
        url: Optional[str] = None,
        timeout: Optional[float] = None,
        cause: Optional[BaseException] = None,
    ):
        """Initialize timeout error with message and optional timeout."""
        super().__init__(message=message, url=url, cause=cause)
        self.code = "TIMEOUT_ERROR"
        if timeout is not None:
            self.details["timeout"] = timeout
        self.timeout = timeout


class ResponseTooLargeError(TransportFailureError):
    """Raised when a response body exceeds the configured maximum size.

    :param message: Description of the size violation
    :param limit: Maximum allowed body size in bytes
    :param url: Optional URL of the request
    """

    def __init__(self, message: str, limit: int, url: Optional[str] = None):
        """Initialize size error with message and the exceeded limit."""
        super().__init__(message=message, url=url)
        self.code = "MAX_CONTENT_SIZE_EXCEEDED"
        self.details["limit"] = limit
        self.limit = limit


class UnknownError(HttpHelperError):
    """Synthetic error delivered when a request could not be set up.

    The underlying cause is logged and never forwarded to the caller.
    Code and message come from ``HttpSettings``.
    """

    def __init__(self, message: str, code: str = "UNKNOWN_ERROR"):
        """Initialize the synthetic error with a configured code/message."""
        super().__init__(message=message, code=code)


class ConfigurationError(HttpHelperError):
    """Raised by ``load_settings`` when a value fails validation.

    :param message: Validation summary
    :param setting: Name of the first offending setting, when known
    """

    def __init__(self, message: str, setting: Optional[str] = None):
        super().__init__(
            message=message,
            code="CONFIGURATION_ERROR",
            details={"setting": setting} if setting else None,
        )
        self.setting = setting
