"""Result channel for a single fetch.

A ``FetchResult`` carries exactly one outcome of a request: either an
error (transport failure or synthetic setup error) or a response
(status, lower-cased headers, body). Non-2xx responses are responses,
not errors.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Tuple

import httpx


@dataclass(frozen=True)
class FetchResult:
    """Outcome of one request.

    :param error: Error when no response was obtained, otherwise None
    :type error: Optional[Exception]
    :param status: HTTP status code when a response was received
    :type status: Optional[int]
    :param headers: Response headers with lower-cased keys
    :type headers: Dict[str, str]
    :param data: Response body shaped per the requested response type
    :type data: Any
    """

    error: Optional[Exception] = None
    status: Optional[int] = None
    headers: Dict[str, str] = field(default_factory=dict)
    data: Any = None

    @classmethod
    def failure(cls, error: Exception) -> "FetchResult":
        return cls(error=error)

    @classmethod
    def from_response(cls, response: httpx.Response, data: Any) -> "FetchResult":
        """Build a result from a received response and its shaped body."""
        headers = {k.lower(): v for k, v in response.headers.items()}
        return cls(status=response.status_code, headers=headers, data=data)

    @property
    def has_response(self) -> bool:
        return self.error is None

    def is_success(self) -> bool:
        """Check if a response was received with a 2xx status code.

        :return: True if status code is in 200-299 range
        :rtype: bool
        """
        return self.status is not None and 200 <= self.status < 300

    def is_client_error(self) -> bool:
        """Check if the response indicates a client error (4xx status code).

        :return: True if status code is in 400-499 range
        :rtype: bool
        """
        return self.status is not None and 400 <= self.status < 500

    def is_server_error(self) -> bool:
        """Check if the response indicates a server error (5xx status code).

        :return: True if status code is in 500-599 range
        :rtype: bool
        """
        return self.status is not None and 500 <= self.status < 600

    def as_callback_args(self) -> Tuple[Any, ...]:
        """Positional arguments for a ``(error, status, headers, data)`` callback.

        Error outcomes pass the error alone. Responses pass ``None`` for
        the error followed by status, headers and data.
        """
        if self.error is not None:
            return (self.error,)
        return (None, self.status, self.headers, self.data)
