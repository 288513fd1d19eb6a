"""HTTP helper package.

This package wraps ``httpx`` with two convenience entry points,
``fetch_json`` and ``fetch_data``, that normalize request construction
(method, body encoding, auth headers, timeout, response type) and report
every outcome through a uniform ``(error, status, headers, data)``
callback.

:var __version__: Current package version
:type __version__: str
"""

__version__ = "0.1.0"

from .config.settings import HttpSettings, load_settings  # noqa: E402
from .exceptions import (  # noqa: E402
    ConfigurationError,
    HttpHelperError,
    RequestTimeoutError,
    ResponseTooLargeError,
    TransportFailureError,
    UnknownError,
)
from .facade import Fetcher, create_fetcher  # noqa: E402
from .models import (  # noqa: E402
    BasicAuth,
    BearerAuth,
    ContentType,
    FetchResult,
    NoAuth,
    RequestOptions,
    ResponseType,
)
from .utils.http import FormData, RequestInstance  # noqa: E402

__all__ = [
    "__version__",
    "HttpSettings",
    "load_settings",
    "Fetcher",
    "create_fetcher",
    "RequestInstance",
    "FormData",
    "FetchResult",
    "RequestOptions",
    "ContentType",
    "ResponseType",
    "NoAuth",
    "BearerAuth",
    "BasicAuth",
    "HttpHelperError",
    "ConfigurationError",
    "TransportFailureError",
    "RequestTimeoutError",
    "ResponseTooLargeError",
    "UnknownError",
]
