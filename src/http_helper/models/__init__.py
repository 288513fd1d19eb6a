"""Models for HTTP helper requests and results."""

from .request import (
    BODY_METHODS,
    Auth,
    BasicAuth,
    BearerAuth,
    ContentType,
    NoAuth,
    RequestOptions,
    ResponseType,
    resolve_auth,
)
from .response import FetchResult

__all__ = [
    "Auth",
    "BODY_METHODS",
    "BasicAuth",
    "BearerAuth",
    "ContentType",
    "FetchResult",
    "NoAuth",
    "RequestOptions",
    "ResponseType",
    "resolve_auth",
]
