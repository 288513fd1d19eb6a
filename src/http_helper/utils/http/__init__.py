"""HTTP utilities public API (barrel module).

This package provides:
- Request instances with a lazily created, cached ``httpx.AsyncClient``
- Request configuration assembly and auth header injectors
- The multipart ``FormData`` body object
- The fetch operation that normalizes every outcome into a ``FetchResult``

Recommended import pattern for consumers:
    from http_helper.utils.http import RequestInstance, FormData, fetch
"""

from .auth import apply_auth, set_auth_basic, set_auth_bearer_token
from .cancellation import CancelHandle
from .client_manager import (
    DEFAULT_ACCEPT,
    RequestInstance,
    create_credentialless_client,
    create_http_client,
)
from .fetch import fetch
from .multipart import FormData
from .request_config import RequestConfig, build_request_config

__all__ = [
    "DEFAULT_ACCEPT",
    "CancelHandle",
    "FormData",
    "RequestConfig",
    "RequestInstance",
    "apply_auth",
    "build_request_config",
    "create_credentialless_client",
    "create_http_client",
    "fetch",
    "set_auth_basic",
    "set_auth_bearer_token",
]
