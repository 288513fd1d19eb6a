"""Authorization header injectors.

Both injectors take the in-progress request configuration and an auth
payload, set ``Authorization`` when the payload is not None, and return
the configuration. A None payload is a passthrough.
"""

from typing import TYPE_CHECKING, Optional

from ...models import Auth, BasicAuth, BearerAuth
from ..encoding import string_to_base64

if TYPE_CHECKING:
    from .request_config import RequestConfig


def set_auth_bearer_token(
    request_config: "RequestConfig", token: Optional[str]
) -> "RequestConfig":
    """Set ``Authorization: Bearer <token>``."""
    if token is not None:
        request_config.headers["Authorization"] = f"Bearer {token}"
    return request_config


def set_auth_basic(
    request_config: "RequestConfig", credentials: Optional[BasicAuth]
) -> "RequestConfig":
    """Set ``Authorization: Basic <base64(username:password)>``."""
    if credentials is not None:
        pair = f"{credentials.username}:{credentials.password}"
        request_config.headers["Authorization"] = f"Basic {string_to_base64(pair)}"
    return request_config


def apply_auth(request_config: "RequestConfig", auth: Auth) -> "RequestConfig":
    """Dispatch to the injector matching the auth variant."""
    if isinstance(auth, BearerAuth):
        return set_auth_bearer_token(request_config, auth.token)
    if isinstance(auth, BasicAuth):
        return set_auth_basic(request_config, auth)
    return request_config
