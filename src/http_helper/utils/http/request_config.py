"""Request configuration assembly.

Turns one logical request (url, method, params, content type, timeout,
response type, headers, auth, credential policy) into a
``RequestConfig``: the keyword arguments for
``httpx.AsyncClient.build_request`` plus what the fetch operation needs
afterwards (cancel handle, response transform, credential policy).

Assembly order matters. General headers come first, then auth, then the
JSON ``Accept``, then ``Content-Type``. Caller-supplied headers are
merged last and win on any collision.
"""

from dataclasses import dataclass
from typing import Any, Callable, Dict, Mapping, Optional, Union

import httpx

from ...config.settings import HttpSettings
from ...models import (
    BODY_METHODS,
    Auth,
    ContentType,
    NoAuth,
    ResponseType,
)
from ..encoding import (
    encode_query_params,
    string_to_json,
    stringify_form,
    to_json_text,
)
from .auth import apply_auth
from .cancellation import CancelHandle

# (raw body, charset) -> shaped data
ResponseTransform = Callable[[bytes, str], Any]


def _raw_bytes(content: bytes, encoding: str) -> bytes:
    return content


def _decode_text(content: bytes, encoding: str) -> str:
    return content.decode(encoding, errors="replace")


def _parse_json(content: bytes, encoding: str) -> Any:
    return string_to_json(content.decode(encoding, errors="replace"))


RESPONSE_TRANSFORMS: Dict[ResponseType, ResponseTransform] = {
    ResponseType.ARRAYBUFFER: _raw_bytes,
    ResponseType.TEXT: _decode_text,
    ResponseType.JSON: _parse_json,
}


@dataclass
class RequestConfig:
    """In-progress configuration of one outgoing request."""

    url: str
    method: str
    cancel_handle: CancelHandle
    headers: httpx.Headers
    response_type: ResponseType
    timeout: Optional[float]
    params: Any = None
    content: Optional[Union[bytes, str]] = None
    with_credentials: bool = True

    @property
    def transform_response(self) -> ResponseTransform:
        return RESPONSE_TRANSFORMS[self.response_type]

    def build_kwargs(self) -> Dict[str, Any]:
        """Keyword arguments for ``httpx.AsyncClient.build_request``."""
        return {
            "method": self.method,
            "url": self.url,
            "headers": self.headers,
            "params": self.params,
            "content": self.content,
            "timeout": self.timeout,
        }


def _merge_caller_headers(
    headers: httpx.Headers, caller_headers: Optional[Mapping[str, Any]]
) -> None:
    merged = httpx.Headers()
    for key, value in (caller_headers or {}).items():
        # Same-named headers set internally are replaced, case-insensitively
        if key in headers:
            del headers[key]
        if value is not None:
            merged[key] = str(value)
    headers.update(merged)


def _multipart_content_type(params: Any) -> str:
    content_type = httpx.Headers(params.get_headers()).get("content-type")
    if not content_type:
        raise ValueError("Multipart body did not provide a content-type header")
    return content_type


def _multipart_body(params: Any) -> Any:
    read = getattr(params, "read", None)
    return read() if callable(read) else params


def build_request_config(
    settings: HttpSettings,
    url: str,
    method: str,
    params: Any = None,
    request_content_type: ContentType = ContentType.URLENCODED,
    timeout: Optional[float] = None,
    response_type: ResponseType = ResponseType.JSON,
    headers: Optional[Mapping[str, Any]] = None,
    auth: Optional[Auth] = None,
    without_credentials: bool = False,
    cancel_handle: Optional[CancelHandle] = None,
) -> RequestConfig:
    """Assemble the configuration for one request.

    :param settings: Defaults for headers, timeout and credential policy
    :param url: Full request URL
    :param method: HTTP method (any case)
    :param params: Body params for POST/PUT/PATCH, query params otherwise
    :param request_content_type: Body encoding for methods with a body
    :param timeout: Optional timeout override in seconds (0 disables it)
    :param response_type: Desired response body shape
    :param headers: Caller headers, merged last
    :param auth: Auth variant
    :param without_credentials: Do not forward the cookie jar
    :param cancel_handle: Handle to associate with this request
    :return: Assembled configuration
    :raises ValueError: If the multipart body lacks a content-type
    :raises TypeError: If params cannot be serialized
    """
    method = method.upper()
    request_content_type = ContentType(request_content_type)
    response_type = ResponseType(response_type)

    request_config = RequestConfig(
        url=url,
        method=method,
        cancel_handle=cancel_handle or CancelHandle(),
        headers=httpx.Headers(settings.general_headers),
        response_type=response_type,
        timeout=settings.timeout_or_none,
        with_credentials=settings.with_credentials,
    )

    if without_credentials:
        request_config.with_credentials = False

    if timeout is not None:
        request_config.timeout = timeout or None

    request_config = apply_auth(request_config, auth or NoAuth())

    if response_type is ResponseType.JSON:
        request_config.headers["Accept"] = "application/json"

    if method in BODY_METHODS:
        if request_content_type is ContentType.JSON:
            request_config.headers["Content-Type"] = "application/json"
            if params is not None:
                request_config.content = to_json_text(params)
        elif request_content_type is ContentType.MULTIPART:
            request_config.headers["Content-Type"] = _multipart_content_type(params)
            request_config.content = _multipart_body(params)
        else:
            request_config.headers["Content-Type"] = (
                "application/x-www-form-urlencoded"
            )
            if params is not None:
                request_config.content = stringify_form(params)
    elif params is not None:
        request_config.params = encode_query_params(params)

    _merge_caller_headers(request_config.headers, headers)
    return request_config
