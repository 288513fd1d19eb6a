"""The fetch operation.

Builds one outgoing request, sends it through the instance's cached
``httpx.AsyncClient`` and resolves to exactly one ``FetchResult``:

- any response, 2xx or not: ``status``, lower-cased ``headers`` and the
  shaped body (``None`` when empty). Non-2xx is deliberately *not* an
  error, so callers branch on status.
- no response (connection failure, timeout, redirect or size limit):
  the in-flight request is cancelled and a ``TransportFailureError`` is
  returned.
- the request could not be set up or sent: the cause is logged and a
  synthetic ``UnknownError`` built from settings is returned.

Nothing is retried and nothing is raised to the caller, apart from
cancellation of the calling task itself.
"""

import asyncio
import logging
from typing import Any, Mapping, Optional, Tuple

import httpx

from ...config.settings import HttpSettings
from ...exceptions import (
    RequestTimeoutError,
    ResponseTooLargeError,
    TransportFailureError,
    UnknownError,
)
from ...models import Auth, ContentType, FetchResult, ResponseType
from ..security import sanitize_headers, sanitize_url
from .cancellation import CancelHandle
from .client_manager import RequestInstance
from .request_config import RequestConfig, build_request_config

logger = logging.getLogger(__name__)


async def _read_body(response: httpx.Response, limit: Optional[int]) -> bytes:
    """Read a streamed response body, enforcing the size limit."""
    declared = response.headers.get("content-length", "")
    if limit is not None and declared.isdigit() and int(declared) > limit:
        raise ResponseTooLargeError(
            f"maxContentLength size of {limit} exceeded",
            limit=limit,
            url=str(response.request.url),
        )

    chunks = []
    size = 0
    async for chunk in response.aiter_bytes():
        size += len(chunk)
        if limit is not None and size > limit:
            raise ResponseTooLargeError(
                f"maxContentLength size of {limit} exceeded",
                limit=limit,
                url=str(response.request.url),
            )
        chunks.append(chunk)
    return b"".join(chunks)


async def _send(
    client: httpx.AsyncClient, request: httpx.Request, limit: Optional[int]
) -> Tuple[httpx.Response, bytes]:
    response = await client.send(request, stream=True)
    try:
        body = await _read_body(response, limit)
    finally:
        await response.aclose()
    return response, body


def _shape_body(
    request_config: RequestConfig, response: httpx.Response, body: bytes
) -> Any:
    if not body:
        return None
    encoding = response.charset_encoding or "utf-8"
    data = request_config.transform_response(body, encoding)
    # Parsed 0, false, [] and {} are real values; only empty text maps to None
    if data == "" or data == b"":
        return None
    return data


def _transport_error(
    error: Exception, url: str, timeout: Optional[float]
) -> TransportFailureError:
    if isinstance(error, TransportFailureError):
        return error
    if isinstance(error, httpx.TimeoutException):
        return RequestTimeoutError(
            f"timeout of {timeout}s exceeded", url=url, timeout=timeout, cause=error
        )
    message = str(error) or type(error).__name__
    return TransportFailureError(message, url=url, cause=error)


def unknown_error(
    settings: HttpSettings, url: str, error: BaseException
) -> UnknownError:
    """Log a setup failure with its stack and return the synthetic error."""
    logger.exception(
        "Cause: HTTP fetch\ncmd: Fetch\nurl: %s",
        sanitize_url(url),
        exc_info=error,
    )
    return UnknownError(
        settings.unknown_error_message, code=settings.unknown_error_code
    )


async def fetch(
    instance: RequestInstance,
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
) -> FetchResult:
    """Perform one request and normalize its outcome.

    :param instance: Request instance holding the cached client
    :type instance: RequestInstance
    :param settings: Defaults for this request
    :type settings: HttpSettings
    :param url: Full request URL
    :type url: str
    :param method: HTTP method (GET | POST | PUT | PATCH | DELETE | ...)
    :type method: str
    :param params: Body params for POST/PUT/PATCH (mapping, pair list or
        multipart body object), query params otherwise
    :type params: Any
    :param request_content_type: Body encoding (json | urlencoded | multipart)
    :type request_content_type: ContentType
    :param timeout: Optional timeout override in seconds
    :type timeout: Optional[float]
    :param response_type: Response body shape (json | text | arraybuffer)
    :type response_type: ResponseType
    :param headers: Extra headers, merged last
    :type headers: Optional[Mapping[str, Any]]
    :param auth: Auth variant
    :type auth: Optional[Auth]
    :param without_credentials: Do not forward the cookie jar
    :type without_credentials: bool
    :return: Exactly one outcome
    :rtype: FetchResult
    """
    cancel_handle = CancelHandle()

    try:
        request_config = build_request_config(
            settings,
            url,
            method,
            params=params,
            request_content_type=request_content_type,
            timeout=timeout,
            response_type=response_type,
            headers=headers,
            auth=auth,
            without_credentials=without_credentials,
            cancel_handle=cancel_handle,
        )
        client = instance.get_client(settings, request_config.with_credentials)
        request = client.build_request(**request_config.build_kwargs())
    except Exception as e:
        return FetchResult.failure(unknown_error(settings, url, e))

    if logger.isEnabledFor(logging.DEBUG):
        logger.debug(
            "HTTP Raw-Request %s",
            {
                "method": request.method,
                "url": sanitize_url(str(request.url)),
                "headers": sanitize_headers(dict(request.headers.items())),
                "timeout": request_config.timeout,
                "response_type": request_config.response_type.value,
            },
        )
    logger.debug("[Timing] Start HTTP Fetch +%dms", instance.elapsed_ms())

    task = asyncio.ensure_future(_send(client, request, settings.content_size_limit))
    cancel_handle.bind(task)

    try:
        done, _ = await asyncio.wait({task}, timeout=request_config.timeout)
        if task not in done:
            raise httpx.TimeoutException(
                f"No response within {request_config.timeout}s", request=request
            )
        response, body = task.result()
    except asyncio.CancelledError:
        await cancel_handle.cancel("caller cancelled")
        raise
    except (httpx.RequestError, TransportFailureError) as e:
        logger.debug("[Timing] End HTTP Fetch +%dms", instance.elapsed_ms())
        # No response: stop waiting on the doomed request before reporting
        await cancel_handle.cancel(type(e).__name__)
        return FetchResult.failure(_transport_error(e, url, request_config.timeout))
    except Exception as e:
        logger.debug("[Timing] End HTTP Fetch +%dms", instance.elapsed_ms())
        await cancel_handle.cancel(type(e).__name__)
        return FetchResult.failure(unknown_error(settings, url, e))

    logger.debug("[Timing] End HTTP Fetch +%dms", instance.elapsed_ms())

    try:
        data = _shape_body(request_config, response, body)
    except Exception as e:
        return FetchResult.failure(unknown_error(settings, url, e))

    result = FetchResult.from_response(response, data)
    if logger.isEnabledFor(logging.DEBUG):
        logger.debug(
            "HTTP Raw-Response %s",
            {
                "status": result.status,
                "headers": sanitize_headers(result.headers),
                "body": data if not isinstance(data, bytes) else f"<{len(data)} bytes>",
            },
        )
    return result
