"""Request facade: ``fetch_json`` and ``fetch_data``.

``Fetcher`` holds one immutable ``HttpSettings`` and exposes two styles
of the same operation:

- callback style, ``fetch_json`` / ``fetch_data``. These schedule the
  request on the running event loop and call
  ``callback(error, status, headers, data)`` exactly once. Error outcomes
  call ``callback(error)`` with the error alone.
- awaitable style, ``request_json`` / ``request_data``. These return the
  ``FetchResult`` directly.

Examples:
    >>> fetcher = create_fetcher({"TIMEOUT": 5, "USER_AGENT": "Test App 1.0"})
    >>> instance = RequestInstance()
    >>> result = await fetcher.request_json(
    ...     instance, "https://postman-echo.com/get", "GET", {"param1": "yellow"}
    ... )
    >>> result.status
    200
"""

import asyncio
from typing import Any, Callable, Mapping, Optional, Union

from .config.settings import HttpSettings, load_settings
from .models import FetchResult, RequestOptions, ResponseType
from .utils.http import RequestInstance, fetch
from .utils.http.fetch import unknown_error
from .utils.security import setup_secure_logging


ResultCallback = Callable[..., Any]
Options = Union[RequestOptions, Mapping[str, Any], None]


def _force_arraybuffer(options: Options) -> Options:
    if isinstance(options, RequestOptions):
        return options.model_copy(update={"response_type": ResponseType.ARRAYBUFFER})
    if options is not None and not isinstance(options, Mapping):
        # Left for request_json to report as a setup failure
        return options
    return {**(options or {}), "response_type": ResponseType.ARRAYBUFFER}


class Fetcher:
    """Facade over the fetch operation.

    :param settings: Settings applied to every request (loaded from the
        environment when omitted)
    :type settings: Optional[HttpSettings]
    """

    def __init__(self, settings: Optional[HttpSettings] = None) -> None:
        self.settings = settings or load_settings()

    def setup_logging(self) -> None:
        """Configure sanitized logging at the configured ``log_level``."""
        setup_secure_logging(self.settings.log_level)

    async def request_json(
        self,
        instance: RequestInstance,
        url: str,
        method: str,
        params: Any = None,
        options: Options = None,
    ) -> FetchResult:
        """Fetch ``url`` and return its outcome (JSON body by default).

        Recognized options: ``request_content_type`` (json | urlencoded |
        multipart, default urlencoded), ``timeout`` (seconds), ``response_type``
        (json | text | arraybuffer, default json), ``headers``, ``auth``
        (``{"bearer_token": ...}`` or ``{"basic": {"username", "password"}}``)
        and ``without_credentials``.

        :param instance: Request instance holding the cached client
        :type instance: RequestInstance
        :param url: Full request URL
        :type url: str
        :param method: HTTP method (GET | POST | PUT | PATCH | ...)
        :type method: str
        :param params: Optional params sent with this request
        :type params: Any
        :param options: Optional request options (mapping or ``RequestOptions``)
        :type options: Options
        :return: Exactly one outcome
        :rtype: FetchResult
        """
        try:
            opts = RequestOptions.from_value(options)
        except Exception as e:
            return FetchResult.failure(unknown_error(self.settings, url, e))

        return await fetch(
            instance,
            self.settings,
            url,
            method,
            params=params,
            request_content_type=opts.request_content_type,
            timeout=opts.timeout,
            response_type=opts.response_type,
            headers=opts.headers,
            auth=opts.auth,
            without_credentials=opts.without_credentials,
        )

    async def request_data(
        self,
        instance: RequestInstance,
        url: str,
        method: str,
        params: Any = None,
        options: Options = None,
    ) -> FetchResult:
        """Same as ``request_json`` with the raw body bytes as data."""
        return await self.request_json(
            instance, url, method, params, _force_arraybuffer(options)
        )

    async def _deliver(self, callback: ResultCallback, pending) -> FetchResult:
        result = await pending
        callback(*result.as_callback_args())
        return result

    def fetch_json(
        self,
        instance: RequestInstance,
        callback: ResultCallback,
        url: str,
        method: str,
        params: Any = None,
        options: Options = None,
    ) -> "asyncio.Task[FetchResult]":
        """Fetch ``url`` and report through ``callback``.

        The callback is called once, as ``callback(None, status, headers,
        data)`` for any received response (including non-2xx), or as
        ``callback(error)`` when no response was obtained.

        Must be called from a running event loop. The returned task
        resolves to the same ``FetchResult`` the callback received.

        :param instance: Request instance holding the cached client
        :param callback: Result callback
        :param url: Full request URL
        :param method: HTTP method
        :param params: Optional params sent with this request
        :param options: Optional request options (see ``request_json``)
        :return: Task running the request
        :raises RuntimeError: If no event loop is running
        """
        loop = asyncio.get_running_loop()
        return loop.create_task(
            self._deliver(
                callback, self.request_json(instance, url, method, params, options)
            )
        )

    def fetch_data(
        self,
        instance: RequestInstance,
        callback: ResultCallback,
        url: str,
        method: str,
        params: Any = None,
        options: Options = None,
    ) -> "asyncio.Task[FetchResult]":
        """``fetch_json`` with the response type forced to raw bytes."""
        return self.fetch_json(
            instance, callback, url, method, params, _force_arraybuffer(options)
        )


def create_fetcher(
    config: Optional[Mapping[str, Any]] = None, **overrides: Any
) -> Fetcher:
    """Create a ``Fetcher`` with custom configuration merged over the defaults.

    :param config: Optional configuration mapping (e.g. ``{"TIMEOUT": 0.4}``)
    :param overrides: Additional per-field overrides
    :return: Configured fetcher
    :raises ConfigurationError: If the merged configuration is invalid
    """
    return Fetcher(load_settings(config, **overrides))
