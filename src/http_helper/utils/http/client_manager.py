"""Request instances and lazy HTTP client creation.

A ``RequestInstance`` is the caller-owned holder that is passed into
every fetch. The first fetch creates an ``httpx.AsyncClient`` configured
from ``HttpSettings`` and caches it on the instance. Requests made
without credentials get a second, cookie-less client cached the same
way. Later fetches reuse them, including concurrent ones. This module does no locking.
``httpx.AsyncClient`` is assumed safe for concurrent use within one
event loop. That is an assumption about ``httpx``, not a guarantee made
here.
"""

import logging
import time
from http.cookiejar import CookieJar, DefaultCookiePolicy
from typing import Any, Dict, Optional

import httpx

from ...config.settings import HttpSettings

logger = logging.getLogger(__name__)

DEFAULT_ACCEPT = "application/json, text/plain, */*"


def create_http_client(settings: HttpSettings, **kwargs: Any) -> httpx.AsyncClient:
    """Create an HTTP client with the configured defaults.

    :param settings: Settings providing timeout, redirect limit and User-Agent
    :type settings: HttpSettings
    :param **kwargs: Additional ``httpx.AsyncClient`` options (e.g. ``transport``)
    :return: Configured client
    :rtype: httpx.AsyncClient
    """
    client_config: Dict[str, Any] = {
        "timeout": settings.timeout_or_none,
        "follow_redirects": settings.follow_redirects,
        "max_redirects": settings.max_redirects,
        "headers": {
            "Accept": DEFAULT_ACCEPT,
            "User-Agent": settings.user_agent,
        },
        **kwargs,
    }
    client = httpx.AsyncClient(**client_config)
    logger.debug(
        "Created HTTP client (timeout=%s, max_redirects=%d)",
        settings.timeout_or_none,
        settings.max_redirects,
    )
    return client


class _NoCookiesPolicy(DefaultCookiePolicy):
    """Cookie policy that neither stores nor returns any cookie."""

    def set_ok(self, cookie, request):
        return False

    def return_ok(self, cookie, request):
        return False


def create_credentialless_client(
    settings: HttpSettings, **kwargs: Any
) -> httpx.AsyncClient:
    """Create a client whose cookie jar never sends or stores cookies.

    Used for requests made without credentials. The jar stays empty, so
    no hop of a followed redirect carries a jar cookie and ``Set-Cookie``
    responses are discarded instead of reaching the regular client.

    :param settings: Settings providing timeout, redirect limit and User-Agent
    :param **kwargs: Additional ``httpx.AsyncClient`` options (``cookies`` is replaced)
    :return: Configured client
    """
    kwargs["cookies"] = CookieJar(policy=_NoCookiesPolicy())
    return create_http_client(settings, **kwargs)


class RequestInstance:
    """Caller-owned holder that lazily caches its HTTP clients.

    ``http_connection`` is the regular client and carries the cookie jar.
    ``credentialless_connection`` is created only when a request opts out
    of credentials. Both are built from the same ``client_options``.

    :param client_options: Extra ``httpx.AsyncClient`` options used when a
        client is first created (``transport``, ``cookies``, ``verify``, ...)
    """

    def __init__(self, **client_options: Any) -> None:
        self.http_connection: Optional[httpx.AsyncClient] = None
        self.credentialless_connection: Optional[httpx.AsyncClient] = None
        self.client_options = client_options
        self.started_at = time.monotonic()

    def get_client(
        self, settings: HttpSettings, with_credentials: bool = True
    ) -> httpx.AsyncClient:
        """Return the cached client, creating it on first use.

        :param settings: Settings used only if the client is created now
        :type settings: HttpSettings
        :param with_credentials: Whether the client may send its cookie jar
        :type with_credentials: bool
        :return: The instance's HTTP client for that credential policy
        :rtype: httpx.AsyncClient
        """
        if not with_credentials:
            if self.credentialless_connection is None:
                self.credentialless_connection = create_credentialless_client(
                    settings, **self.client_options
                )
            return self.credentialless_connection

        if self.http_connection is None:
            self.http_connection = create_http_client(settings, **self.client_options)
        return self.http_connection

    def elapsed_ms(self) -> int:
        """Milliseconds since this instance was created."""
        return int((time.monotonic() - self.started_at) * 1000)

    async def aclose(self) -> None:
        """Close the cached clients, if any. The next fetch creates new ones."""
        clients = [self.http_connection, self.credentialless_connection]
        self.http_connection = None
        self.credentialless_connection = None
        for client in clients:
            if client is not None:
                await client.aclose()
                logger.debug("Closed HTTP client")

    async def __aenter__(self) -> "RequestInstance":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.aclose()
