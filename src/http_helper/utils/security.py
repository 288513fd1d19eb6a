"""Log sanitization and secure logging setup.

Requests built by this package routinely carry credentials (bearer
tokens, basic-auth pairs, cookies). Everything logged about a request
goes through the helpers here so those values never reach log output:

- header and URL redaction for the raw request/response debug logs
- a formatter that scrubs tokens from any log record
- one-time logging configuration
"""

import logging
import re
import sys
from typing import Any, Dict, Mapping, Optional

# Patterns for sensitive data detection
SENSITIVE_PATTERNS = {
    "jwt_token": re.compile(r"eyJ[A-Za-z0-9_-]+\.[A-Za-z0-9_-]+\.[A-Za-z0-9_-]+"),
    "bearer_token": re.compile(r"Bearer\s+[A-Za-z0-9._~+/=-]+", re.IGNORECASE),
    "basic_auth": re.compile(r"Basic\s+[A-Za-z0-9+/=]+", re.IGNORECASE),
}

# Headers that should never be logged
SENSITIVE_HEADERS = {
    "authorization",
    "proxy-authorization",
    "x-api-key",
    "x-auth-token",
    "cookie",
    "set-cookie",
    "x-csrf-token",
    "x-access-token",
    "x-refresh-token",
}

SENSITIVE_URL_PARAMS = (
    "token",
    "key",
    "secret",
    "password",
    "auth",
    "access_token",
    "api_key",
    "client_secret",
)


def sanitize_string(value: str) -> str:
    """Redact tokens embedded in a string.

    Each match of a sensitive pattern is replaced in place, so the
    surrounding text stays readable.

    :param value: String to sanitize
    :type value: str
    :return: String with tokens replaced by ``<name:REDACTED>``
    :rtype: str
    """
    if not value:
        return value
    for pattern_name, pattern in SENSITIVE_PATTERNS.items():
        value = pattern.sub(f"<{pattern_name}:REDACTED>", value)
    return value


def sanitize_headers(headers: Optional[Mapping[str, Any]]) -> Dict[str, Any]:
    """Sanitize HTTP headers for logging.

    :param headers: Mapping of HTTP headers (any key casing)
    :type headers: Optional[Mapping[str, Any]]
    :return: New dictionary with sensitive header values redacted
    :rtype: Dict[str, Any]
    """
    if not headers:
        return {}
    sanitized: Dict[str, Any] = {}
    for key, value in headers.items():
        if key.lower() in SENSITIVE_HEADERS:
            if isinstance(value, str) and value:
                sanitized[key] = f"<REDACTED:length={len(value)}>"
            else:
                sanitized[key] = "<REDACTED>"
        elif isinstance(value, str):
            sanitized[key] = sanitize_string(value)
        else:
            sanitized[key] = value
    return sanitized


def sanitize_url(url: str) -> str:
    """Redact credential-like query parameters and userinfo from a URL.

    :param url: URL to sanitize
    :type url: str
    :return: URL with sensitive values replaced by ``<REDACTED>``
    :rtype: str
    """
    if not url:
        return url
    url = re.sub(r"(://)[^/@\s]+@", r"\1<REDACTED>@", url)
    for param in SENSITIVE_URL_PARAMS:
        url = re.sub(
            rf"([?&]{param}=)[^&\s#]+", r"\1<REDACTED>", url, flags=re.IGNORECASE
        )
    return url


class SanitizingFormatter(logging.Formatter):
    """Formatter that redacts tokens from every formatted record."""

    def format(self, record: logging.LogRecord) -> str:
        """Format the record, then redact sensitive values from the output.

        :param record: Log record to format
        :type record: logging.LogRecord
        :return: Sanitized log line
        :rtype: str
        """
        return sanitize_string(super().format(record))


# Global flag to track if logging has been set up
_LOGGING_CONFIGURED = False


def setup_secure_logging(level: str = "INFO") -> None:
    """Set up logging with automatic sanitization.

    Idempotent: later calls are no-ops.

    :param level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    :type level: str
    """
    global _LOGGING_CONFIGURED

    if _LOGGING_CONFIGURED:
        logging.getLogger(__name__).debug(
            "Logging already configured, skipping duplicate setup"
        )
        return

    formatter = SanitizingFormatter(
        "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(formatter)

    logging.basicConfig(
        level=getattr(logging, level.upper()),
        handlers=[handler],
        force=True,
    )

    # httpx logs every request at INFO; keep it quieter than our own logs
    if level.upper() != "DEBUG":
        logging.getLogger("httpx").setLevel(logging.WARNING)

    _LOGGING_CONFIGURED = True


__all__ = [
    "SENSITIVE_HEADERS",
    "SanitizingFormatter",
    "sanitize_headers",
    "sanitize_string",
    "sanitize_url",
    "setup_secure_logging",
]
