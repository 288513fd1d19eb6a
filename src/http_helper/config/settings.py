"""Configuration settings for the HTTP helper.

This module defines the defaults applied to every outgoing request:
timeout, redirect and body-size limits, the default User-Agent and
general headers, the credential-forwarding policy, and the synthetic
error reported for requests that could not be set up. Settings are
loaded from environment variables (``HTTP_HELPER_`` prefix) and ``.env``
files, and may be overridden once at load time.
"""

from typing import Any, Dict, Literal, Mapping, Optional

from pydantic import Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .. import __version__
from ..exceptions import ConfigurationError


class HttpSettings(BaseSettings):
    """Immutable defaults for outgoing HTTP requests.

    :param timeout: Default request timeout in seconds (0 disables it)
    :type timeout: float
    :param max_redirects: Maximum redirects to follow (0 disables following)
    :type max_redirects: int
    :param max_content_size: Maximum response body size in bytes (-1 is unlimited)
    :type max_content_size: int
    :param user_agent: Default User-Agent header
    :type user_agent: str
    :param general_headers: Headers copied into every request
    :type general_headers: Dict[str, str]
    :param with_credentials: Forward the client cookie jar by default
    :type with_credentials: bool
    :param unknown_error_code: Code of the synthetic setup-failure error
    :type unknown_error_code: str
    :param unknown_error_message: Message of the synthetic setup-failure error
    :type unknown_error_message: str
    :param log_level: Logging level used by ``setup_secure_logging``
    :type log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
    """

    model_config = SettingsConfigDict(
        env_prefix="HTTP_HELPER_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        frozen=True,
    )

    timeout: float = Field(3.0, ge=0, description="Default timeout in seconds")
    max_redirects: int = Field(5, ge=0, description="Maximum redirects to follow")
    max_content_size: int = Field(
        10 * 1024 * 1024, ge=-1, description="Maximum response body size in bytes"
    )
    user_agent: str = Field(
        f"http-helper/{__version__}", description="Default User-Agent header"
    )
    general_headers: Dict[str, str] = Field(
        default_factory=dict, description="Headers added to every request"
    )
    with_credentials: bool = Field(
        True, description="Send the client cookie jar unless a request opts out"
    )
    unknown_error_code: str = Field(
        "UNKNOWN_ERROR", description="Code of the synthetic setup-failure error"
    )
    unknown_error_message: str = Field(
        "An unknown error occurred while performing the HTTP request",
        description="Message of the synthetic setup-failure error",
    )
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        "INFO", description="Logging level"
    )

    @field_validator("log_level", mode="before")
    @classmethod
    def normalize_log_level(cls, v: Any) -> Any:
        if isinstance(v, str):
            return v.upper()
        return v

    @property
    def timeout_or_none(self) -> Optional[float]:
        """Timeout as ``httpx`` expects it (``None`` disables it)."""
        return self.timeout or None

    @property
    def follow_redirects(self) -> bool:
        return self.max_redirects > 0

    @property
    def content_size_limit(self) -> Optional[int]:
        """Body size limit in bytes, or ``None`` when unlimited."""
        if self.max_content_size < 0:
            return None
        return self.max_content_size


def load_settings(
    config: Optional[Mapping[str, Any]] = None, **overrides: Any
) -> HttpSettings:
    """Load settings, merging custom configuration over the defaults.

    Values come from, in increasing precedence: field defaults, the
    environment / ``.env`` file, ``config``, then keyword ``overrides``.
    Keys are matched case-insensitively, so ``{"TIMEOUT": 1.5}`` and
    ``{"timeout": 1.5}`` are equivalent. Unknown keys are ignored.

    :param config: Optional custom configuration mapping
    :type config: Optional[Mapping[str, Any]]
    :param overrides: Additional per-field overrides
    :return: Frozen settings instance
    :rtype: HttpSettings
    :raises ConfigurationError: If a value fails validation
    """
    merged: Dict[str, Any] = {}
    for source in (config or {}, overrides):
        for key, value in source.items():
            name = str(key).lower()
            if name in HttpSettings.model_fields:
                merged[name] = value

    try:
        return HttpSettings(**merged)
    except ValidationError as e:
        errors = e.errors()
        setting = str(errors[0]["loc"][0]) if errors and errors[0]["loc"] else None
        raise ConfigurationError(
            f"Invalid HTTP helper configuration: {e}", setting=setting
        ) from e
    except ValueError as e:
        # e.g. pydantic-settings failing to decode a JSON env value
        raise ConfigurationError(f"Invalid HTTP helper configuration: {e}") from e
