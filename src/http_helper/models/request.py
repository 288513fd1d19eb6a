"""Request descriptor models.

These models describe one logical request before it is assembled into an
``httpx.Request``: the body content type, the desired response type, the
auth descriptor and the per-request options accepted by ``fetch_json``.
"""

from enum import Enum
from typing import Any, Dict, Literal, Mapping, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator


class ContentType(str, Enum):
    """Request body encodings."""

    JSON = "json"
    URLENCODED = "urlencoded"
    MULTIPART = "multipart"


class ResponseType(str, Enum):
    """Shapes a response body can be returned in.

    ``ARRAYBUFFER`` returns the raw bytes, ``TEXT`` the decoded text and
    ``JSON`` the parsed structured value (``None`` when malformed).
    """

    ARRAYBUFFER = "arraybuffer"
    JSON = "json"
    TEXT = "text"


BODY_METHODS = frozenset({"POST", "PUT", "PATCH"})


class NoAuth(BaseModel):
    """No ``Authorization`` header is added."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["none"] = "none"


class BearerAuth(BaseModel):
    """Bearer token authentication.

    :param token: Token sent as ``Authorization: Bearer <token>``
    :type token: str
    """

    model_config = ConfigDict(frozen=True)

    kind: Literal["bearer"] = "bearer"
    token: str


class BasicAuth(BaseModel):
    """HTTP Basic authentication.

    :param username: Basic-auth username
    :type username: str
    :param password: Basic-auth password
    :type password: str
    """

    model_config = ConfigDict(frozen=True)

    kind: Literal["basic"] = "basic"
    username: str = ""
    password: str = ""


Auth = Union[NoAuth, BearerAuth, BasicAuth]


def resolve_auth(auth: Any) -> Auth:
    """Derive the single active auth mode from an auth descriptor.

    Accepts an already-typed variant or the loose mapping form
    ``{"bearer_token": ...}`` / ``{"basic": {"username", "password"}}``.
    A bearer token takes precedence over basic credentials; basic is
    used only when its mapping is non-empty.

    :param auth: Auth variant, mapping, or None
    :return: Exactly one auth variant
    :raises ValueError: If the descriptor or its ``basic`` entry is not a mapping
    """
    if isinstance(auth, (NoAuth, BearerAuth, BasicAuth)):
        return auth
    if not auth:
        return NoAuth()
    if not isinstance(auth, Mapping):
        raise ValueError(f"auth must be a mapping, got {type(auth).__name__}")

    bearer_token = auth.get("bearer_token")
    if bearer_token is not None:
        return BearerAuth(token=str(bearer_token))

    basic = auth.get("basic")
    if basic and not isinstance(basic, Mapping):
        raise ValueError(f"auth.basic must be a mapping, got {type(basic).__name__}")
    if basic:
        username = basic.get("username")
        password = basic.get("password")
        # Missing parts are rendered as empty strings in the credential pair
        return BasicAuth(
            username="" if username is None else str(username),
            password="" if password is None else str(password),
        )

    return NoAuth()


class RequestOptions(BaseModel):
    """Per-request options accepted by ``fetch_json`` and ``fetch_data``.

    :param request_content_type: Body encoding for POST/PUT/PATCH
    :type request_content_type: ContentType
    :param timeout: Optional timeout override in seconds
    :type timeout: Optional[float]
    :param response_type: Desired response body shape
    :type response_type: ResponseType
    :param headers: Extra headers, merged last and winning on collision
    :type headers: Optional[Dict[str, Any]]
    :param auth: Auth descriptor, resolved to one variant
    :type auth: Auth
    :param without_credentials: Do not forward the cookie jar for this request
    :type without_credentials: bool
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    request_content_type: ContentType = ContentType.URLENCODED
    timeout: Optional[float] = Field(None, ge=0)
    response_type: ResponseType = ResponseType.JSON
    headers: Optional[Dict[str, Any]] = None
    auth: Auth = Field(default_factory=NoAuth)
    without_credentials: bool = False

    @field_validator("request_content_type", mode="before")
    @classmethod
    def urlencoded_by_default(cls, v: Any) -> Any:
        # Anything that is not json or multipart is sent urlencoded
        if v in (ContentType.JSON, ContentType.MULTIPART):
            return v
        return ContentType.URLENCODED

    @field_validator("response_type", mode="before")
    @classmethod
    def json_when_none(cls, v: Any) -> Any:
        return ResponseType.JSON if v is None else v

    @field_validator("without_credentials", mode="before")
    @classmethod
    def falsy_when_none(cls, v: Any) -> Any:
        return False if v is None else v

    @field_validator("auth", mode="before")
    @classmethod
    def derive_auth(cls, v: Any) -> Auth:
        return resolve_auth(v)

    @classmethod
    def from_value(
        cls, options: Union["RequestOptions", Mapping[str, Any], None]
    ) -> "RequestOptions":
        """Build options from a model, a mapping, or None."""
        if isinstance(options, RequestOptions):
            return options
        return cls.model_validate(dict(options or {}))
