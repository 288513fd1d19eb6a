"""Body and value encoding helpers.

This module holds the small codecs the fetch operation relies on:
fail-soft JSON parsing of response bodies, base64 for basic-auth
credentials, and the three request serializers (compact JSON,
URL-encoded form body, URL query parameters).

How ``None`` is encoded differs per target:

- URL-encoded form body: ``{"a": None}`` becomes ``a=`` (key sent empty)
- query parameters: keys whose value is ``None`` are dropped
- JSON body: ``None`` is sent as ``null``
"""

import base64
import json
from typing import Any, List, Mapping, Optional, Tuple, Union
from urllib.parse import quote, urlencode

FormParams = Union[Mapping[str, Any], List[Tuple[str, Any]], str, bytes]


def string_to_json(value: Union[str, bytes, None]) -> Any:
    """Parse JSON text into a structured value.

    Never raises: empty, missing or malformed input yields ``None``.

    :param value: JSON text or UTF-8 bytes
    :type value: Union[str, bytes, None]
    :return: Parsed value, or None
    :rtype: Any
    """
    if value is None:
        return None
    try:
        return json.loads(value)
    except (TypeError, ValueError):
        return None


def string_to_base64(value: str) -> str:
    """Base64-encode a UTF-8 string."""
    return base64.b64encode(value.encode("utf-8")).decode("ascii")


def to_json_text(value: Any) -> str:
    """Serialize a value as compact JSON text (no whitespace)."""
    return json.dumps(value, separators=(",", ":"), ensure_ascii=False)


def _items(params: Union[Mapping[str, Any], List[Tuple[str, Any]]]):
    if isinstance(params, Mapping):
        return params.items()
    return params


def _form_value(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (str, int, float)):
        return str(value)
    return ""


def stringify_form(params: FormParams) -> str:
    """Serialize params as an ``application/x-www-form-urlencoded`` body.

    Sequences (other than strings) expand to repeated keys. Strings,
    numbers and booleans (``true``/``false``) are sent as text. Any other
    value, ``None`` included, is sent as an empty string. Pre-encoded
    string or bytes bodies pass through unchanged.

    :param params: Mapping or list of pairs, or an already-encoded body
    :type params: FormParams
    :return: URL-encoded body, e.g. ``a=1&b=2``
    :rtype: str
    """
    if isinstance(params, bytes):
        return params.decode("utf-8")
    if isinstance(params, str):
        return params

    pairs: List[Tuple[str, str]] = []
    for key, value in _items(params):
        if isinstance(value, (list, tuple)):
            pairs.extend((str(key), _form_value(item)) for item in value)
        else:
            pairs.append((str(key), _form_value(value)))
    return urlencode(pairs, quote_via=quote)


def _query_value(value: Any) -> Any:
    if isinstance(value, Mapping):
        return to_json_text(value)
    return value


def encode_query_params(
    params: Union[Mapping[str, Any], List[Tuple[str, Any]], str, None],
) -> Optional[Union[List[Tuple[str, Any]], str]]:
    """Prepare params for use as URL query parameters.

    ``None`` values are dropped, nested mappings are sent as JSON text and
    sequences expand to repeated keys. Remaining scalars are rendered by
    ``httpx`` (booleans as ``true``/``false``). A pre-built query string
    passes through.

    :param params: Query parameters, or None
    :return: Value suitable for ``httpx``'s ``params`` argument, or None
    """
    if params is None:
        return None
    if isinstance(params, str):
        return params

    pairs: List[Tuple[str, Any]] = []
    for key, value in _items(params):
        if isinstance(value, (list, tuple)):
            pairs.extend(
                (str(key), _query_value(item)) for item in value if item is not None
            )
        elif value is not None:
            pairs.append((str(key), _query_value(value)))
    return pairs


__all__ = [
    "encode_query_params",
    "string_to_base64",
    "string_to_json",
    "stringify_form",
    "to_json_text",
]
