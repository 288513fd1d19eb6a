"""Multipart form-data body object.

``FormData`` collects fields and files and delegates the actual
``multipart/form-data`` encoding to ``httpx``. Its ``get_headers()``
accessor supplies the ``Content-Type`` (boundary included) that the
fetch operation copies onto the request, and ``read()`` supplies the
body. The boundary is chosen up front, so header and body always agree.
"""

import os
import secrets
from typing import IO, Any, Dict, List, Optional, Tuple, Union

import httpx

FieldValue = Union[str, bytes, int, float, IO[bytes]]

# (filename, content, content_type) as accepted by httpx's ``files=``
Part = Tuple[str, Tuple[Optional[str], Any, Optional[str]]]


class FormData:
    """Multipart form body.

    :param boundary: Optional fixed boundary (random by default)
    :type boundary: Optional[str]

    .. example::
       >>> form = FormData()
       >>> form.append("param1", "yellow")
       >>> form.append("file1", open("4kb.png", "rb"))
       >>> form.get_headers()["content-type"]
       'multipart/form-data; boundary=...'
    """

    def __init__(self, boundary: Optional[str] = None) -> None:
        self.boundary = boundary or secrets.token_hex(16)
        self._parts: List[Part] = []
        self._body: Optional[bytes] = None

    def append(
        self,
        name: str,
        value: FieldValue,
        filename: Optional[str] = None,
        content_type: Optional[str] = None,
    ) -> None:
        """Add a part, keeping insertion order.

        Text and numbers without a filename or content type are encoded
        as plain form fields. File objects use their own name as the
        filename when none is given.

        :param name: Part name
        :param value: Part value (text, number, bytes or binary file object)
        :param filename: Optional filename for the part
        :param content_type: Optional content type for the part
        :raises RuntimeError: If the form was already encoded
        """
        if self._body is not None:
            raise RuntimeError("FormData was already encoded; create a new form")

        if isinstance(value, bool):
            value = "true" if value else "false"
        if isinstance(value, (int, float)):
            value = str(value)
        if isinstance(value, str):
            value = value.encode("utf-8")
        elif filename is None and hasattr(value, "read"):
            raw_name = getattr(value, "name", None)
            if isinstance(raw_name, str):
                filename = os.path.basename(raw_name)

        # A part with neither filename nor content type renders as a plain field
        self._parts.append((name, (filename, value, content_type)))

    def _content_type(self) -> str:
        return f"multipart/form-data; boundary={self.boundary}"

    def get_headers(self) -> Dict[str, str]:
        """Headers describing the encoded body (``content-type`` with boundary)."""
        return {"content-type": self._content_type()}

    def read(self) -> bytes:
        """Encode the form and return the body bytes.

        File parts are consumed on the first call. The encoded body is
        cached so later calls return the same bytes.
        """
        if self._body is None:
            if not self._parts:
                self._body = f"--{self.boundary}--\r\n".encode("ascii")
            else:
                encoded = httpx.Request(
                    "POST",
                    "http://form-data.invalid/",
                    headers={"Content-Type": self._content_type()},
                    files=self._parts,
                )
                self._body = encoded.read()
        return self._body
