"""Helpers shared by the test modules."""

import json
from typing import Any, Optional

import requests

PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00" * 32
STRONG_PASSWORD = "Passw0rdX"


def make_response(status: int, body: Optional[Any] = None, url: str = "http://test", reason: str = "") -> requests.Response:
    """Build a ``requests.Response`` without a network round trip."""
    response = requests.Response()
    response.status_code = status
    response.url = url
    response.reason = reason
    if body is None:
        response._content = b""
    else:
        response._content = json.dumps(body).encode("utf-8")
        response.headers["Content-Type"] = "application/json"
    return response
