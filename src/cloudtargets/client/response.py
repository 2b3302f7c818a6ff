"""Response interpretation -- success check, JSON detection, error classification.

The API answers errors in two shapes. Requests it understood but rejected
come back as JSON ``{"message": ..., "code": ..., "reason": ...}`` and
become a :class:`~cloudtargets.exceptions.ServiceError`. Anything else --
plain-text or empty bodies, often produced by proxies and load balancers in
front of the API -- becomes a general
:class:`~cloudtargets.exceptions.APIError` carrying the raw body and the
HTTP status.
"""

from __future__ import annotations

from typing import Any

import httpx

from cloudtargets.client.request import CONTENT_TYPE_JSON
from cloudtargets.exceptions import APIError, ServiceError

HTTP_OK = 200
HTTP_ACCEPTED = 202
HTTP_NO_CONTENT = 204

SUCCESS_STATUSES = frozenset({HTTP_OK, HTTP_ACCEPTED, HTTP_NO_CONTENT})


def is_success(response: httpx.Response) -> bool:
    return response.status_code in SUCCESS_STATUSES


def has_json_content(response: httpx.Response) -> bool:
    """Whether the body is JSON worth decoding.

    The media type must be ``application/json`` (parameters such as
    ``charset`` are ignored) and ``Content-Length`` must not be ``"0"``.
    An empty body with no ``Content-Length`` header is also treated as
    non-JSON.
    """
    content_type = response.headers.get("content-type", "")
    media_type = content_type.split(";", 1)[0].strip().lower()
    if media_type != CONTENT_TYPE_JSON:
        return False
    if response.headers.get("content-length") == "0":
        return False
    return bool(response.content)


def read_json_body(response: httpx.Response) -> Any:
    return response.json()


def classify_error(response: httpx.Response) -> APIError:
    """Build the typed error for a non-success *response* (does not raise it)."""
    if has_json_content(response):
        try:
            error = read_json_body(response)
        except ValueError:
            error = None
        if isinstance(error, dict):
            return ServiceError(
                error.get("message"),
                error.get("code"),
                error.get("reason"),
            )
    return APIError(response.text, response.status_code)


def raise_for_status(response: httpx.Response) -> httpx.Response:
    """Return *response* unchanged if successful, otherwise raise its classified error."""
    if is_success(response):
        return response
    raise classify_error(response)
