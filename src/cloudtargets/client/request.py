"""Request construction -- path templates, headers, and JSON bodies.

Everything in this module is pure: it turns a logical operation (method,
path template, placeholder values, optional payload) into an
:class:`~cloudtargets.models.ApiRequest` without any I/O.

Path templates use ``${NAME}`` placeholders, e.g.
``/cloudrecognition/targetCollection/${TC_ID}/target/${TARGET_ID}``.
Substitution is verbatim string replacement; values are not URL-escaped.
"""

from __future__ import annotations

import json
import re
from typing import Any, Mapping, Optional

from cloudtargets.exceptions import InvalidUsageError
from cloudtargets.models import ApiRequest, Credential

PLACEHOLDER_TC_ID = "${TC_ID}"
PLACEHOLDER_TARGET_ID = "${TARGET_ID}"

PATH_ADD_TC = "/cloudrecognition/targetCollection"
PATH_GET_TC = "/cloudrecognition/targetCollection/${TC_ID}"
PATH_GENERATE_TC = "/cloudrecognition/targetCollection/${TC_ID}/generation/cloudarchive"

PATH_ADD_TARGET = "/cloudrecognition/targetCollection/${TC_ID}/target"
PATH_ADD_TARGETS = "/cloudrecognition/targetCollection/${TC_ID}/targets"
PATH_GET_TARGET = "/cloudrecognition/targetCollection/${TC_ID}/target/${TARGET_ID}"

CONTENT_TYPE_JSON = "application/json"
HEADER_TOKEN = "X-Token"
HEADER_VERSION = "X-Version"

_PLACEHOLDER_RE = re.compile(r"\$\{[A-Z_]+\}")


def substitute_path(template: str, values: Optional[Mapping[str, Any]] = None) -> str:
    """Return *template* with every placeholder replaced by its value.

    Args:
        template: Path template containing zero or more ``${NAME}`` tokens.
        values: Mapping of placeholder token (e.g. ``"${TC_ID}"``) to value.
            Values are converted with ``str()``.

    Returns:
        A new path string; the template itself is never modified.

    Raises:
        InvalidUsageError: If a placeholder remains after substitution.
    """
    path = template
    for placeholder, value in (values or {}).items():
        path = path.replace(placeholder, str(value))

    leftover = _PLACEHOLDER_RE.findall(path)
    if leftover:
        raise InvalidUsageError(
            f"Missing value for {', '.join(leftover)} in path template {template}"
        )
    return path


def build_headers(credential: Credential) -> dict[str, str]:
    """Headers sent with every request."""
    return {
        "Content-Type": CONTENT_TYPE_JSON,
        HEADER_TOKEN: credential.token,
        HEADER_VERSION: credential.version,
    }


def encode_body(payload: Any) -> Optional[str]:
    """JSON-encode *payload*; ``None`` means the request carries no body."""
    if payload is None:
        return None
    return json.dumps(payload)


def build_request(
    method: str,
    template: str,
    credential: Credential,
    values: Optional[Mapping[str, Any]] = None,
    payload: Any = None,
) -> ApiRequest:
    """Assemble a complete :class:`ApiRequest` for one logical operation."""
    return ApiRequest(
        method=method,
        path=substitute_path(template, values),
        headers=build_headers(credential),
        body=encode_body(payload),
    )
