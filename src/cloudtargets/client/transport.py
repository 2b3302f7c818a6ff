"""HTTP transport -- one request in, one raw :class:`httpx.Response` out.

:class:`HttpTransport` wraps :class:`httpx.Client` and does nothing beyond
sending: it does not inspect status codes, decode bodies, or retry. Network
failures (DNS, refused connections, TLS, timeouts) are re-raised as
:class:`~cloudtargets.exceptions.TransportError` so callers can tell them
apart from error *responses*, which are classified by
:mod:`cloudtargets.client.response`.
"""

from __future__ import annotations

from typing import Optional

import httpx

from cloudtargets.exceptions import TransportError
from cloudtargets.models import DEFAULT_BASE_URL, ApiRequest
from cloudtargets.output import debug

SUPPORTED_METHODS = ("GET", "POST", "DELETE")
FALLBACK_METHOD = "POST"


def normalize_method(method: str) -> str:
    """Upper-case *method*; anything other than GET/POST/DELETE is sent as POST."""
    upper = method.upper()
    if upper in SUPPORTED_METHODS:
        return upper
    debug(f"Unsupported method {method!r}, sending as {FALLBACK_METHOD}")
    return FALLBACK_METHOD


class HttpTransport:
    """Blocking transport backed by :class:`httpx.Client`.

    Args:
        base_url: Endpoint that relative request paths are joined to.
            Absolute URLs (status locations) are sent unchanged.
        timeout: Per-request timeout in seconds.
        verify_ssl: Verify the server's TLS certificate.
        client: Pre-built :class:`httpx.Client`, mainly for tests that plug
            in an :class:`httpx.MockTransport`. The transport takes
            ownership and closes it.

    Redirects are never followed: a 3xx answer is returned as is and
    classified as an error response.

    Example::

        with HttpTransport() as transport:
            response = transport.send(request)
    """

    def __init__(
        self,
        base_url: str = DEFAULT_BASE_URL,
        timeout: float = 30,
        verify_ssl: bool = True,
        client: Optional[httpx.Client] = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self._client = client or httpx.Client(
            base_url=self.base_url,
            timeout=timeout,
            verify=verify_ssl,
            follow_redirects=False,
        )

    def __enter__(self) -> HttpTransport:
        return self

    def __exit__(self, *args: object) -> None:
        self.close()

    def close(self) -> None:
        self._client.close()

    def send(self, request: ApiRequest) -> httpx.Response:
        """Send *request* and return the raw response, whatever its status.

        Raises:
            TransportError: When no response was received.
        """
        method = normalize_method(request.method)
        debug(f"{method} {request.path}")
        try:
            response = self._client.request(
                method,
                request.path,
                headers=request.headers,
                content=request.body,
            )
        except httpx.TransportError as exc:
            raise TransportError(f"{method} {request.path} failed: {exc}") from exc
        debug(f"HTTP {response.status_code} {response.reason_phrase or ''}".rstrip())
        return response
