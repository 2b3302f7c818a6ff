"""Synchronous operations -- one request, one decoded response."""

from __future__ import annotations

from typing import Any, Mapping, Optional

import httpx

from cloudtargets.client.request import build_request
from cloudtargets.client.response import has_json_content, raise_for_status, read_json_body
from cloudtargets.client.transport import HttpTransport
from cloudtargets.models import ApiRequest, Credential


class SyncExecutor:
    """Runs request/response cycles for operations that complete immediately.

    Args:
        transport: The transport used to send requests.
        credential: Token and version attached to every request.
    """

    def __init__(self, transport: HttpTransport, credential: Credential) -> None:
        self.transport = transport
        self.credential = credential

    def request(
        self,
        method: str,
        template: str,
        values: Optional[Mapping[str, Any]] = None,
        payload: Any = None,
    ) -> ApiRequest:
        """Build a request signed with this executor's credential."""
        return build_request(method, template, self.credential, values=values, payload=payload)

    def send(self, request: ApiRequest) -> httpx.Response:
        """Send *request*; raise the classified error unless the status is 200/202/204."""
        return raise_for_status(self.transport.send(request))

    def execute(
        self,
        method: str,
        template: str,
        values: Optional[Mapping[str, Any]] = None,
        payload: Any = None,
    ) -> Any:
        """Run one operation and return its decoded JSON body.

        Returns:
            The decoded body, or ``None`` when the response carries no JSON
            (e.g. ``204 No Content`` on delete).

        Raises:
            ServiceError: On an error response with JSON diagnostics.
            APIError: On any other error response.
            TransportError: When the request could not be sent.
        """
        response = self.send(self.request(method, template, values, payload))
        if has_json_content(response):
            return read_json_body(response)
        return None
