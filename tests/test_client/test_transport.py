"""Tests for the httpx-backed transport."""

from __future__ import annotations

import httpx
import pytest

from cloudtargets.client.executor import SyncExecutor
from cloudtargets.client.request import PATH_ADD_TC
from cloudtargets.client.transport import HttpTransport, normalize_method
from cloudtargets.exceptions import APIError, TransportError
from cloudtargets.models import ApiRequest, Credential


def _transport(handler) -> HttpTransport:
    client = httpx.Client(
        base_url="https://api.example.com",
        transport=httpx.MockTransport(handler),
    )
    return HttpTransport(base_url="https://api.example.com", client=client)


class TestNormalizeMethod:
    @pytest.mark.parametrize("method", ["GET", "POST", "DELETE"])
    def test_supported_methods_kept(self, method: str) -> None:
        assert normalize_method(method) == method

    def test_lower_case_accepted(self) -> None:
        assert normalize_method("delete") == "DELETE"

    @pytest.mark.parametrize("method", ["PUT", "PATCH", "HEAD", "BREW"])
    def test_unknown_methods_fall_back_to_post(self, method: str) -> None:
        assert normalize_method(method) == "POST"


class TestSend:
    def test_sends_method_path_headers_and_body(self) -> None:
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json={"ok": True})

        request = ApiRequest(
            method="POST",
            path="/cloudrecognition/targetCollection",
            headers={"Content-Type": "application/json", "X-Token": "t", "X-Version": "2"},
            body='{"name": "shelf1"}',
        )
        with _transport(handler) as transport:
            response = transport.send(request)

        assert response.status_code == 200
        sent = seen[0]
        assert sent.method == "POST"
        assert str(sent.url) == "https://api.example.com/cloudrecognition/targetCollection"
        assert sent.headers["x-token"] == "t"
        assert sent.headers["x-version"] == "2"
        assert sent.content == b'{"name": "shelf1"}'

    def test_no_body(self) -> None:
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(204)

        with _transport(handler) as transport:
            transport.send(ApiRequest(method="DELETE", path="/x"))
        assert seen[0].content == b""

    def test_unknown_method_sent_as_post(self) -> None:
        seen: list[str] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request.method)
            return httpx.Response(200)

        with _transport(handler) as transport:
            transport.send(ApiRequest(method="PUT", path="/x"))
        assert seen == ["POST"]

    def test_absolute_url_passes_through(self) -> None:
        seen: list[str] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(str(request.url))
            return httpx.Response(200)

        with _transport(handler) as transport:
            transport.send(ApiRequest(method="GET", path="https://status.example.org/jobs/9"))
        assert seen == ["https://status.example.org/jobs/9"]

    def test_error_status_is_returned_not_raised(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(500, text="boom")

        with _transport(handler) as transport:
            response = transport.send(ApiRequest(method="GET", path="/x"))
        assert response.status_code == 500

    def test_connect_error_becomes_transport_error(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        with _transport(handler) as transport:
            with pytest.raises(TransportError, match="connection refused"):
                transport.send(ApiRequest(method="GET", path="/x"))

    def test_timeout_becomes_transport_error(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ReadTimeout("timed out", request=request)

        with _transport(handler) as transport:
            with pytest.raises(TransportError) as exc_info:
                transport.send(ApiRequest(method="GET", path="/x"))
        assert exc_info.value.exit_code == 6


class TestLifecycle:
    def test_close_closes_client(self) -> None:
        transport = HttpTransport()
        transport.close()
        assert transport._client.is_closed

    def test_base_url_trailing_slash_stripped(self) -> None:
        transport = HttpTransport(base_url="https://api.example.com/")
        try:
            assert transport.base_url == "https://api.example.com"
        finally:
            transport.close()


class TestRedirects:
    def test_default_client_does_not_follow_redirects(self) -> None:
        transport = HttpTransport(base_url="https://api.example.com")
        try:
            assert transport._client.follow_redirects is False
        finally:
            transport.close()

    def test_redirect_on_create_is_an_api_error(self) -> None:
        seen: list[tuple[str, str]] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append((request.method, request.url.path))
            if request.method == "POST":
                return httpx.Response(303, headers={"location": "/elsewhere"})
            return httpx.Response(200, json={"id": "x"})

        transport = HttpTransport(base_url="https://api.example.com")
        transport._client._transport = httpx.MockTransport(handler)
        transport._client._mounts = {}
        executor = SyncExecutor(transport, Credential(token="t", version="2"))

        with transport:
            with pytest.raises(APIError) as exc_info:
                executor.execute("POST", PATH_ADD_TC, payload={"name": "shelf1"})

        assert exc_info.value.code == 303
        assert seen == [("POST", PATH_ADD_TC)]
