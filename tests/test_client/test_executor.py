"""Tests for the synchronous operation executor."""

from __future__ import annotations

import json
from typing import Any

import httpx
import pytest

from cloudtargets.client.executor import SyncExecutor
from cloudtargets.client.request import PATH_ADD_TC, PATH_GET_TC, PLACEHOLDER_TC_ID
from cloudtargets.exceptions import APIError, ServiceError, TransportError
from cloudtargets.models import Credential


@pytest.fixture
def executor(fake_api: Any) -> SyncExecutor:
    return SyncExecutor(fake_api.transport(), Credential(token="tok", version="2"))


class TestExecute:
    def test_returns_decoded_json(self, fake_api: Any, executor: SyncExecutor) -> None:
        fake_api.add("GET", PATH_ADD_TC, httpx.Response(200, json=[{"id": "abc"}]))
        assert executor.execute("GET", PATH_ADD_TC) == [{"id": "abc"}]

    def test_accepted_with_json(self, fake_api: Any, executor: SyncExecutor) -> None:
        fake_api.add("GET", PATH_ADD_TC, httpx.Response(202, json={"status": "queued"}))
        assert executor.execute("GET", PATH_ADD_TC) == {"status": "queued"}

    def test_no_content_returns_none(self, fake_api: Any, executor: SyncExecutor) -> None:
        path = "/cloudrecognition/targetCollection/tc1"
        fake_api.add("DELETE", path, httpx.Response(204))
        assert executor.execute("DELETE", PATH_GET_TC, {PLACEHOLDER_TC_ID: "tc1"}) is None

    def test_non_json_success_returns_none(self, fake_api: Any, executor: SyncExecutor) -> None:
        fake_api.add("GET", PATH_ADD_TC, httpx.Response(200, text="OK"))
        assert executor.execute("GET", PATH_ADD_TC) is None

    def test_zero_length_json_returns_none(self, fake_api: Any, executor: SyncExecutor) -> None:
        fake_api.add(
            "GET",
            PATH_ADD_TC,
            httpx.Response(
                200,
                content=b"",
                headers={"content-type": "application/json", "content-length": "0"},
            ),
        )
        assert executor.execute("GET", PATH_ADD_TC) is None

    def test_sends_payload_and_credentials(self, fake_api: Any, executor: SyncExecutor) -> None:
        fake_api.add("POST", PATH_ADD_TC, httpx.Response(200, json={"id": "abc"}))
        executor.execute("POST", PATH_ADD_TC, payload={"name": "shelf1"})

        sent = fake_api.requests[0]
        assert json.loads(sent.content) == {"name": "shelf1"}
        assert sent.headers["content-type"] == "application/json"
        assert sent.headers["x-token"] == "tok"
        assert sent.headers["x-version"] == "2"


class TestErrors:
    def test_service_error_propagates(self, fake_api: Any, executor: SyncExecutor) -> None:
        fake_api.add(
            "GET",
            PATH_ADD_TC,
            httpx.Response(
                401, json={"message": "invalid token", "code": 401, "reason": "Unauthorized"}
            ),
        )
        with pytest.raises(ServiceError) as exc_info:
            executor.execute("GET", PATH_ADD_TC)
        assert str(exc_info.value) == "Unauthorized (401): invalid token"

    def test_general_error_propagates(self, fake_api: Any, executor: SyncExecutor) -> None:
        fake_api.add("GET", PATH_ADD_TC, httpx.Response(504, text="Gateway Timeout"))
        with pytest.raises(APIError) as exc_info:
            executor.execute("GET", PATH_ADD_TC)
        assert not isinstance(exc_info.value, ServiceError)
        assert exc_info.value.code == 504

    def test_transport_error_propagates(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("name resolution failed", request=request)

        from cloudtargets.client.transport import HttpTransport

        client = httpx.Client(base_url="https://api.example.com", transport=httpx.MockTransport(handler))
        executor = SyncExecutor(HttpTransport(client=client), Credential(token="t", version="2"))
        with pytest.raises(TransportError):
            executor.execute("GET", PATH_ADD_TC)
