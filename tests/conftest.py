"""Shared test fixtures for cloudtargets.

Provides an isolated config environment, a scripted fake API built on
:class:`httpx.MockTransport`, and a sleep recorder so polling tests run
instantly while still asserting the exact wait schedule.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Callable

import httpx
import pytest

from cloudtargets.client.transport import HttpTransport
from cloudtargets.manager import TargetsManager
from cloudtargets.output import OutputManager, reset_output, set_output

BASE_URL = "https://api.example.com"


# ---------------------------------------------------------------------------
# Output state
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def _reset_output_between_tests() -> None:
    """Install a quiet OutputManager for every test and drop it afterwards."""
    set_output(OutputManager(no_color=True, quiet=True))
    yield
    reset_output()


# ---------------------------------------------------------------------------
# Config isolation
# ---------------------------------------------------------------------------


@pytest.fixture
def isolated_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Isolate configuration to a temporary directory.

    Points XDG_CONFIG_HOME and XDG_DATA_HOME at subdirectories of tmp_path,
    clears all CLOUDTARGETS_* environment variables and changes the working
    directory to tmp_path.
    """
    monkeypatch.setattr("cloudtargets.config._is_xdg_platform", lambda: True)
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "config"))
    monkeypatch.setenv("XDG_DATA_HOME", str(tmp_path / "data"))
    for var in [
        "CLOUDTARGETS_TOKEN",
        "CLOUDTARGETS_VERSION",
        "CLOUDTARGETS_POLL_INTERVAL",
        "CLOUDTARGETS_BASE_URL",
    ]:
        monkeypatch.delenv(var, raising=False)
    monkeypatch.chdir(tmp_path)
    return tmp_path


# ---------------------------------------------------------------------------
# Fake API
# ---------------------------------------------------------------------------


class FakeAPI:
    """Scripted stand-in for the remote API.

    Responses are queued per ``(method, url)`` key, where *url* is either a
    path relative to :data:`BASE_URL` or an absolute URL. Every request is
    recorded in :attr:`requests`.
    """

    def __init__(self) -> None:
        self.requests: list[httpx.Request] = []
        self._routes: dict[tuple[str, str], list[httpx.Response]] = {}

    def add(self, method: str, url: str, *responses: httpx.Response) -> None:
        if not url.startswith("http"):
            url = BASE_URL + url
        self._routes.setdefault((method, url), []).extend(responses)

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        key = (request.method, str(request.url))
        queue = self._routes.get(key)
        if not queue:
            raise AssertionError(f"Unexpected request: {request.method} {request.url}")
        # The last queued response repeats once the others are used up.
        return queue.pop(0) if len(queue) > 1 else queue[0]

    def transport(self) -> HttpTransport:
        client = httpx.Client(base_url=BASE_URL, transport=httpx.MockTransport(self.handler))
        return HttpTransport(base_url=BASE_URL, client=client)


class SleepRecorder:
    """Replacement for ``time.sleep`` that records the requested seconds."""

    def __init__(self) -> None:
        self.calls: list[float] = []

    def __call__(self, seconds: float) -> None:
        self.calls.append(seconds)


@pytest.fixture
def fake_api() -> FakeAPI:
    return FakeAPI()


@pytest.fixture
def sleeper() -> SleepRecorder:
    return SleepRecorder()


@pytest.fixture
def make_manager(
    fake_api: FakeAPI, sleeper: SleepRecorder
) -> Callable[..., TargetsManager]:
    """Factory for a TargetsManager wired to the fake API and sleep recorder."""

    def _make(**kwargs: Any) -> TargetsManager:
        kwargs.setdefault("transport", fake_api.transport())
        kwargs.setdefault("sleep", sleeper)
        return TargetsManager("secret-token", "2", **kwargs)

    return _make
