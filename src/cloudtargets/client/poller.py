"""Polling protocol for long-running server operations.

Bulk target uploads and collection generation are executed by the API in
the background. The initiating ``POST`` is answered with ``202 Accepted``,
a ``Location`` header pointing at a status resource, and optionally an
``estimatedLatency`` (milliseconds) in the JSON body. The client then
waits and re-reads the status resource until it reports ``COMPLETED``.

:class:`AsyncOperationPoller` models this as an explicit state machine::

    INITIATED -> WAITING -> POLLING -> COMPLETED
                    ^          |
                    +----------+   (status != COMPLETED)

The first wait uses ``estimatedLatency`` when the server supplied one and
the configured poll interval otherwise; every later wait uses the poll
interval. Waits are truncated to whole seconds. There is no built-in bound:
unless ``max_polls`` is set, the poller keeps polling until the server
reports completion or a request fails. Errors are never retried and abort
the loop immediately.
"""

from __future__ import annotations

import time
from enum import Enum
from typing import Any, Callable, Optional

import httpx
from pydantic import ValidationError

from cloudtargets.client.executor import SyncExecutor
from cloudtargets.client.request import build_headers
from cloudtargets.client.response import has_json_content, read_json_body
from cloudtargets.exceptions import APIError, PollTimeoutError
from cloudtargets.models import (
    DEFAULT_POLL_INTERVAL_MS,
    STATUS_COMPLETED,
    ApiRequest,
    JsonObject,
    OperationStatus,
)
from cloudtargets.output import debug


class PollState(str, Enum):
    INITIATED = "initiated"
    WAITING = "waiting"
    POLLING = "polling"
    COMPLETED = "completed"


def whole_seconds(milliseconds: float) -> int:
    """Convert a wait in milliseconds to whole seconds, dropping the remainder."""
    return int(milliseconds) // 1000


def read_location(response: httpx.Response) -> str:
    """Return the status location of an accepted asynchronous operation.

    Raises:
        APIError: If the response has no ``Location`` header.
    """
    location = response.headers.get("location")
    if not location:
        raise APIError(
            "Asynchronous operation accepted without a Location header",
            response.status_code,
        )
    return location


class AsyncOperationPoller:
    """Drives one asynchronous operation from initiation to completion.

    The suspension primitive is injectable: pass any callable taking a
    number of seconds as *sleep* (a recorder in tests, an event wait in a
    GUI). The caller still sees one blocking :meth:`run` call that returns
    the final status.

    Args:
        executor: Sends requests and raises classified errors.
        poll_interval: Milliseconds between polls (and before the first poll
            when the server gives no estimate).
        max_polls: Optional bound on the number of status reads.
        sleep: Blocking wait taking whole seconds.
    """

    def __init__(
        self,
        executor: SyncExecutor,
        poll_interval: int = DEFAULT_POLL_INTERVAL_MS,
        max_polls: Optional[int] = None,
        sleep: Callable[[float], Any] = time.sleep,
    ) -> None:
        self.executor = executor
        self.poll_interval = poll_interval
        self.max_polls = max_polls
        self._sleep = sleep
        self.state = PollState.INITIATED

    def run(self, request: ApiRequest) -> JsonObject:
        """Send the initiating *request* and block until the operation completes.

        Returns:
            The full decoded body of the ``COMPLETED`` status.

        Raises:
            ServiceError / APIError: On any error response, including while
                polling.
            TransportError: When a request could not be sent.
            PollTimeoutError: When ``max_polls`` is set and exhausted.
        """
        self._transition(PollState.INITIATED)
        response = self.executor.send(request)
        location = read_location(response)
        delay = self.initial_delay(response)
        polls = 0

        while True:
            self._transition(PollState.WAITING)
            self.wait(delay)

            self._transition(PollState.POLLING)
            body = self.read_status(location)
            polls += 1

            if body.get("status") == STATUS_COMPLETED:
                self._transition(PollState.COMPLETED)
                return body

            debug(f"Operation at {location} is {body.get('status')!r} after {polls} poll(s)")
            if self.max_polls is not None and polls >= self.max_polls:
                raise PollTimeoutError(location, polls)
            delay = self.poll_interval

    def initial_delay(self, response: httpx.Response) -> float:
        """Milliseconds to wait before the first poll."""
        if has_json_content(response):
            body = read_json_body(response)
            if isinstance(body, dict) and body.get("estimatedLatency") is not None:
                try:
                    return OperationStatus.model_validate(body).estimated_latency
                except ValidationError:
                    debug(f"Ignoring estimatedLatency {body['estimatedLatency']!r}")
        return self.poll_interval

    def wait(self, milliseconds: float) -> None:
        seconds = whole_seconds(milliseconds)
        debug(f"Waiting {seconds}s before polling")
        self._sleep(seconds)

    def read_status(self, location: str) -> JsonObject:
        """GET the status resource and return its decoded JSON object."""
        request = ApiRequest(
            method="GET",
            path=location,
            headers=build_headers(self.executor.credential),
        )
        response = self.executor.send(request)
        try:
            body = read_json_body(response)
        except ValueError as exc:
            raise APIError(response.text, response.status_code) from exc
        if not isinstance(body, dict):
            raise APIError(response.text, response.status_code)
        return body

    def _transition(self, state: PollState) -> None:
        self.state = state
        debug(f"Poller state: {state.value}")
