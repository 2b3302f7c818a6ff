"""Public operations of the Cloud Targets management API.

:class:`TargetsManager` is the library entry point. Each method maps to one
API call; :meth:`~TargetsManager.add_targets` and
:meth:`~TargetsManager.generate_target_collection` start server-side jobs
and block until they finish (seconds to minutes, depending on the number
of targets).

Example::

    from cloudtargets import TargetsManager

    with TargetsManager(token="...", version="2") as api:
        tc = api.create_target_collection("shelf1")
        api.add_target(tc["id"], {"name": "cover", "imageUrl": "https://..."})
        api.generate_target_collection(tc["id"])
"""

from __future__ import annotations

import time
from typing import Any, Callable, Optional

from cloudtargets.client.executor import SyncExecutor
from cloudtargets.client.poller import AsyncOperationPoller
from cloudtargets.client.request import (
    PATH_ADD_TARGET,
    PATH_ADD_TARGETS,
    PATH_ADD_TC,
    PATH_GENERATE_TC,
    PATH_GET_TARGET,
    PATH_GET_TC,
    PLACEHOLDER_TARGET_ID,
    PLACEHOLDER_TC_ID,
)
from cloudtargets.client.transport import HttpTransport
from cloudtargets.exceptions import ConfigError
from cloudtargets.models import (
    DEFAULT_BASE_URL,
    DEFAULT_POLL_INTERVAL_MS,
    ClientSettings,
    Credential,
    JsonObject,
)


class TargetsManager:
    """Client for target collections and targets.

    Args:
        token: API token, sent as ``X-Token``.
        version: API version, sent as ``X-Version``.
        poll_interval: Milliseconds between status polls of asynchronous
            operations.
        base_url: API endpoint.
        timeout: Per-request timeout in seconds.
        verify_ssl: Verify the server's TLS certificate.
        max_polls: Optional bound on status polls per asynchronous
            operation. ``None`` polls until completion.
        transport: Pre-built transport (tests, custom httpx clients).
        sleep: Blocking wait used between polls, in whole seconds.
    """

    def __init__(
        self,
        token: str,
        version: str,
        poll_interval: int = DEFAULT_POLL_INTERVAL_MS,
        *,
        base_url: str = DEFAULT_BASE_URL,
        timeout: float = 30,
        verify_ssl: bool = True,
        max_polls: Optional[int] = None,
        transport: Optional[HttpTransport] = None,
        sleep: Callable[[float], Any] = time.sleep,
    ) -> None:
        self.credential = Credential(token=token, version=version)
        self.poll_interval = poll_interval
        self.max_polls = max_polls
        self._sleep = sleep
        self._transport = transport or HttpTransport(
            base_url=base_url, timeout=timeout, verify_ssl=verify_ssl
        )
        self._executor = SyncExecutor(self._transport, self.credential)

    @classmethod
    def from_settings(
        cls,
        settings: ClientSettings,
        transport: Optional[HttpTransport] = None,
    ) -> TargetsManager:
        """Build a manager from resolved :class:`ClientSettings`.

        Raises:
            ConfigError: If the token or the API version is missing.
        """
        if not settings.token:
            raise ConfigError("No API token configured (use --token or CLOUDTARGETS_TOKEN)")
        if not settings.version:
            raise ConfigError(
                "No API version configured (use --api-version or CLOUDTARGETS_VERSION)"
            )
        return cls(
            settings.token,
            settings.version,
            settings.poll_interval,
            base_url=settings.base_url,
            timeout=settings.timeout,
            verify_ssl=settings.verify_ssl,
            max_polls=settings.max_polls,
            transport=transport,
        )

    def __enter__(self) -> TargetsManager:
        return self

    def __exit__(self, *args: object) -> None:
        self.close()

    def close(self) -> None:
        self._transport.close()

    # ------------------------------------------------------------------ #
    # Target collections
    # ------------------------------------------------------------------ #

    def create_target_collection(self, name: str) -> Any:
        """Create an empty target collection.

        The response contains the server-assigned ``id`` required by every
        other operation on the collection.
        """
        return self._executor.execute("POST", PATH_ADD_TC, payload={"name": name})

    def get_all_target_collections(self) -> Any:
        """List all target collections of the account."""
        return self._executor.execute("GET", PATH_ADD_TC)

    def rename_target_collection(self, tc_id: str, name: str) -> Any:
        """Rename a collection; returns the updated collection."""
        return self._executor.execute(
            "POST", PATH_GET_TC, {PLACEHOLDER_TC_ID: tc_id}, payload={"name": name}
        )

    def get_target_collection(self, tc_id: str) -> Any:
        """Read one collection without modifying it.

        Sent as a body-less ``POST``, which the API accepts as a read.
        """
        return self._executor.execute("POST", PATH_GET_TC, {PLACEHOLDER_TC_ID: tc_id})

    def delete_target_collection(self, tc_id: str) -> bool:
        """Delete a collection and all of its targets. This cannot be undone."""
        self._executor.execute("DELETE", PATH_GET_TC, {PLACEHOLDER_TC_ID: tc_id})
        return True

    def generate_target_collection(self, tc_id: str) -> JsonObject:
        """(Re)build the recognition archive of a collection and wait for it.

        Targets added since the last generation are only recognised after
        this completes.

        Returns:
            The final ``COMPLETED`` operation status.
        """
        request = self._executor.request("POST", PATH_GENERATE_TC, {PLACEHOLDER_TC_ID: tc_id})
        return self._poller().run(request)

    # ------------------------------------------------------------------ #
    # Targets
    # ------------------------------------------------------------------ #

    def get_all_targets(self, tc_id: str) -> Any:
        """List all targets of a collection (by id, not name)."""
        return self._executor.execute("GET", PATH_ADD_TARGET, {PLACEHOLDER_TC_ID: tc_id})

    def add_target(self, tc_id: str, target: JsonObject) -> Any:
        """Add one target, e.g. ``{"name": "cover", "imageUrl": "https://..."}``.

        Returns:
            The created target, including its server-assigned ``id``.
        """
        return self._executor.execute(
            "POST", PATH_ADD_TARGET, {PLACEHOLDER_TC_ID: tc_id}, payload=target
        )

    def add_targets(self, tc_id: str, targets: list[JsonObject]) -> JsonObject:
        """Add many targets in one server-side job and wait for it to finish.

        Returns:
            The final ``COMPLETED`` operation status.
        """
        request = self._executor.request(
            "POST", PATH_ADD_TARGETS, {PLACEHOLDER_TC_ID: tc_id}, payload=targets
        )
        return self._poller().run(request)

    def get_target(self, tc_id: str, target_id: str) -> Any:
        return self._executor.execute("GET", PATH_GET_TARGET, self._target_values(tc_id, target_id))

    def update_target(self, tc_id: str, target_id: str, target: JsonObject) -> Any:
        """Update selected properties of a target, e.g. ``{"physicalHeight": 200}``."""
        return self._executor.execute(
            "POST", PATH_GET_TARGET, self._target_values(tc_id, target_id), payload=target
        )

    def delete_target(self, tc_id: str, target_id: str) -> bool:
        self._executor.execute("DELETE", PATH_GET_TARGET, self._target_values(tc_id, target_id))
        return True

    # ------------------------------------------------------------------ #
    # Private helpers
    # ------------------------------------------------------------------ #

    @staticmethod
    def _target_values(tc_id: str, target_id: str) -> dict[str, str]:
        return {PLACEHOLDER_TC_ID: tc_id, PLACEHOLDER_TARGET_ID: target_id}

    def _poller(self) -> AsyncOperationPoller:
        return AsyncOperationPoller(
            self._executor,
            poll_interval=self.poll_interval,
            max_polls=self.max_polls,
            sleep=self._sleep,
        )
