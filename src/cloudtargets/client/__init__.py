"""HTTP client layer for cloudtargets.

The layer is split along the life of one request:

* :mod:`~cloudtargets.client.request` -- path templates, headers, JSON body.
* :mod:`~cloudtargets.client.transport` -- :class:`HttpTransport`, one
  round trip over :mod:`httpx`.
* :mod:`~cloudtargets.client.response` -- success check and typed error
  classification.
* :mod:`~cloudtargets.client.executor` -- :class:`SyncExecutor` for
  operations that complete immediately.
* :mod:`~cloudtargets.client.poller` -- :class:`AsyncOperationPoller` for
  operations the server runs in the background.

Most callers want :class:`~cloudtargets.manager.TargetsManager` instead.
"""

from cloudtargets.client.executor import SyncExecutor
from cloudtargets.client.poller import AsyncOperationPoller, PollState
from cloudtargets.client.transport import HttpTransport

__all__ = ["HttpTransport", "SyncExecutor", "AsyncOperationPoller", "PollState"]
