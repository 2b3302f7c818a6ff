"""cloudtargets -- client library and CLI for the Wikitude Cloud Targets API.

Manages target collections and the image targets inside them, and drives
the API's long-running operations (bulk target upload, collection
generation) through a blocking polling protocol.

Typical use::

    from cloudtargets import TargetsManager

    with TargetsManager(token="...", version="2") as api:
        for tc in api.get_all_target_collections():
            print(tc["id"], tc["name"])

Modules:
    manager: :class:`TargetsManager`, the public operations.
    client: request building, transport, error classification, polling.
    models: Pydantic models and JSON value aliases.
    config: XDG-aware settings resolution.
    exceptions: Exception hierarchy with exit-code mapping.
    app: Typer CLI entry point.
"""

__version__ = "0.1.0"

from cloudtargets.exceptions import (  # noqa: E402
    APIError,
    CloudTargetsError,
    PollTimeoutError,
    ServiceError,
    TransportError,
)
from cloudtargets.manager import TargetsManager  # noqa: E402

__all__ = [
    "TargetsManager",
    "CloudTargetsError",
    "APIError",
    "ServiceError",
    "TransportError",
    "PollTimeoutError",
    "__version__",
]
