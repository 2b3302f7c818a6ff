"""Canonical Pydantic models shared across all cloudtargets modules.

The models fall into two groups:

**Configuration models** -- serialised as JSON in the user's config
directory or the project-local ``cloudtargets.json``:
    :class:`ClientSettings` and :class:`OutputConfig`.

**Wire models** -- shapes exchanged with the Cloud Targets API:
    :class:`Credential`, :class:`ApiRequest`, and :class:`OperationStatus`.

Target and collection payloads are deliberately *not* modelled as fixed
records. The API adds fields over time, so they travel as plain
:data:`JsonValue` mappings and only the fields the client itself interprets
(``status`` and ``estimatedLatency`` of an operation status) are typed.
"""

from __future__ import annotations

from typing import Any, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

JsonValue = Union[None, bool, int, float, str, list[Any], dict[str, Any]]
"""Any value the JSON codec can produce or consume."""

JsonObject = dict[str, Any]
"""An open-ended property bag (target properties, status payloads)."""

DEFAULT_BASE_URL = "https://api.wikitude.com"
DEFAULT_POLL_INTERVAL_MS = 10000

STATUS_COMPLETED = "COMPLETED"


# --- Configuration ---


class OutputConfig(BaseModel):
    """Default output format preferences stored in :class:`ClientSettings`."""

    format: str = Field(
        default="auto", description="Output format: auto, json, plain, rich"
    )


class ClientSettings(BaseModel):
    """Everything needed to construct a :class:`~cloudtargets.manager.TargetsManager`.

    Resolved by :func:`~cloudtargets.config.resolve_settings` from CLI flags,
    environment variables, project config, and user config. ``token`` and
    ``version`` are optional here so that partially filled config files
    validate; the resolver rejects settings that are still missing them.
    """

    model_config = ConfigDict(extra="ignore")

    token: Optional[str] = Field(default=None, description="API token sent as X-Token")
    version: Optional[str] = Field(
        default=None, description="API version sent as X-Version"
    )
    poll_interval: int = Field(
        default=DEFAULT_POLL_INTERVAL_MS,
        ge=0,
        description="Milliseconds between status polls of asynchronous operations",
    )
    base_url: str = Field(default=DEFAULT_BASE_URL, description="API endpoint")
    timeout: int = Field(default=30, description="Request timeout in seconds")
    verify_ssl: bool = Field(default=True, description="Verify SSL certificates")
    max_polls: Optional[int] = Field(
        default=None,
        ge=1,
        description="Give up after this many status polls (unbounded when unset)",
    )
    output: OutputConfig = Field(default_factory=OutputConfig)


# --- Wire models ---


class Credential(BaseModel):
    """Token and API version attached to every request. Immutable per client."""

    model_config = ConfigDict(frozen=True)

    token: str
    version: str


class ApiRequest(BaseModel):
    """A fully built request, ready for the transport.

    ``path`` is either relative to the configured base URL or an absolute
    URL (status locations handed out by the server).
    """

    model_config = ConfigDict(frozen=True)

    method: str
    path: str
    headers: dict[str, str] = Field(default_factory=dict)
    body: Optional[str] = None


class OperationStatus(BaseModel):
    """Progress report of an asynchronous server-side job.

    Unknown fields are kept in ``model_extra`` so job-specific result data
    is not lost.
    """

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    #: A status string or numeric code; only ``COMPLETED`` ends polling.
    status: Any = None
    estimated_latency: Optional[float] = Field(default=None, alias="estimatedLatency")
