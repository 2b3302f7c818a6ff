"""Exception hierarchy for cloudtargets.

All exceptions inherit from :class:`CloudTargetsError`, which carries an
``exit_code`` attribute mapped to a constant from
:mod:`cloudtargets.exit_codes`. Library callers catch the typed errors
directly; the CLI entry point in :func:`cloudtargets.app.main` catches
``CloudTargetsError`` and exits with the matching code.

Subclass hierarchy::

    CloudTargetsError       (exit 1)
    +-- InvalidUsageError   (exit 2)
    +-- ConfigError         (exit 1)
    +-- TransportError      (exit 6)
    +-- PollTimeoutError    (exit 7)
    +-- APIError            (exit 5, 3 on 401/403, 4 on 404)
        +-- ServiceError    (same mapping as APIError)

``APIError`` is the *general* error: the API (or an intermediary in front
of it) answered with a non-success status and a body that is not JSON.
``ServiceError`` is raised instead when the body carries the structured
``{"message", "code", "reason"}`` diagnostics.
"""

from __future__ import annotations

from typing import Any

from cloudtargets.exit_codes import (
    EXIT_API_ERROR,
    EXIT_AUTH_FAILURE,
    EXIT_CONNECTION_ERROR,
    EXIT_GENERIC_FAILURE,
    EXIT_INVALID_USAGE,
    EXIT_NOT_FOUND,
    EXIT_POLL_TIMEOUT,
)


class CloudTargetsError(Exception):
    """Base exception for all cloudtargets errors.

    Args:
        message: Human-readable error description.
        exit_code: Optional override for the class-level exit code.
    """

    exit_code: int = EXIT_GENERIC_FAILURE

    def __init__(self, message: str, exit_code: int | None = None):
        super().__init__(message)
        if exit_code is not None:
            self.exit_code = exit_code


class InvalidUsageError(CloudTargetsError):
    """Raised for invalid arguments, unfilled path placeholders, or malformed JSON input."""

    exit_code = EXIT_INVALID_USAGE


class ConfigError(CloudTargetsError):
    """Raised for configuration problems (missing token, invalid config file)."""

    exit_code = EXIT_GENERIC_FAILURE


class TransportError(CloudTargetsError):
    """Raised on network-level failures (timeout, DNS resolution, connection refused).

    Kept apart from :class:`APIError`: the request never produced an API
    response, so there is nothing to classify.
    """

    exit_code = EXIT_CONNECTION_ERROR


class PollTimeoutError(CloudTargetsError):
    """Raised when an asynchronous operation exceeds the opt-in ``max_polls`` bound."""

    exit_code = EXIT_POLL_TIMEOUT

    def __init__(self, location: str, polls: int):
        self.location = location
        self.polls = polls
        super().__init__(f"Operation at {location} not completed after {polls} polls")


def _exit_code_for(code: Any) -> int:
    try:
        status = int(code)
    except (TypeError, ValueError):
        return EXIT_API_ERROR
    if status in (401, 403):
        return EXIT_AUTH_FAILURE
    if status == 404:
        return EXIT_NOT_FOUND
    return EXIT_API_ERROR


class APIError(CloudTargetsError):
    """The API responded with a non-success status and a non-JSON body.

    Args:
        message: The raw response body (may be empty).
        code: The HTTP status code.
    """

    def __init__(self, message: Any, code: Any):
        self.message = message
        self.code = code
        super().__init__(self._render(), exit_code=_exit_code_for(code))

    def _render(self) -> str:
        return f"({self.code}): {self.message}"

    def __str__(self) -> str:
        return self._render()


class ServiceError(APIError):
    """The API responded with structured diagnostics ``{message, code, reason}``."""

    def __init__(self, message: Any, code: Any, reason: Any):
        self.reason = reason
        super().__init__(message, code)

    def _render(self) -> str:
        return f"{self.reason} ({self.code}): {self.message}"
