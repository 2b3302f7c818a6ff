"""Numeric process exit codes following `clig.dev <https://clig.dev/>`_ conventions.

Each constant maps to a specific error category and is referenced by the
corresponding :class:`~cloudtargets.exceptions.CloudTargetsError` subclass.
Shell wrappers can inspect the exit code to tell a rejected token from a
missing collection without parsing stderr.

Example::

    $ cloudtargets collections get 5c8f0b7e
    $ echo $?
    4   # EXIT_NOT_FOUND -- the collection does not exist
"""

EXIT_SUCCESS = 0
"""The command completed successfully."""

EXIT_GENERIC_FAILURE = 1
"""An unclassified error occurred (including configuration problems)."""

EXIT_INVALID_USAGE = 2
"""The command was invoked with invalid arguments or malformed JSON input."""

EXIT_AUTH_FAILURE = 3
"""The API rejected the token or version (HTTP 401 / 403)."""

EXIT_NOT_FOUND = 4
"""The requested collection or target was not found (HTTP 404)."""

EXIT_API_ERROR = 5
"""The API answered with any other non-success status."""

EXIT_CONNECTION_ERROR = 6
"""A network-level error occurred (timeout, DNS failure, connection refused)."""

EXIT_POLL_TIMEOUT = 7
"""An asynchronous operation did not complete within the configured poll bound."""
