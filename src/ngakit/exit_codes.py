"""Numeric process exit codes following `clig.dev <https://clig.dev/>`_ conventions.

Each constant maps to an error category and is referenced by the
corresponding :class:`~ngakit.exceptions.NgaError` subclass. Shell
wrappers can inspect the exit code to tell a missing credential from a
network outage without parsing stderr.

Example::

    $ ngakit notification counts
    $ echo $?
    3   # EXIT_AUTH_REQUIRED -- no credential configured
"""

EXIT_SUCCESS = 0
"""The command completed successfully."""

EXIT_GENERIC_FAILURE = 1
"""An unclassified error occurred."""

EXIT_INVALID_USAGE = 2
"""The command was invoked with invalid arguments or builder inputs."""

EXIT_AUTH_REQUIRED = 3
"""The operation needs a credential and none is configured."""

EXIT_API_ERROR = 4
"""The forum answered with an embedded error payload."""

EXIT_NETWORK_ERROR = 6
"""A transport-level error occurred (timeout, DNS failure, TLS, connection refused)."""

EXIT_DECODE_ERROR = 7
"""The response could not be decoded (charset, structure or field projection)."""
