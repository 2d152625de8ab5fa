"""Exception hierarchy for ngakit.

All exceptions inherit from :class:`NgaError`, which carries an
``exit_code`` attribute mapped to a constant from :mod:`ngakit.exit_codes`
and a ``retryable`` flag callers can consult when deciding whether to try
the same request again. The library never retries on its own.

Subclass hierarchy::

    NgaError (exit 1)
    +-- BuilderError        (exit 2)
    +-- AuthRequiredError   (exit 3)
    +-- ApiError            (exit 4)
    +-- NetworkError        (exit 6, retryable)
    +-- DecodeError         (exit 7)
    +-- ConfigError         (exit 1)
"""

from __future__ import annotations

import enum
from typing import Optional

from ngakit.exit_codes import (
    EXIT_API_ERROR,
    EXIT_AUTH_REQUIRED,
    EXIT_DECODE_ERROR,
    EXIT_GENERIC_FAILURE,
    EXIT_INVALID_USAGE,
    EXIT_NETWORK_ERROR,
)


class NgaError(Exception):
    """Base exception for all ngakit errors.

    Args:
        message: Human-readable error description.
        exit_code: Optional override for the class-level exit code.
    """

    exit_code: int = EXIT_GENERIC_FAILURE
    retryable: bool = False

    def __init__(self, message: str, exit_code: int | None = None):
        super().__init__(message)
        if exit_code is not None:
            self.exit_code = exit_code


class BuilderError(NgaError):
    """Raised when a builder is missing a required input or gets a value outside its enum."""

    exit_code = EXIT_INVALID_USAGE


class AuthRequiredError(NgaError):
    """Raised before any I/O when an operation needs a credential and none is configured."""

    exit_code = EXIT_AUTH_REQUIRED

    def __init__(self, operation: str):
        super().__init__(f"'{operation}' requires authentication; configure a token and uid")
        self.operation = operation


class NetworkError(NgaError):
    """Raised on transport failures (connect, timeout, TLS)."""

    exit_code = EXIT_NETWORK_ERROR
    retryable = True


class ApiError(NgaError):
    """Raised when the forum signals a domain error.

    Args:
        code: The forum's numeric error code, or the HTTP status when the
            server failed without an error payload.
        message: The forum's message with HTML entities unescaped.
    """

    exit_code = EXIT_API_ERROR

    def __init__(self, code: int, message: str):
        super().__init__(f"API error {code}: {message}")
        self.code = code
        self.message = message

    @property
    def is_auth_error(self) -> bool:
        """Whether the forum rejected the credential (code 2)."""
        return self.code == 2


class DecodeStage(str, enum.Enum):
    """Pipeline stage a :class:`DecodeError` came from."""

    CHARSET = "charset"
    STRUCTURE = "structure"
    PROJECTION = "projection"


class DecodeError(NgaError):
    """Raised when a payload violates a wire-format assumption.

    Args:
        stage: Which decoding stage failed.
        detail: What went wrong.
        field: Offending record field, for projection failures.
        position: Node path inside the payload, e.g. ``/root/__T/item[3]``.
    """

    exit_code = EXIT_DECODE_ERROR

    def __init__(
        self,
        stage: DecodeStage,
        detail: str,
        field: Optional[str] = None,
        position: Optional[str] = None,
    ):
        where = ""
        if field is not None:
            where = f" (field '{field}'"
            where += f" at {position})" if position else ")"
        elif position is not None:
            where = f" (at {position})"
        super().__init__(f"Decode failed at {stage.value} stage: {detail}{where}")
        self.stage = stage
        self.detail = detail
        self.field = field
        self.position = position


class ConfigError(NgaError):
    """Raised for configuration problems (invalid JSON, bad credential values)."""

    exit_code = EXIT_GENERIC_FAILURE
