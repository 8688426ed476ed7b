"""
Error kinds raised by the credential layer.

Handlers branch on the exception type (and on AuthError.reason), never on
message text. AuthError keeps the precise reason for logs while its public
message stays the same for every failure.
"""
from __future__ import annotations

from enum import Enum


class ChirpyError(Exception):
    """Base class for errors raised by chirpy's own code."""

    status = 500
    public_message = "An unexpected error occurred"


class ConfigError(ChirpyError):
    """Missing or empty configuration (e.g. the JWT signing secret)."""


class HashingError(ChirpyError):
    """The password hashing backend failed."""


class AuthFailure(str, Enum):
    MISSING_HEADER = "missing-header"
    BAD_PREFIX = "bad-prefix"
    EMPTY_TOKEN = "empty-token"
    EXPIRED = "expired"
    INVALID_SIGNATURE = "invalid-signature"
    INVALID_ALGORITHM = "invalid-algorithm"
    MALFORMED_TOKEN = "malformed-token"
    MALFORMED_SUBJECT = "malformed-subject"
    UNKNOWN_TOKEN = "unknown-token"
    REVOKED = "revoked"
    BAD_CREDENTIALS = "bad-credentials"
    UNKNOWN_USER = "unknown-user"
    BAD_API_KEY = "bad-api-key"


class AuthError(ChirpyError):
    """Credential or token rejected. Always maps to 401."""

    status = 401
    public_message = "Unauthorized"

    def __init__(self, reason: AuthFailure):
        super().__init__(reason.value)
        self.reason = reason

    def __repr__(self) -> str:
        return f"AuthError({self.reason.value!r})"


class ForbiddenError(ChirpyError):
    """Authenticated principal does not own the target resource."""

    status = 403
    public_message = "Forbidden"

    def __init__(self, message: str = "Forbidden"):
        super().__init__(message)
        self.public_message = message
