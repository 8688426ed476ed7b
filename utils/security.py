"""
security helpers:
- Argon2 password hashing via argon2-cffi
- JWT access token creation/verification via PyJWT
- opaque refresh token generation
- Authorization header parsing (Bearer tokens and ApiKey credentials)
"""
from __future__ import annotations

import hmac
import secrets
import uuid
from datetime import datetime, timedelta, timezone
from typing import Mapping, Optional

import jwt
from argon2 import PasswordHasher
from argon2.exceptions import HashingError as Argon2HashingError
from argon2.exceptions import InvalidHashError, VerificationError

from utils.exceptions import AuthError, AuthFailure, ConfigError, ForbiddenError, HashingError

ISSUER = "chirpy"
ALGORITHM = "HS256"
ACCESS_TOKEN_TTL = timedelta(hours=1)
REFRESH_TOKEN_TTL = timedelta(days=60)
REFRESH_TOKEN_BYTES = 32

BEARER_SCHEME = "Bearer"
API_KEY_SCHEME = "ApiKey"

ph = PasswordHasher()
_dummy_hash: Optional[str] = None


def configure_hasher(time_cost: int | None = None,
                     memory_cost: int | None = None,
                     parallelism: int | None = None) -> PasswordHasher:
    """Replace the module hasher with one using the given work factor.
    Unset values keep the argon2-cffi defaults.
    """
    global ph, _dummy_hash
    kwargs = {}
    if time_cost:
        kwargs["time_cost"] = time_cost
    if memory_cost:
        kwargs["memory_cost"] = memory_cost
    if parallelism:
        kwargs["parallelism"] = parallelism
    ph = PasswordHasher(**kwargs)
    _dummy_hash = None
    return ph


def hash_password(password: str) -> str:
    """Hash a plaintext password using Argon2
    """
    try:
        return ph.hash(password)
    except Argon2HashingError as exc:
        raise HashingError("password hashing failed") from exc


def verify_password(password: str, password_hash: str) -> bool:
    """ Verify a plaintext password using argon2
    """
    try:
        return ph.verify(password_hash, password)
    except (VerificationError, InvalidHashError):
        return False


def password_needs_rehash(password_hash: str) -> bool:
    try:
        return ph.check_needs_rehash(password_hash)
    except InvalidHashError:
        return True


def verify_dummy_password(password: str) -> bool:
    """Run a full verification against a throwaway hash and return False.

    Used when the account does not exist so the response takes as long as
    a real password check.
    """
    global _dummy_hash
    if _dummy_hash is None:
        _dummy_hash = hash_password(secrets.token_hex(16))
    verify_password(password, _dummy_hash)
    return False


def _now() -> datetime:
    return datetime.now(timezone.utc)


def access_token_ttl(requested_seconds: int | None, maximum: timedelta = ACCESS_TOKEN_TTL) -> timedelta:
    """
    Effective lifetime for a login-issued access token:
    the requested seconds capped at `maximum`, or `maximum` when nothing
    positive was requested.
    """
    if requested_seconds and requested_seconds > 0:
        # compare as numbers; timedelta() overflows on huge requests
        return timedelta(seconds=min(requested_seconds, maximum.total_seconds()))
    return maximum


def issue_access_token(user_id, secret: str, ttl: timedelta, now: datetime | None = None) -> str:
    """Create a signed HS256 access token for `user_id`."""
    if not secret:
        raise ConfigError("JWT secret cannot be empty")
    now = now or _now()
    payload = {
        "iss": ISSUER,
        "sub": str(user_id),
        "iat": int(now.timestamp()),
        "exp": int((now + ttl).timestamp()),
    }
    return jwt.encode(payload, secret, algorithm=ALGORITHM)


def validate_access_token(token: str, secret: str) -> str:
    """
    Decode and validate an access token and return the user id it was issued for.
    Only HS256 is accepted; anything else (including "none") is rejected.
    Every failure raises AuthError; the reason is kept for logging only.
    """
    if not secret:
        raise ConfigError("JWT secret cannot be empty")
    try:
        decoded = jwt.decode(
            token,
            secret,
            algorithms=[ALGORITHM],
            issuer=ISSUER,
            options={"require": ["exp", "iat", "iss", "sub"]},
        )
    except jwt.ExpiredSignatureError:
        raise AuthError(AuthFailure.EXPIRED) from None
    except jwt.InvalidSignatureError:
        raise AuthError(AuthFailure.INVALID_SIGNATURE) from None
    except jwt.InvalidAlgorithmError:
        raise AuthError(AuthFailure.INVALID_ALGORITHM) from None
    except jwt.InvalidTokenError:
        raise AuthError(AuthFailure.MALFORMED_TOKEN) from None

    try:
        return str(uuid.UUID(decoded["sub"]))
    except (ValueError, TypeError, AttributeError):
        raise AuthError(AuthFailure.MALFORMED_SUBJECT) from None


def issue_refresh_token() -> str:
    """Opaque refresh token: 256 random bits, hex encoded."""
    return secrets.token_hex(REFRESH_TOKEN_BYTES)


def _extract_credential(headers: Mapping[str, str], scheme: str) -> str:
    header = headers.get("Authorization")
    if not header:
        raise AuthError(AuthFailure.MISSING_HEADER)
    prefix = f"{scheme} "
    if not header.startswith(prefix):
        raise AuthError(AuthFailure.BAD_PREFIX)
    value = header[len(prefix):].strip()
    if not value:
        raise AuthError(AuthFailure.EMPTY_TOKEN)
    return value


def extract_bearer_token(headers: Mapping[str, str]) -> str:
    return _extract_credential(headers, BEARER_SCHEME)


def extract_api_key(headers: Mapping[str, str]) -> str:
    return _extract_credential(headers, API_KEY_SCHEME)


def api_key_matches(presented: str, expected: str) -> bool:
    """Constant-time comparison; an unset key never matches."""
    if not expected or not presented:
        return False
    return hmac.compare_digest(presented.encode("utf-8"), expected.encode("utf-8"))


def ensure_owner(owner_id, principal_id, message: str = "Forbidden") -> None:
    if str(owner_id) != str(principal_id):
        raise ForbiddenError(message)
