"""
Refresh token lifecycle on top of a token store.

A refresh token can mint access tokens while it is not revoked and not
expired. Using it does not rotate or revoke it. Revoked tokens are kept
(revoked_at is set) rather than deleted.
"""
from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Optional, Protocol, Tuple

from utils.exceptions import AuthError, AuthFailure
from utils.security import REFRESH_TOKEN_TTL, issue_refresh_token


class RefreshTokenStore(Protocol):
    def create_refresh_token(self, token: str, user_id: str, expires_at: datetime) -> None: ...

    def get_refresh_token(self, token: str) -> Optional[Tuple[str, Optional[datetime], datetime]]: ...

    def revoke_refresh_token(self, token: str, revoked_at: datetime) -> bool: ...


def _now() -> datetime:
    return datetime.now(timezone.utc)


def _as_utc(value: datetime) -> datetime:
    # SQLite hands back naive datetimes; they are stored as UTC
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def create_refresh_token(store: RefreshTokenStore, user_id: str,
                         ttl: timedelta = REFRESH_TOKEN_TTL,
                         now: datetime | None = None) -> Tuple[str, datetime]:
    """Generate a refresh token for `user_id`, persist it and return (token, expires_at)."""
    now = now or _now()
    token = issue_refresh_token()
    expires_at = now + ttl
    store.create_refresh_token(token, user_id, expires_at)
    return token, expires_at


def resolve_refresh_token(store: RefreshTokenStore, token: str, now: datetime | None = None) -> str:
    """Return the owning user id, or raise AuthError if unknown, revoked or expired."""
    now = now or _now()
    record = store.get_refresh_token(token)
    if record is None:
        raise AuthError(AuthFailure.UNKNOWN_TOKEN)
    user_id, revoked_at, expires_at = record
    if revoked_at is not None:
        raise AuthError(AuthFailure.REVOKED)
    if expires_at is None or _as_utc(expires_at) <= now:
        raise AuthError(AuthFailure.EXPIRED)
    return user_id


def revoke_refresh_token(store: RefreshTokenStore, token: str, now: datetime | None = None) -> None:
    """Mark a token revoked. Unknown and already-revoked tokens both raise AuthError."""
    if not store.revoke_refresh_token(token, now or _now()):
        raise AuthError(AuthFailure.UNKNOWN_TOKEN)
