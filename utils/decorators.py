from __future__ import annotations
from functools import wraps
from flask import request, g, current_app
from utils.exceptions import AuthError, AuthFailure
from utils.security import (
    extract_bearer_token,
    extract_api_key,
    validate_access_token,
    api_key_matches,
)


def jwt_required():
    """
    Require a valid access token in `Authorization: Bearer <token>`.
    The principal (user id string) is stored on g.current_user_id.
    Failures raise AuthError, rendered as 401 by the error handlers.
    """
    def decorator(fn):
        @wraps(fn)
        def wrapper(*args, **kwargs):
            token = extract_bearer_token(request.headers)
            g.current_user_id = validate_access_token(token, current_app.config["JWT_SECRET"])
            return fn(*args, **kwargs)

        return wrapper

    return decorator


def refresh_token_required():
    """Put the raw refresh token from the Bearer header on g.refresh_token."""
    def decorator(fn):
        @wraps(fn)
        def wrapper(*args, **kwargs):
            g.refresh_token = extract_bearer_token(request.headers)
            return fn(*args, **kwargs)

        return wrapper

    return decorator


def api_key_required(config_key: str = "POLKA_KEY"):
    """
    Require `Authorization: ApiKey <key>` matching app.config[config_key].
    Used for the Polka webhook only.
    """
    def decorator(fn):
        @wraps(fn)
        def wrapper(*args, **kwargs):
            key = extract_api_key(request.headers)
            if not api_key_matches(key, current_app.config.get(config_key, "")):
                raise AuthError(AuthFailure.BAD_API_KEY)
            return fn(*args, **kwargs)

        return wrapper

    return decorator
