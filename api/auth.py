"""
Authentication blueprint:
- POST /login    -> access token (JWT) + refresh token
- POST /refresh  -> new access token from a refresh token
- POST /revoke   -> revoke a refresh token

The implementation:
- Uses argon2 for password hashing (via utils.security)
- Issues short-lived HS256 access tokens; the TTL requested at login is capped at one hour
- Stores opaque refresh tokens in the DB (RefreshToken model) so they can be revoked
- Refreshing does not rotate the refresh token
"""
from __future__ import annotations

import logging

from flask import Blueprint, request, jsonify, g, current_app

from models import storage
from models.schemas.user import UserLoginSchema, UserOutSchema
from utils.decorators import refresh_token_required
from utils.exceptions import AuthError, AuthFailure
from utils.security import (
    access_token_ttl,
    hash_password,
    issue_access_token,
    password_needs_rehash,
    verify_dummy_password,
    verify_password,
)
from utils.sessions import create_refresh_token, resolve_refresh_token, revoke_refresh_token

logger = logging.getLogger(__name__)

bp = Blueprint("auth", __name__)

user_login_schema = UserLoginSchema()
user_out_schema = UserOutSchema()


@bp.post("/login")
def login():
    """
    Login: return the user with an access token and a refresh token
    ---
    tags:
      - Auth
    consumes:
      - application/json
    parameters:
      -  in: body
         name: body
         schema:
           type: object
           required: [email, password]
           properties:
             email: { type: string }
             password: { type: string }
             expires_in_seconds: { type: integer, description: "capped at 3600" }
    responses:
      200:
        description: OK (returns tokens)
      400:
        description: Validation error
      401:
        description: Unauthorized
    """
    payload = request.get_json(silent=True) or {}
    data = user_login_schema.load(payload)
    password = data["password"]

    user = storage.get_user_by_email(data["email"])
    if user is None:
        # same cost and same answer as a wrong password
        verify_dummy_password(password)
        raise AuthError(AuthFailure.BAD_CREDENTIALS)
    if not verify_password(password, user.hashed_password):
        raise AuthError(AuthFailure.BAD_CREDENTIALS)

    if password_needs_rehash(user.hashed_password):
        user.hashed_password = hash_password(password)
        user.save()

    ttl = access_token_ttl(data.get("expires_in_seconds"), current_app.config["ACCESS_TOKEN_TTL"])
    token = issue_access_token(user.id, current_app.config["JWT_SECRET"], ttl)
    refresh_token, _ = create_refresh_token(
        storage, user.id, ttl=current_app.config["REFRESH_TOKEN_TTL"]
    )

    body = user_out_schema.dump(user)
    body["token"] = token
    body["refresh_token"] = refresh_token
    return jsonify(body), 200


@bp.post("/refresh")
@refresh_token_required()
def refresh():
    """
    Exchange a refresh token for a new access token
    ---
    tags:
      - Auth
    security:
      - Bearer: []
    responses:
      200:
        description: "{ token: <access token> }"
      401:
        description: Unknown, revoked or expired refresh token
    """
    user_id = resolve_refresh_token(storage, g.refresh_token)
    token = issue_access_token(
        user_id, current_app.config["JWT_SECRET"], current_app.config["ACCESS_TOKEN_TTL"]
    )
    return jsonify({"token": token}), 200


@bp.post("/revoke")
@refresh_token_required()
def revoke():
    """
    Revoke a refresh token
    ---
    tags:
      - Auth
    security:
      - Bearer: []
    responses:
      204:
        description: Revoked
      401:
        description: Unknown or already revoked refresh token
    """
    revoke_refresh_token(storage, g.refresh_token)
    return ("", 204)
