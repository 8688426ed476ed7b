from __future__ import annotations

import uuid

from flask import Blueprint, request, jsonify, g, abort

from models import storage
from models.chirp import Chirp
from models.schemas.chirp import ChirpCreateSchema, ChirpOutSchema
from models.user import User
from utils.decorators import jwt_required
from utils.exceptions import AuthError, AuthFailure
from utils.security import ensure_owner

bp = Blueprint("chirps", __name__)

chirp_create_schema = ChirpCreateSchema()
chirp_out_schema = ChirpOutSchema()
chirps_out_schema = ChirpOutSchema(many=True)

PROFANE_WORDS = frozenset({"kerfuffle", "sharbert", "fornax"})
CENSORED = "****"

SORT_DIRECTIONS = ("asc", "desc")


def clean_profanity(text: str) -> str:
    """Replace whole space-separated profane words, ignoring case."""
    words = text.split(" ")
    return " ".join(CENSORED if w.lower() in PROFANE_WORDS else w for w in words)


def parse_uuid(raw: str, what: str) -> str:
    try:
        return str(uuid.UUID(raw))
    except (ValueError, TypeError):
        abort(400, description=f"Invalid {what}")


def parse_sort(default: str = "asc") -> str:
    sort = request.args.get("sort", "").strip().lower() or default
    if sort not in SORT_DIRECTIONS:
        abort(400, description=f"Unsupported sort direction: {sort}. Allowed: asc, desc")
    return sort


@bp.post("/chirps")
@jwt_required()
def create_chirp():
    """
    Post a chirp as the authenticated user
    ---
    tags:
      - Chirps
    security:
      - Bearer: []
    consumes:
      - application/json
    parameters:
      - in: body
        name: body
        required: true
        schema:
          type: object
          required: [body]
          properties:
            body: { type: string, maxLength: 140 }
    responses:
      201:
        description: Created
      400:
        description: Missing, empty or too long body
      401:
        description: Unauthorized
    """
    payload = request.get_json(silent=True) or {}
    # rejected here before anything is written
    data = chirp_create_schema.load(payload)

    # a live token can outlast its user (admin reset)
    if not storage.get(User, g.current_user_id):
        raise AuthError(AuthFailure.UNKNOWN_USER)

    chirp = Chirp(body=clean_profanity(data["body"]), user_id=g.current_user_id)
    storage.new(chirp)
    storage.save()

    return jsonify(chirp_out_schema.dump(chirp)), 201


@bp.get("/chirps")
def list_chirps():
    """
    List chirps ordered by creation time
    ---
    tags:
      - Chirps
    parameters:
      - in: query
        name: author_id
        type: string
        description: "Only chirps by this user id"
      - in: query
        name: sort
        type: string
        enum: [asc, desc]
        default: asc
    responses:
      200:
        description: List of chirps
      400:
        description: Invalid author_id or sort
    """
    sort = parse_sort()
    author_id = request.args.get("author_id")
    if author_id:
        author_id = parse_uuid(author_id, "author_id")

    rows = storage.list_chirps(author_id=author_id or None, newest_first=sort == "desc")
    return jsonify(chirps_out_schema.dump(rows)), 200


@bp.get("/chirps/<chirp_id>")
def get_chirp(chirp_id: str):
    """
    Get a single chirp by id
    ---
    tags:
      - Chirps
    parameters:
      - in: path
        name: chirp_id
        type: string
        required: true
    responses:
      200:
        description: Chirp found
      400:
        description: Invalid chirp id
      404:
        description: Not found
    """
    chirp = storage.get(Chirp, parse_uuid(chirp_id, "chirp ID"))
    if not chirp:
        abort(404)
    return jsonify(chirp_out_schema.dump(chirp)), 200


@bp.delete("/chirps/<chirp_id>")
@jwt_required()
def delete_chirp(chirp_id: str):
    """
    Delete one of your own chirps
    ---
    tags:
      - Chirps
    security:
      - Bearer: []
    parameters:
      - in: path
        name: chirp_id
        type: string
        required: true
    responses:
      204:
        description: Deleted
      400:
        description: Invalid chirp id
      401:
        description: Unauthorized
      403:
        description: Chirp belongs to another user
      404:
        description: Not found
    """
    chirp = storage.get(Chirp, parse_uuid(chirp_id, "chirp ID"))
    if not chirp:
        abort(404)
    # existence is checked before ownership
    ensure_owner(chirp.user_id, g.current_user_id, "You are not allowed to delete this chirp")

    storage.delete(chirp)
    storage.save()
    return ("", 204)
