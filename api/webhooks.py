from __future__ import annotations

import logging

from flask import Blueprint, request, abort

from models import storage
from models.user import User
from models.schemas.webhook import PolkaWebhookSchema, USER_UPGRADED
from utils.decorators import api_key_required

logger = logging.getLogger(__name__)

bp = Blueprint("webhooks", __name__)

polka_webhook_schema = PolkaWebhookSchema()


@bp.post("/polka/webhooks")
@api_key_required("POLKA_KEY")
def polka_webhook():
    """
    Polka billing events. Only user.upgraded is acted on.
    ---
    tags:
      - Webhooks
    security:
      - ApiKey: []
    consumes:
      - application/json
    parameters:
      - in: body
        name: body
        schema:
          type: object
          properties:
            event: { type: string, example: user.upgraded }
            data:
              type: object
              properties:
                user_id: { type: string }
    responses:
      204:
        description: Event accepted (or ignored)
      400:
        description: Malformed payload
      401:
        description: Missing or wrong API key
      404:
        description: Unknown user
    """
    payload = request.get_json(silent=True) or {}
    event = payload.get("event") if isinstance(payload, dict) else None
    if event != USER_UPGRADED:
        return ("", 204)

    data = polka_webhook_schema.load(payload)
    if not data.get("data"):
        abort(400, description="data.user_id is required")

    user = storage.get(User, str(data["data"]["user_id"]))
    if not user:
        abort(404, description="User not found")

    if not user.is_chirpy_red:
        user.is_chirpy_red = True
        user.save()
        logger.info("User %s upgraded to Chirpy Red", user.id)
    return ("", 204)
