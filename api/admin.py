"""
Admin blueprint:
- GET  /admin/metrics  -> HTML page with the file-server hit count
- POST /admin/reset    -> dev only: delete every user and zero the counter
"""
from __future__ import annotations

import logging

from flask import Blueprint, current_app

from models import storage
from api.metrics import ensure_resettable, hit_counter

logger = logging.getLogger(__name__)

bp = Blueprint("admin", __name__, url_prefix="/admin")

METRICS_HTML = """<html>
  <body>
    <h1>Welcome, Chirpy Admin</h1>
    <p>Chirpy has been visited {hits} times!</p>
  </body>
</html>
"""


@bp.get("/metrics")
def metrics():
    """
    File-server hit count
    ---
    tags:
      - Admin
    produces:
      - text/html
    responses:
      200:
        description: HTML page
    """
    html = METRICS_HTML.format(hits=hit_counter().value)
    return html, 200, {"Content-Type": "text/html; charset=utf-8"}


@bp.post("/reset")
def reset():
    """
    Delete all users and reset the hit counter (PLATFORM=dev only)
    ---
    tags:
      - Admin
    produces:
      - text/plain
    responses:
      200:
        description: Reset done
      403:
        description: Not running on the dev platform
    """
    platform = current_app.config.get("PLATFORM", "")
    # refuses outside dev before anything is deleted
    ensure_resettable(platform)
    deleted = storage.delete_all_users()
    hit_counter().reset(platform)
    logger.warning("Admin reset: deleted %d users", deleted)
    return (
        "Hits counter reset to 0 and deleted all users",
        200,
        {"Content-Type": "text/plain; charset=utf-8"},
    )
