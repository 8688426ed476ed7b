from flask import Blueprint, current_app, send_from_directory

from api.metrics import hit_counter

bp = Blueprint("fileserver", __name__, url_prefix="/app")


@bp.before_request
def count_hit():
    hit_counter().increment()


@bp.get("/")
@bp.get("/<path:filename>")
def serve(filename: str = "index.html"):
    """
    Static front-end files
    ---
    tags:
      - App
    responses:
      200:
        description: File contents
      404:
        description: Not found
    """
    return send_from_directory(current_app.config["FILESERVER_ROOT"], filename)
