import logging

from flask import Flask
from flasgger import Swagger
from flask_cors import CORS

from . import metrics
from .config import DEV_PLATFORM, get_config
from .errors import register_error_handlers
from models import storage
from utils.exceptions import ConfigError
from utils.security import configure_hasher

logger = logging.getLogger(__name__)

# OpenAPI document for flasgger; the UI is served at /apidocs/
SWAGGER_TEMPLATE = {
    "swagger": "2.0",
    "info": {
        "title": "Chirpy API",
        "version": "1.0.0",
        "description": "Users, sessions and chirps for the Chirpy micro-blog.",
    },
    "basePath": "/",
    "securityDefinitions": {
        "Bearer": {
            "type": "apiKey",
            "in": "header",
            "name": "Authorization",
            "description": "Access or refresh token as \"Bearer <token>\".",
        },
        "ApiKey": {
            "type": "apiKey",
            "in": "header",
            "name": "Authorization",
            "description": "Polka webhook key as \"ApiKey <key>\".",
        },
    },
}


def _check_secrets(app: Flask) -> None:
    """An unsigned deployment is refused except on the dev platform."""
    if app.config.get("JWT_SECRET"):
        return
    if app.config.get("PLATFORM") == DEV_PLATFORM:
        logger.critical("JWT_SECRET is not set; logins will fail until it is configured")
        return
    raise ConfigError("JWT_SECRET must be set")


def _register_blueprints(app: Flask) -> None:
    from .health import bp as health_bp
    from .users import bp as users_bp
    from .auth import bp as auth_bp
    from .chirps import bp as chirps_bp
    from .webhooks import bp as webhooks_bp
    from .admin import bp as admin_bp
    from .fileserver import bp as fileserver_bp

    for bp in (health_bp, users_bp, auth_bp, chirps_bp, webhooks_bp):
        app.register_blueprint(bp, url_prefix="/api")
    app.register_blueprint(admin_bp)
    app.register_blueprint(fileserver_bp)


def create_app(config_name: str | None = None) -> Flask:
    """
    Application factory.
    config_name picks the config class (dev/testing/prod); APP_ENV otherwise.
    """
    app = Flask(__name__)
    app.config.from_object(get_config(config_name))
    _check_secrets(app)

    configure_hasher(
        time_cost=app.config.get("PASSWORD_HASH_TIME_COST"),
        memory_cost=app.config.get("PASSWORD_HASH_MEMORY_COST"),
        parallelism=app.config.get("PASSWORD_HASH_PARALLELISM"),
    )

    CORS(app, resources={r"/*": {"origins": app.config.get("CORS_ORIGINS", "*")}})
    Swagger(app, template=SWAGGER_TEMPLATE)
    register_error_handlers(app)
    metrics.init_app(app)
    _register_blueprints(app)

    @app.teardown_appcontext
    def remove_session(exception=None):
        storage.close()

    @app.get("/")
    def index():
        return {
            "name": "Chirpy",
            "app": "/app/",
            "docs": "/apidocs/",
            "health": "/api/healthz",
        }, 200

    return app
