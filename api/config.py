"""
Environment-aware configuration.
Values come from the process environment, with .env loaded first.
"""
import os
from dotenv import load_dotenv
from datetime import timedelta

load_dotenv()  # Read .env if present


def _int_env(name: str, default: int | None = None) -> int | None:
    raw = os.getenv(name)
    if raw in (None, ""):
        return default
    return int(raw)


# "dev" unlocks POST /admin/reset and tolerates a missing JWT_SECRET
DEV_PLATFORM = "dev"


class BaseConfig:
    SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key")
    DEBUG = False
    TESTING = False
    # CORS: in dev we usually allow '*', in prod supply a comma-separated list in env
    CORS_ORIGINS = os.getenv("CORS_ORIGINS", "*")
    APP_ENV = os.getenv("APP_ENV", "dev")
    PLATFORM = os.getenv("PLATFORM", "")
    DB_URL = os.getenv("DB_URL", "")
    FILESERVER_ROOT = os.getenv("FILESERVER_ROOT", os.path.join(os.getcwd(), "public"))
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

    # jwt configurations
    JWT_SECRET = os.getenv("JWT_SECRET", "")
    ACCESS_TOKEN_TTL = timedelta(seconds=_int_env("ACCESS_TOKEN_TTL_SECONDS", 3600))
    REFRESH_TOKEN_TTL = timedelta(days=_int_env("REFRESH_TOKEN_TTL_DAYS", 60))

    # Polka webhook key
    POLKA_KEY = os.getenv("POLKA_KEY", "")

    # argon2 work factor; None keeps the library defaults
    PASSWORD_HASH_TIME_COST = _int_env("PASSWORD_HASH_TIME_COST")
    PASSWORD_HASH_MEMORY_COST = _int_env("PASSWORD_HASH_MEMORY_COST")
    PASSWORD_HASH_PARALLELISM = _int_env("PASSWORD_HASH_PARALLELISM")


class DevelopmentConfig(BaseConfig):
    DEBUG = True
    # In dev, propagate exceptions so our error handler has full context
    PROPAGATE_EXCEPTIONS = True


class TestingConfig(BaseConfig):
    TESTING = True
    PLATFORM = DEV_PLATFORM
    # cheap hashes keep the suite fast
    PASSWORD_HASH_TIME_COST = 1
    PASSWORD_HASH_MEMORY_COST = 1024
    PASSWORD_HASH_PARALLELISM = 1


class ProductionConfig(BaseConfig):
    DEBUG = False


def get_config(name: str | None):
    """
    Select config class.
    - If name is provided, choose by name.
    - Else choose based on APP_ENV (dev/test/prod).
    """
    env = (name or os.getenv("APP_ENV", "dev")).lower()
    if env in ["prod", "production"]:
        return ProductionConfig
    if env in ["test", "testing"]:
        return TestingConfig
    return DevelopmentConfig
