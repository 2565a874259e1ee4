"""
config.py — Flask configuration classes for the Asset Optimization Linter.
"""
import os
import secrets


def _env_list(name: str, default: str):
    return [item.strip() for item in os.environ.get(name, default).split(",") if item.strip()]


class BaseConfig:
    """Base configuration shared by all environments."""
    SECRET_KEY = os.environ.get("SECRET_KEY") or secrets.token_hex(32)
    MAX_CONTENT_LENGTH = int(os.environ.get("MAX_MANIFEST_MB", 32)) * 1024 * 1024  # bytes

    REPORT_FOLDER = os.environ.get("REPORT_FOLDER", os.path.join(os.path.dirname(__file__), "data", "reports"))
    DATABASE_URL = os.environ.get("DATABASE_URL", f"sqlite:///{os.path.join(os.path.dirname(__file__), 'data', 'app.db')}")

    SQLALCHEMY_DATABASE_URI = DATABASE_URL
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    RATE_LIMIT = os.environ.get("RATE_LIMIT", "60 per minute")

    # Scan thresholds
    MAX_TRIANGLES_PER_MESH = int(os.environ.get("MAX_TRIANGLES_PER_MESH", 100000))
    MAX_TEXTURE_SIZE = int(os.environ.get("MAX_TEXTURE_SIZE", 2048))
    MAX_BLUEPRINT_NODES = int(os.environ.get("MAX_BLUEPRINT_NODES", 200))
    MAX_TEXTURE_SAMPLES_PER_MATERIAL = int(os.environ.get("MAX_TEXTURE_SAMPLES_PER_MATERIAL", 8))

    # Asset paths under these prefixes belong to the engine, not the project
    ENGINE_PATH_PREFIXES = _env_list("ENGINE_PATH_PREFIXES", "/Engine/")

    VERSION = "1.0.0"


class DevelopmentConfig(BaseConfig):
    DEBUG = True
    TESTING = False
    SQLALCHEMY_DATABASE_URI = os.environ.get(
        "DATABASE_URL",
        f"sqlite:///{os.path.join(os.path.dirname(__file__), 'data', 'dev.db')}"
    )


class ProductionConfig(BaseConfig):
    DEBUG = False
    TESTING = False


class TestingConfig(BaseConfig):
    DEBUG = True
    TESTING = True
    SQLALCHEMY_DATABASE_URI = "sqlite:///:memory:"
    REPORT_FOLDER = "/tmp/asset_lint_test_reports"
    RATELIMIT_ENABLED = False


config_map = {
    "development": DevelopmentConfig,
    "production": ProductionConfig,
    "testing": TestingConfig,
    "default": DevelopmentConfig,
}
