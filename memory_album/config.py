"""Configuration helpers for the memory album service."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any, Type

_BASE_DIR = Path(__file__).resolve().parent.parent


def _coerce_positive_int(
    raw_value: str | None,
    *,
    fallback: int,
    minimum: int = 1,
    maximum: int | None = None,
) -> int:
    """Best-effort conversion of an environment value into a bounded integer."""

    if raw_value is None:
        return fallback

    try:
        parsed = int(raw_value)
    except (TypeError, ValueError):
        return fallback

    if parsed < minimum:
        return minimum

    if maximum is not None and parsed > maximum:
        return maximum

    return parsed


def _resolve_database_uri(
    env_name: str = "DATABASE_URL", *, default: str | None = None
) -> str:
    url = os.getenv(env_name)
    if not url:
        if default is not None:
            return default
        return f"sqlite:///{_BASE_DIR / 'memory_album.db'}"

    if url.startswith("postgres://"):
        url = url.replace("postgres://", "postgresql://", 1)

    scheme, sep, remainder = url.partition("://")
    if scheme == "postgresql" and sep:
        url = f"postgresql+psycopg://{remainder}"

    return url


def _build_engine_options(uri: str) -> dict[str, Any]:
    options: dict[str, Any] = {"pool_pre_ping": True}
    if not uri.startswith("sqlite"):
        options["pool_recycle"] = int(os.getenv("SQLALCHEMY_POOL_RECYCLE", 300))
        options["pool_timeout"] = int(os.getenv("SQLALCHEMY_POOL_TIMEOUT", 30))
    return options


class BaseConfig:
    """Default configuration shared by all environments."""

    SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key")
    SQLALCHEMY_DATABASE_URI = _resolve_database_uri()
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    SQLALCHEMY_ENGINE_OPTIONS = _build_engine_options(SQLALCHEMY_DATABASE_URI)
    MAX_CONTENT_LENGTH = int(os.getenv("MAX_CONTENT_LENGTH", 64 * 1024))  # 64KB
    SESSION_COOKIE_HTTPONLY = True
    SESSION_COOKIE_SAMESITE = "Lax"
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
    CODE_LENGTH = _coerce_positive_int(
        os.getenv("CODE_LENGTH"), fallback=6, minimum=4, maximum=32
    )
    CODE_MAX_ATTEMPTS = _coerce_positive_int(
        os.getenv("CODE_MAX_ATTEMPTS"), fallback=5, maximum=20
    )
    PASSCODE_MIN_LENGTH = _coerce_positive_int(
        os.getenv("PASSCODE_MIN_LENGTH"), fallback=4
    )
    # Any method understood by werkzeug.security.generate_password_hash.
    PASSCODE_HASH_METHOD = os.getenv("PASSCODE_HASH_METHOD", "scrypt")


class DevelopmentConfig(BaseConfig):
    DEBUG = True
    SESSION_COOKIE_SECURE = False
    LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG").upper()


class TestingConfig(BaseConfig):
    TESTING = True
    SESSION_COOKIE_SECURE = False
    SQLALCHEMY_DATABASE_URI = _resolve_database_uri(
        "DATABASE_URL_TEST", default="sqlite:///:memory:"
    )
    SQLALCHEMY_ENGINE_OPTIONS = _build_engine_options(SQLALCHEMY_DATABASE_URI)
    PASSCODE_HASH_METHOD = "pbkdf2:sha256:1000"


class ProductionConfig(BaseConfig):
    SESSION_COOKIE_SECURE = True


_CONFIG_MAP: dict[str | None, Type[BaseConfig]] = {
    None: BaseConfig,
    "default": BaseConfig,
    "development": DevelopmentConfig,
    "testing": TestingConfig,
    "production": ProductionConfig,
}


def get_config(name: str | None) -> Type[BaseConfig]:
    """Pick a configuration object based on the provided name."""
    key = (name or os.getenv("FLASK_ENV") or "default").lower()
    return _CONFIG_MAP.get(key, BaseConfig)
