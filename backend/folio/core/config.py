"""Environment-driven settings classes selected by ``APP_ENV``."""

from __future__ import annotations

import os
from collections.abc import Mapping
from typing import Final

from dotenv import load_dotenv

# development | testing | production
ENV_VAR: Final[str] = "APP_ENV"

PLACEHOLDER_JWT_SECRET: Final[str] = "CHANGE_ME_JWT_SECRET_AT_LEAST_32_BYTES"

# .env is optional
load_dotenv()


_TRUTHY = frozenset({"1", "true", "yes", "y", "on"})


def env_bool(name: str, default: bool = False) -> bool:
    """``True`` for 1/true/yes/y/on (any case), ``default`` when unset."""
    raw = os.environ.get(name)
    return default if raw is None else raw.strip().lower() in _TRUTHY


def env_optional_bool(name: str) -> bool | None:
    """Parse a tri-state flag: unset or ``"auto"`` yields ``None``."""
    val = os.getenv(name)
    if val is None or val.strip().lower() in {"", "auto"}:
        return None
    return env_bool(name)


def env_int(name: str, default: int) -> int:
    """Parse an integer from an environment variable, falling back to ``default``."""
    val = os.getenv(name)
    if val is None or not val.strip():
        return default
    return int(val)


def env_list(name: str, default: tuple[str, ...]) -> tuple[str, ...]:
    """Parse a comma-separated environment variable into a tuple of strings."""
    val = os.getenv(name)
    if val is None:
        return default
    return tuple(item.strip() for item in val.split(",") if item.strip())


class BaseConfig:
    """Settings shared by every environment, read from the process environment.

    Attributes
    ----------
    API_BASE_PREFIX: str
        Root path for registering API blueprints.
    SECRET_KEY: str
        Flask secret used for session signing.
    JWT_SECRET_KEY: str
        HMAC key used by the credential codec to sign access and refresh
        tokens. Must be overridden in production.
    JWT_ALGORITHM: str
        Symmetric signing algorithm (``HS256`` by default).
    REQUIRE_STRONG_SECRETS: bool
        Refuse to start while ``JWT_SECRET_KEY`` is missing or the placeholder.
    ACCESS_TOKEN_EXPIRES_SECONDS: int
        Access token lifetime, also used as the access cookie ``Max-Age``.
    REFRESH_TOKEN_EXPIRES_SECONDS: int
        Refresh token lifetime, also used as the refresh cookie ``Max-Age``.
    COOKIE_SECURE: bool | None
        Forces the cookie ``Secure`` flag on or off; ``None`` follows the
        request scheme.
    COOKIE_SAMESITE: str
        ``SameSite`` attribute applied to every cookie written by the API.
    COOKIE_DOMAIN: str | None
        Optional cookie domain.
    AUTH_PROTECTED_PREFIXES: tuple[str, ...]
        Path prefixes on which the authentication middleware inspects
        credentials.
    AUTH_PUBLIC_PATHS: tuple[str, ...]
        Exact paths skipped by the middleware even inside protected prefixes.
    AUTH_LOGIN_RATE_LIMIT: str
        Flask-Limiter expression applied to the login endpoint.
    SQLALCHEMY_DATABASE_URI: str
        Database URL (``DATABASE_URL``).
    LOG_LEVEL: str
        Root logging verbosity (``INFO`` by default).
    CORS_ORIGINS: str
        Comma-separated list of allowed origins for CORS.
    """

    API_BASE_PREFIX = "/api"

    # Secrets / security
    SECRET_KEY = os.getenv("SECRET_KEY", "CHANGE_ME")
    JWT_SECRET_KEY = os.getenv("JWT_SECRET_KEY", PLACEHOLDER_JWT_SECRET)
    JWT_ALGORITHM = os.getenv("JWT_ALGORITHM", "HS256")
    REQUIRE_STRONG_SECRETS = False
    ACCESS_TOKEN_EXPIRES_SECONDS = env_int("ACCESS_TOKEN_EXPIRES_SECONDS", 60 * 60)
    REFRESH_TOKEN_EXPIRES_SECONDS = env_int("REFRESH_TOKEN_EXPIRES_SECONDS", 60 * 60 * 24 * 7)

    # Cookies
    COOKIE_SECURE = env_optional_bool("COOKIE_SECURE")
    COOKIE_SAMESITE = os.getenv("COOKIE_SAMESITE", "Lax")
    COOKIE_DOMAIN = os.getenv("COOKIE_DOMAIN") or None

    # Authentication surface
    AUTH_PROTECTED_PREFIXES = env_list("AUTH_PROTECTED_PREFIXES", ("/api/",))
    AUTH_PUBLIC_PATHS = env_list(
        "AUTH_PUBLIC_PATHS",
        (
            "/api/v1/health",
            "/api/v1/users/signup",
            "/api/v1/users/login",
            "/api/v1/users/refresh",
            "/api/v1/users/check-email",
            "/api/v1/users/check-login-id",
        ),
    )

    # Rate limiting
    AUTH_LOGIN_RATE_LIMIT = os.getenv("AUTH_LOGIN_RATE_LIMIT", "5 per minute")
    RATELIMIT_ENABLED = env_bool("RATELIMIT_ENABLED", True)
    RATELIMIT_STORAGE_URI = os.getenv("RATELIMIT_STORAGE_URI", "memory://")

    # DB
    SQLALCHEMY_DATABASE_URI = os.getenv("DATABASE_URL", "sqlite:///./dev.db")
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    SQLALCHEMY_ECHO = env_bool("SQLALCHEMY_ECHO", False)

    # Flask & JSON
    JSON_SORT_KEYS = False
    PROPAGATE_EXCEPTIONS = False
    USE_PROXYFIX = env_bool("USE_PROXYFIX", True)

    # Logging & CORS
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
    CORS_ORIGINS = os.getenv("CORS_ORIGINS", "http://localhost:3000")

    # Flask built-ins
    DEBUG = False
    TESTING = False


class DevelopmentConfig(BaseConfig):
    """Local development: debug on unless ``FLASK_DEBUG`` says otherwise."""

    DEBUG = env_bool("FLASK_DEBUG", True)
    SQLALCHEMY_ECHO = env_bool("SQLALCHEMY_ECHO", False)
    CORS_MAX_AGE = 600  # 10 minutes


class TestingConfig(BaseConfig):
    """Test runs: in-memory SQLite (or ``TEST_DATABASE_URL``), no rate limiting.

    Cookies are never marked ``Secure`` so the test client sends them back
    over plain HTTP.
    """

    TESTING = True
    DEBUG = False
    SQLALCHEMY_DATABASE_URI = os.getenv("TEST_DATABASE_URL", "sqlite:///:memory:")
    SQLALCHEMY_ECHO = False
    JWT_SECRET_KEY = "testing-secret-key-with-enough-entropy-0123456789"
    COOKIE_SECURE = False
    RATELIMIT_ENABLED = False
    PROPAGATE_EXCEPTIONS = True


class ProductionConfig(BaseConfig):
    """Production: no debug or SQL echo. The app refuses to start while
    ``JWT_SECRET_KEY`` still holds the placeholder.
    """

    DEBUG = False
    SQLALCHEMY_ECHO = False
    PROPAGATE_EXCEPTIONS = False
    REQUIRE_STRONG_SECRETS = True
    # Secure unless explicitly disabled
    COOKIE_SECURE = env_optional_bool("COOKIE_SECURE") is not False


CONFIG_MAP: Mapping[str, type[BaseConfig]] = {
    "development": DevelopmentConfig,
    "testing": TestingConfig,
    "production": ProductionConfig,
}


def get_config() -> type[BaseConfig]:
    """Config class named by ``APP_ENV``; unknown or unset means development."""
    name = os.environ.get(ENV_VAR, "development").strip().lower()
    return CONFIG_MAP.get(name, DevelopmentConfig)
