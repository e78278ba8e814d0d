# backend/dukapos/config.py
from __future__ import annotations
import os


def _env_bool(name: str, default: bool) -> bool:
    raw = os.environ.get(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "on"}


class Config:
    # Optional "SECRET_KEY", with default dev key
    SECRET_KEY = os.environ.get("SECRET_KEY", "dev-secret-key-change-me")

    # SQLite DB stored in backend/instance/dukapos.sqlite3
    SQLALCHEMY_DATABASE_URI = os.environ.get(
        "DATABASE_URL", #optional alternative location
        "sqlite:///dukapos.sqlite3", #default local location
    )
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    # Sessions: opaque token in an http-only cookie, sliding expiry
    SESSION_COOKIE_NAME = os.environ.get("SESSION_COOKIE_NAME", "dukapos_session")
    SESSION_TTL_DAYS = int(os.environ.get("SESSION_TTL_DAYS", "7"))
    SESSION_COOKIE_SECURE = _env_bool("SESSION_COOKIE_SECURE", False)

    BCRYPT_ROUNDS = int(os.environ.get("BCRYPT_ROUNDS", "12"))

    # Well-known platform owner account created on first start
    SUPER_ADMIN_BOOTSTRAP = _env_bool("SUPER_ADMIN_BOOTSTRAP", True)
    SUPER_ADMIN_PHONE = os.environ.get("SUPER_ADMIN_PHONE", "+255700000000")
    SUPER_ADMIN_PASSWORD = os.environ.get("SUPER_ADMIN_PASSWORD", "12345678")
    SUPER_ADMIN_NAME = os.environ.get("SUPER_ADMIN_NAME", "Super Admin")

    CORS_ORIGINS = [
        origin.strip()
        for origin in os.environ.get(
            "CORS_ORIGINS",
            "http://localhost:5173,http://127.0.0.1:5173,http://localhost:4173,http://127.0.0.1:4173",
        ).split(",")
        if origin.strip()
    ]

    LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO")
