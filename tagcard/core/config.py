"""
Configuration helpers for the TagCard backend.

Routers and services read environment-driven values through get_settings()
instead of touching os.environ directly.
"""

from dataclasses import dataclass
from functools import lru_cache
import os


@dataclass(frozen=True)
class Settings:
    """Typed view of environment variables."""

    app_env: str
    public_base_url: str
    database_url: str
    uploads_dir: str
    log_level: str
    avatar_fetch_timeout: float
    avatar_max_bytes: int
    smtp_host: str
    smtp_port: int
    smtp_user: str
    smtp_password: str
    smtp_from: str
    support_inbox: str
    support_rate_limit: int


@lru_cache
def get_settings() -> Settings:
    """Read the current environment and build a Settings instance."""
    def _int(value: str, default: int = 0) -> int:
        try:
            return int(value)
        except (TypeError, ValueError):
            return default

    def _float(value: str, default: float = 0.0) -> float:
        try:
            return float(value)
        except (TypeError, ValueError):
            return default

    root = os.path.abspath(os.path.join(os.path.dirname(__file__), "..", ".."))
    default_uploads = os.path.join(root, "uploads")
    default_db = "sqlite:///" + os.path.join(root, "tagcard.db")

    return Settings(
        app_env=(os.getenv("APP_ENV") or "dev").lower(),
        public_base_url=os.getenv("PUBLIC_BASE_URL", "https://tagcard.app").rstrip("/"),
        database_url=os.getenv("DATABASE_URL", default_db),
        uploads_dir=os.getenv("UPLOADS_DIR", default_uploads),
        log_level=(os.getenv("LOG_LEVEL") or "INFO").upper(),
        avatar_fetch_timeout=_float(os.getenv("AVATAR_FETCH_TIMEOUT", "5"), 5.0),
        avatar_max_bytes=_int(os.getenv("AVATAR_MAX_BYTES", "5242880"), 5242880),
        smtp_host=os.getenv("SMTP_HOST", ""),
        smtp_port=_int(os.getenv("SMTP_PORT", "465"), 465),
        smtp_user=os.getenv("SMTP_USER", ""),
        smtp_password=os.getenv("SMTP_PASSWORD", ""),
        smtp_from=os.getenv("SMTP_FROM", os.getenv("SMTP_USER", "")),
        support_inbox=os.getenv("SUPPORT_INBOX", ""),
        support_rate_limit=_int(os.getenv("SUPPORT_RATE_LIMIT", "5"), 5),
    )
