"""Application configuration from environment."""
from pathlib import Path

from dotenv import load_dotenv
from pydantic import field_validator
from pydantic_settings import BaseSettings
from functools import lru_cache

# Load .env from project root (parent of visitdesk/) so env vars are available everywhere
_env_path = Path(__file__).resolve().parent.parent / ".env"
load_dotenv(dotenv_path=_env_path)


class Settings(BaseSettings):
    app_name: str = "VisitDesk"
    debug: bool = True

    # "memory" keeps everything in-process; "database" uses SQLAlchemy at database_url
    storage_backend: str = "memory"
    database_url: str = "sqlite:///./visitdesk.db"

    @field_validator("storage_backend")
    @classmethod
    def normalize_backend(cls, v: str) -> str:
        v = (v or "").strip().lower()
        if v not in ("memory", "database"):
            raise ValueError("storage_backend must be 'memory' or 'database'")
        return v

    session_secret_key: str = "visitor-management-secret-key"
    session_algorithm: str = "HS256"
    session_max_age_minutes: int = 24 * 60
    session_cookie_name: str = "visitdesk_session"
    session_cookie_secure: bool = False

    @field_validator("session_secret_key")
    @classmethod
    def strip_session_secret(cls, v: str) -> str:
        return (v or "").strip()

    default_admin_username: str = "admin"
    default_admin_password: str = "admin123"
    seed_sample_visitors: bool = False

    host_email_domain: str = "company.com"

    mailgun_api_key: str = ""
    mailgun_domain: str = ""
    mailgun_base_url: str = "https://api.mailgun.net"
    mailgun_from_email: str = "visitor-system@company.com"
    mailgun_from_name: str = "Front Desk"

    @field_validator("mailgun_api_key", "mailgun_domain", "mailgun_base_url", "mailgun_from_email", "host_email_domain", mode="before")
    @classmethod
    def strip_mail(cls, v: str) -> str:
        return (v or "").strip()

    sendgrid_api_key: str = ""
    sendgrid_from_email: str = "visitor-system@company.com"
    sendgrid_from_name: str = "Front Desk"

    cors_origins: list[str] = ["*"]

    class Config:
        env_file = str(_env_path)
        extra = "ignore"


@lru_cache
def get_settings() -> Settings:
    return Settings()
