from __future__ import annotations

from dataclasses import dataclass, field
from types import ModuleType
from typing import Optional

from .constants import (
    DEFAULT_IMPORT_MAX_ROWS,
    DEFAULT_IMPORT_MAX_UPLOAD_BYTES,
    DEFAULT_OTP_TTL_MINUTES,
    DEFAULT_SECTION_MAX_LENGTH,
    DEFAULT_SESSION_DAYS,
    DEFAULT_STUDENT_EMAIL_DOMAIN,
    DEV_SECRET_KEYS,
)
from .exceptions import ConfigurationError


@dataclass(frozen=True)
class Settings:
    """Application settings resolved from the selected ``config.*`` module."""

    secret_key: str
    db_config: dict = field(default_factory=dict)
    debug: bool = False
    student_email_domain: str = DEFAULT_STUDENT_EMAIL_DOMAIN
    otp_ttl_minutes: int = DEFAULT_OTP_TTL_MINUTES
    session_days: int = DEFAULT_SESSION_DAYS
    section_max_length: int = DEFAULT_SECTION_MAX_LENGTH
    import_max_rows: int = DEFAULT_IMPORT_MAX_ROWS
    import_max_upload_bytes: int = DEFAULT_IMPORT_MAX_UPLOAD_BYTES
    smtp_host: str = "smtp.gmail.com"
    smtp_port: int = 587
    smtp_user: str = ""
    smtp_password: str = ""
    email_sender_name: str = "ScholaX"
    email_test_mode: bool = False
    admin_email: Optional[str] = None
    auto_init_db: bool = False
    auto_seed_db: bool = False
    log_file: Optional[str] = None
    log_level: str = "INFO"

    @classmethod
    def from_module(cls, settings: ModuleType) -> "Settings":
        def get(name: str, default=None):
            return getattr(settings, name, default)

        debug = bool(get("DEBUG", False))
        secret_key = str(get("SECRET_KEY") or "").strip()
        if not secret_key:
            raise ConfigurationError("SECRET_KEY is not set")
        if secret_key in DEV_SECRET_KEYS and not debug:
            raise ConfigurationError("SECRET_KEY is a development placeholder; set a real secret when DEBUG is off")

        return cls(
            secret_key=secret_key,
            db_config=dict(get("DB_CONFIG", {}) or {}),
            debug=debug,
            student_email_domain=str(get("STUDENT_EMAIL_DOMAIN", DEFAULT_STUDENT_EMAIL_DOMAIN)).lower(),
            otp_ttl_minutes=int(get("OTP_TTL_MINUTES", DEFAULT_OTP_TTL_MINUTES)),
            session_days=int(get("SESSION_DAYS", DEFAULT_SESSION_DAYS)),
            section_max_length=int(get("SECTION_MAX_LENGTH", DEFAULT_SECTION_MAX_LENGTH)),
            import_max_rows=int(get("IMPORT_MAX_ROWS", DEFAULT_IMPORT_MAX_ROWS)),
            import_max_upload_bytes=int(get("IMPORT_MAX_UPLOAD_BYTES", DEFAULT_IMPORT_MAX_UPLOAD_BYTES)),
            smtp_host=str(get("SMTP_HOST", "smtp.gmail.com")),
            smtp_port=int(get("SMTP_PORT", 587)),
            smtp_user=str(get("SMTP_USER", "")),
            smtp_password=str(get("SMTP_PASSWORD", "")),
            email_sender_name=str(get("EMAIL_SENDER_NAME", "ScholaX")),
            email_test_mode=bool(get("EMAIL_TEST_MODE", False)),
            admin_email=get("ADMIN_EMAIL") or None,
            auto_init_db=bool(get("AUTO_INIT_DB", False)),
            auto_seed_db=bool(get("AUTO_SEED_DB", False)),
            log_file=get("LOG_FILE") or None,
            log_level=str(get("LOG_LEVEL", "INFO")),
        )
