"""Settings shared by every environment module.

Environment modules (development/testing/production) star-import this file and
override what differs.
"""

import os


def _flag(name: str, default: str = "0") -> bool:
    return os.getenv(name, default).strip().lower() in {"1", "true", "yes", "on"}


SECRET_KEY = os.getenv("SECRET_KEY", "")

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "scholax_db"),
}

DEBUG = _flag("DEBUG", "0")

# Institution
STUDENT_EMAIL_DOMAIN = os.getenv("STUDENT_EMAIL_DOMAIN", "iiitranchi.ac.in")
SECTION_MAX_LENGTH = int(os.getenv("SECTION_MAX_LENGTH", "1"))
IMPORT_MAX_ROWS = int(os.getenv("IMPORT_MAX_ROWS", "100"))
IMPORT_MAX_UPLOAD_BYTES = int(os.getenv("IMPORT_MAX_UPLOAD_BYTES", str(2 * 1024 * 1024)))

# Auth
OTP_TTL_MINUTES = int(os.getenv("OTP_TTL_MINUTES", os.getenv("OTP_EXPIRY_MINUTES", "10")))
SESSION_DAYS = int(os.getenv("SESSION_DAYS", "7"))
ADMIN_EMAIL = os.getenv("ADMIN_EMAIL", "")

# Outbound email (OTP delivery)
SMTP_HOST = os.getenv("SMTP_HOST", "smtp.gmail.com")
SMTP_PORT = int(os.getenv("SMTP_PORT", "587"))
SMTP_USER = os.getenv("SMTP_USER", os.getenv("EMAIL_USER", ""))
SMTP_PASSWORD = os.getenv("SMTP_PASSWORD", os.getenv("EMAIL_PASS", ""))
EMAIL_SENDER_NAME = os.getenv("EMAIL_SENDER_NAME", "ScholaX")
EMAIL_TEST_MODE = _flag("EMAIL_TEST_MODE", "0")

# Logging
LOG_FILE = os.getenv("LOG_FILE", "")
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

# Dev helpers
AUTO_INIT_DB = _flag("AUTO_INIT_DB", "0")
AUTO_SEED_DB = _flag("AUTO_SEED_DB", "0")
