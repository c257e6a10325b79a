import os

from .config import *  # noqa: F401,F403
from .config import _flag

SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key")

DEBUG = True

# Print OTP emails to the log instead of sending them unless SMTP is configured.
EMAIL_TEST_MODE = _flag("EMAIL_TEST_MODE", "1")

# If enabled, app will apply schema.sql on startup (idempotent: CREATE IF NOT EXISTS)
AUTO_INIT_DB = _flag("AUTO_INIT_DB", "1")
# Optional: also seed the admin account on startup
AUTO_SEED_DB = _flag("AUTO_SEED_DB", "0")
