import os

from .config import *  # noqa: F401,F403

SECRET_KEY = "test-secret"

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "scholax_test"),
}

DEBUG = False
TESTING = True

EMAIL_TEST_MODE = True
STUDENT_EMAIL_DOMAIN = "iiitranchi.ac.in"

AUTO_INIT_DB = False
AUTO_SEED_DB = False
