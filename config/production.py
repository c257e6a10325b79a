import os

from .config import *  # noqa: F401,F403
from .config import _flag

# No fallback: startup fails unless SECRET_KEY is provided.
SECRET_KEY = os.getenv("SECRET_KEY", "")

DEBUG = False

EMAIL_TEST_MODE = False

LOG_FILE = os.getenv("LOG_FILE", "scholax.log")

AUTO_INIT_DB = _flag("AUTO_INIT_DB", "0")
AUTO_SEED_DB = _flag("AUTO_SEED_DB", "0")
