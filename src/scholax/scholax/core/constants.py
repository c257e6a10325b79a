"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

DEFAULT_SESSION_DAYS = 7
DEFAULT_OTP_TTL_MINUTES = 10
DEFAULT_SECTION_MAX_LENGTH = 1
DEFAULT_IMPORT_MAX_ROWS = 100
DEFAULT_IMPORT_MAX_UPLOAD_BYTES = 2 * 1024 * 1024
DEFAULT_STUDENT_EMAIL_DOMAIN = "iiitranchi.ac.in"

# Accepted only while DEBUG is on.
DEV_SECRET_KEYS = frozenset({"dev-secret-key"})

OTP_MIN = 100000
OTP_MAX = 999999

SESSION_COOKIE_NAME = "token"
ADMIN_DISPLAY_NAME = "Administrator"

IMPORT_REQUIRED_COLUMNS = ("Name", "Registration No.", "Branch")
IMPORT_ALLOWED_EXTENSIONS = ("csv", "xlsx")
