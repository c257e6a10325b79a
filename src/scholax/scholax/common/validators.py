from __future__ import annotations

import re

from ..core.exceptions import ValidationError

EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")


def require_non_empty(value: str, field_name: str) -> str:
    if value is None or not str(value).strip():
        raise ValidationError(f"{field_name} is required")
    return str(value).strip()


def is_valid_email(value: str) -> bool:
    return bool(value) and EMAIL_RE.match(value.strip()) is not None


def normalize_email(value: str) -> str:
    v = require_non_empty(value, "Email").lower()
    if not is_valid_email(v):
        raise ValidationError("Invalid email address")
    return v


def is_student_email(email: str, domain: str) -> bool:
    return email.strip().lower().endswith("@" + domain.lower())


def normalize_section(value: str, *, max_length: int) -> str:
    section = require_non_empty(value, "Section").upper()
    if len(section) > max_length:
        raise ValidationError(f"Section must be at most {max_length} character(s)")
    return section
