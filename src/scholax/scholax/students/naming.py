"""Institutional email derivation for students.

A student's login email is ``<first name>.<registration no>@<domain>``, all
lowercase, e.g. ``john.2024001@iiitranchi.ac.in``.
"""

from __future__ import annotations

import re


def first_name_token(full_name: str) -> str:
    parts = (full_name or "").split()
    return parts[0].lower() if parts else ""


def derive_student_email(full_name: str, registration_no: str, domain: str) -> str:
    return f"{first_name_token(full_name)}.{registration_no.strip().lower()}@{domain.lower()}"


def student_email_pattern(domain: str) -> "re.Pattern[str]":
    return re.compile(r"^[a-z]+\.[a-z0-9]+@" + re.escape(domain.lower()) + r"$")


def is_valid_student_email(email: str, domain: str) -> bool:
    return student_email_pattern(domain).match(email) is not None
