from __future__ import annotations

from datetime import datetime

import pytest

from fakes import FakeEmailSender, InMemoryAccounts, InMemoryAttendance, InMemoryStudents, InMemoryTeachers
from scholax.container import wire_container
from scholax.core.settings import Settings

DOMAIN = "iiitranchi.ac.in"


@pytest.fixture
def fixed_now() -> datetime:
    return datetime(2026, 2, 2, 8, 30, 0)


@pytest.fixture
def settings() -> Settings:
    return Settings(secret_key="test-secret", student_email_domain=DOMAIN, debug=True)


@pytest.fixture
def accounts() -> InMemoryAccounts:
    return InMemoryAccounts()


@pytest.fixture
def students() -> InMemoryStudents:
    return InMemoryStudents()


@pytest.fixture
def teachers() -> InMemoryTeachers:
    return InMemoryTeachers()


@pytest.fixture
def attendance() -> InMemoryAttendance:
    return InMemoryAttendance()


@pytest.fixture
def email_sender() -> FakeEmailSender:
    return FakeEmailSender()


@pytest.fixture
def container(settings, accounts, students, teachers, attendance, email_sender):
    return wire_container(
        settings=settings,
        accounts_repo=accounts,
        students_repo=students,
        teachers_repo=teachers,
        attendance_repo=attendance,
        email_sender=email_sender,
    )
