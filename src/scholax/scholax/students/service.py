from __future__ import annotations

import logging
from dataclasses import asdict
from typing import Optional, Sequence

from ..common.validators import normalize_section, require_non_empty
from ..core.constants import DEFAULT_SECTION_MAX_LENGTH
from ..core.enums import Role
from ..core.exceptions import ConflictError, DuplicateRegistrationError, RoleConflictError, ValidationError
from ..users.repository import AccountRepository
from .model import NewStudentProfile, StudentFilter, StudentProfile
from .naming import derive_student_email, is_valid_student_email
from .repository import StudentRepository

logger = logging.getLogger(__name__)


class StudentService:
    """Use case: manage students one at a time (admin) and read rosters."""

    def __init__(
        self,
        students: StudentRepository,
        accounts: AccountRepository,
        *,
        email_domain: str,
        section_max_length: int = DEFAULT_SECTION_MAX_LENGTH,
    ):
        self._students = students
        self._accounts = accounts
        self._domain = email_domain.lower()
        self._section_max_length = int(section_max_length)

    def add_student(self, *, name: str, registration_no: str, branch: str, batch: str, section: str) -> StudentProfile:
        name = require_non_empty(name, "Name")
        registration_no = require_non_empty(registration_no, "Registration number").upper()
        branch = require_non_empty(branch, "Branch").upper()
        batch = require_non_empty(batch, "Batch")
        section = normalize_section(section, max_length=self._section_max_length)

        email = derive_student_email(name, registration_no, self._domain)
        if not is_valid_student_email(email, self._domain):
            raise ValidationError(f"Student email must be in format: firstname.regno@{self._domain} (got {email})")

        if self._students.get_by_registration_no(registration_no):
            raise DuplicateRegistrationError(f"Student with registration number {registration_no} already exists")

        account = self._accounts.get_by_email(email)
        created_account = account is None
        if account is None:
            account_id = self._accounts.create(email=email, role=Role.STUDENT)
        elif account.role != Role.STUDENT:
            raise RoleConflictError(f"Email {email} already exists with role '{account.role.value}'")
        else:
            account_id = account.account_id

        profile = NewStudentProfile(
            account_id=account_id,
            full_name=name,
            registration_no=registration_no,
            branch=branch,
            batch=batch,
            section=section,
            email=email,
        )
        try:
            student_id = self._students.create(profile)
        except ConflictError:
            # Another writer won the profile insert after the lookup.
            if created_account:
                self._accounts.delete_orphans([account_id])
            raise
        logger.info("Student %s added (%s/%s)", registration_no, batch, section)

        return StudentProfile(student_id=student_id, **asdict(profile))

    def list_students(
        self,
        *,
        batch: Optional[str] = None,
        section: Optional[str] = None,
        branch: Optional[str] = None,
        search: Optional[str] = None,
    ) -> Sequence[StudentProfile]:
        flt = StudentFilter(
            batch=(batch or "").strip() or None,
            section=(section or "").strip().upper() or None,
            branch=(branch or "").strip().upper() or None,
            search=(search or "").strip() or None,
        )
        return self._students.search(flt)

    def roster(self, *, batch: str, section: str) -> Sequence[StudentProfile]:
        batch = require_non_empty(batch, "Batch")
        section = require_non_empty(section, "Section").upper()
        return self._students.list_in_section(batch=batch, section=section)

    def profile_for_account(self, account_id: int) -> Optional[StudentProfile]:
        return self._students.get_by_account_id(account_id)

    def stats(self) -> dict:
        return self._students.stats()
