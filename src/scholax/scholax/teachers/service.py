from __future__ import annotations

import logging
from typing import Optional, Sequence

from ..common.validators import is_student_email, normalize_email, normalize_section, require_non_empty
from ..core.constants import DEFAULT_SECTION_MAX_LENGTH
from ..core.enums import Role
from ..core.exceptions import ConflictError, NotFoundError, RoleConflictError, ValidationError
from ..students.repository import StudentRepository
from ..users.repository import AccountRepository
from .model import SectionSummary, TeacherAssignment, TeacherProfile
from .repository import TeacherRepository

logger = logging.getLogger(__name__)


class TeacherService:
    """Use case: manage teachers and their section/subject assignments."""

    def __init__(
        self,
        teachers: TeacherRepository,
        accounts: AccountRepository,
        students: StudentRepository,
        *,
        email_domain: str,
        section_max_length: int = DEFAULT_SECTION_MAX_LENGTH,
    ):
        self._teachers = teachers
        self._accounts = accounts
        self._students = students
        self._domain = email_domain.lower()
        self._section_max_length = int(section_max_length)

    def add_teacher(self, *, name: str, email: str) -> TeacherProfile:
        name = require_non_empty(name, "Name")
        email = normalize_email(email)
        if is_student_email(email, self._domain):
            raise ValidationError(f"Teacher email cannot use the student domain @{self._domain}")

        account = self._accounts.get_by_email(email)
        created_account = account is None
        if account is None:
            account_id = self._accounts.create(email=email, role=Role.TEACHER)
        elif account.role != Role.TEACHER:
            raise RoleConflictError(f"Email {email} already exists with role '{account.role.value}'")
        else:
            if self._teachers.get_by_account_id(account.account_id):
                raise ConflictError(f"Teacher with email {email} already exists")
            account_id = account.account_id

        try:
            teacher_id = self._teachers.create(account_id=account_id, full_name=name, email=email)
        except ConflictError:
            if created_account:
                self._accounts.delete_orphans([account_id])
            raise
        logger.info("Teacher %s added", email)
        return TeacherProfile(teacher_id=teacher_id, account_id=account_id, full_name=name, email=email)

    def list_teachers(self) -> Sequence[TeacherProfile]:
        return self._teachers.list_all()

    def assign(self, *, teacher_id: int, batch: str, section: str, subject: str) -> TeacherAssignment:
        batch = require_non_empty(batch, "Batch")
        section = normalize_section(section, max_length=self._section_max_length)
        subject = require_non_empty(subject, "Subject")

        if self._teachers.get_by_id(int(teacher_id)) is None:
            raise NotFoundError("Teacher not found")

        assignment_id = self._teachers.add_assignment(
            teacher_id=int(teacher_id), batch=batch, section=section, subject=subject
        )
        logger.info("Teacher %s assigned to %s/%s %s", teacher_id, batch, section, subject)
        return TeacherAssignment(
            assignment_id=assignment_id,
            teacher_id=int(teacher_id),
            batch=batch,
            section=section,
            subject=subject,
        )

    def profile_for_account(self, account_id: int) -> Optional[TeacherProfile]:
        return self._teachers.get_by_account_id(account_id)

    def require_profile(self, account_id: int) -> TeacherProfile:
        teacher = self._teachers.get_by_account_id(account_id)
        if teacher is None:
            raise NotFoundError("Teacher profile not found")
        return teacher

    def sections_for_account(self, account_id: int) -> Sequence[SectionSummary]:
        teacher = self.require_profile(account_id)
        assignments = self._teachers.list_assignments(teacher.teacher_id)
        counts = self._students.count_in_sections([(a.batch, a.section) for a in assignments])
        return [
            SectionSummary(
                batch=a.batch,
                section=a.section,
                subject=a.subject,
                student_count=counts.get((a.batch, a.section), 0),
            )
            for a in assignments
        ]

    def count(self) -> int:
        return self._teachers.count()
