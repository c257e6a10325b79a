from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Mapping, Optional, Sequence

from ..common.validators import normalize_section, require_non_empty
from ..core.constants import DEFAULT_IMPORT_MAX_ROWS, DEFAULT_SECTION_MAX_LENGTH, IMPORT_REQUIRED_COLUMNS
from ..core.enums import ImportRowError, Role
from ..core.exceptions import SchemaError, ValidationError
from ..users.repository import AccountRepository
from .model import NewStudentProfile
from .naming import derive_student_email, is_valid_student_email
from .repository import StudentRepository
from .tabular import parse_tabular

logger = logging.getLogger(__name__)

# Spreadsheet row 1 is the header, so data row i (0-based) is row i + 2.
HEADER_OFFSET = 2


@dataclass(frozen=True)
class RowFailure:
    row_number: int
    kind: ImportRowError
    message: str

    def to_dict(self) -> dict:
        return {"row": self.row_number, "kind": self.kind.value, "message": self.message}


@dataclass
class ImportResult:
    total_rows: int = 0
    created_count: int = 0
    failures: list[RowFailure] = field(default_factory=list)

    @property
    def failed_count(self) -> int:
        return self.total_rows - self.created_count

    @property
    def errors(self) -> list[str]:
        return [f.message for f in sorted(self.failures, key=lambda f: f.row_number)]

    def to_dict(self) -> dict:
        return {
            "createdCount": self.created_count,
            "failedCount": self.failed_count,
            "errors": self.errors,
            "rowErrors": [f.to_dict() for f in sorted(self.failures, key=lambda f: f.row_number)],
        }


@dataclass
class _Candidate:
    row_number: int
    name: str
    registration_no: str
    branch: str
    email: str
    account_id: Optional[int] = None
    new_account: bool = False


class StudentImporter:
    """Bulk student import: validate rows, reconcile with the store, bulk create.

    Store round-trips are fixed regardless of row count: one lookup for
    registration numbers, one for emails, one batch of account inserts and one
    batch of profile inserts. Accounts created for rows whose profile insert
    then fails are deleted in one more statement. Row-level problems are collected into the
    ``ImportResult``; only schema/precondition errors and store outages raise.
    """

    def __init__(
        self,
        students: StudentRepository,
        accounts: AccountRepository,
        *,
        email_domain: str,
        section_max_length: int = DEFAULT_SECTION_MAX_LENGTH,
        max_rows: int = DEFAULT_IMPORT_MAX_ROWS,
    ):
        self._students = students
        self._accounts = accounts
        self._domain = email_domain.lower()
        self._section_max_length = int(section_max_length)
        self._max_rows = int(max_rows)

    def import_file(self, *, filename: str, content: bytes, batch: str, section: str) -> ImportResult:
        batch, section = self._check_target(batch, section)
        rows = parse_tabular(filename, content, max_rows=self._max_rows)
        return self.import_rows(rows, batch=batch, section=section)

    def _check_target(self, batch: str, section: str) -> tuple[str, str]:
        batch = require_non_empty(batch, "Batch")
        section = normalize_section(section, max_length=self._section_max_length)
        return batch, section

    def import_rows(self, rows: Sequence[Mapping[str, str]], *, batch: str, section: str) -> ImportResult:
        batch, section = self._check_target(batch, section)

        if not rows:
            raise ValidationError("The uploaded file has no data rows")
        if len(rows) > self._max_rows:
            raise ValidationError(f"Too many rows: {len(rows)} (maximum {self._max_rows} per import)")

        missing = [col for col in IMPORT_REQUIRED_COLUMNS if col not in rows[0]]
        if missing:
            raise SchemaError(f"Missing required columns: {', '.join(missing)}")

        result = ImportResult(total_rows=len(rows))

        def fail(row_number: int, kind: ImportRowError, reason: str) -> None:
            result.failures.append(RowFailure(row_number, kind, f"Row {row_number}: {reason}"))

        candidates = self._validate_rows(rows, fail)
        if not candidates:
            logger.info("Student import %s/%s: no valid rows out of %d", batch, section, len(rows))
            return result

        pending = self._reconcile(candidates, fail)
        ready = self._create_accounts(pending, fail)

        outcomes = self._students.create_many(
            [
                NewStudentProfile(
                    account_id=int(c.account_id),
                    full_name=c.name,
                    registration_no=c.registration_no,
                    branch=c.branch,
                    batch=batch,
                    section=section,
                    email=c.email,
                )
                for c in ready
            ]
        )
        by_reg = {o.key: o for o in outcomes}
        orphaned: list[int] = []
        for c in ready:
            outcome = by_reg.get(c.registration_no)
            if outcome is not None and outcome.ok:
                result.created_count += 1
                continue
            if c.new_account:
                orphaned.append(int(c.account_id))
            if outcome is not None and "registration" in (outcome.conflict or ""):
                fail(c.row_number, ImportRowError.DUPLICATE_REGISTRATION, f"Student {c.registration_no} already exists")
            else:
                fail(c.row_number, ImportRowError.CONFLICT, f"Student {c.registration_no} could not be saved (conflict)")

        if orphaned:
            self._accounts.delete_orphans(orphaned)

        logger.info(
            "Student import %s/%s: %d created, %d failed",
            batch,
            section,
            result.created_count,
            result.failed_count,
        )
        return result

    def _validate_rows(self, rows: Sequence[Mapping[str, str]], fail) -> list[_Candidate]:
        candidates: list[_Candidate] = []
        for i, row in enumerate(rows):
            row_number = i + HEADER_OFFSET
            name = str(row.get("Name") or "").strip()
            registration_no = str(row.get("Registration No.") or "").strip().upper()
            branch = str(row.get("Branch") or "").strip().upper()

            if not name or not registration_no or not branch:
                fail(row_number, ImportRowError.MISSING_DATA, "Missing required data")
                continue

            email = derive_student_email(name, registration_no, self._domain)
            if not is_valid_student_email(email, self._domain):
                fail(
                    row_number,
                    ImportRowError.INVALID_DATA,
                    f"Cannot derive a valid student email from name '{name}' and registration number {registration_no}",
                )
                continue

            candidates.append(_Candidate(row_number, name, registration_no, branch, email))
        return candidates

    def _reconcile(self, candidates: list[_Candidate], fail) -> list[_Candidate]:
        existing_regs = {
            s.registration_no for s in self._students.list_by_registration_nos([c.registration_no for c in candidates])
        }
        accounts_by_email = {a.email: a for a in self._accounts.list_by_emails([c.email for c in candidates])}

        seen: set[str] = set()
        pending: list[_Candidate] = []
        for c in candidates:
            if c.registration_no in existing_regs:
                fail(c.row_number, ImportRowError.DUPLICATE_REGISTRATION, f"Student {c.registration_no} already exists")
                continue
            if c.registration_no in seen:
                fail(
                    c.row_number,
                    ImportRowError.DUPLICATE_REGISTRATION,
                    f"Registration number {c.registration_no} appears more than once in the file",
                )
                continue
            seen.add(c.registration_no)

            account = accounts_by_email.get(c.email)
            if account is not None:
                if account.role != Role.STUDENT:
                    fail(
                        c.row_number,
                        ImportRowError.ROLE_CONFLICT,
                        f"Email {c.email} already exists with role '{account.role.value}'",
                    )
                    continue
                c.account_id = account.account_id

            pending.append(c)
        return pending

    def _create_accounts(self, pending: list[_Candidate], fail) -> list[_Candidate]:
        to_create = [c.email for c in pending if c.account_id is None]
        outcomes = {o.key: o for o in self._accounts.create_many(emails=to_create, role=Role.STUDENT)} if to_create else {}

        ready: list[_Candidate] = []
        for c in pending:
            if c.account_id is None:
                outcome = outcomes.get(c.email)
                if outcome is None or not outcome.ok:
                    fail(c.row_number, ImportRowError.CONFLICT, f"Account {c.email} could not be created (conflict)")
                    continue
                c.account_id = outcome.created_id
                c.new_account = True
            ready.append(c)
        return ready
