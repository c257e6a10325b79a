from __future__ import annotations

import pytest

from scholax.core.enums import ImportRowError, Role
from scholax.core.exceptions import SchemaError, ValidationError
import scholax.students.importer as importer_module
from scholax.students.importer import StudentImporter
from scholax.students.tabular import parse_tabular

DOMAIN = "iiitranchi.ac.in"


def _row(name, reg, branch):
    return {"Name": name, "Registration No.": reg, "Branch": branch}


@pytest.fixture
def importer(students, accounts):
    return StudentImporter(students, accounts, email_domain=DOMAIN, max_rows=100)


def test_import_creates_profiles_and_derived_emails(importer, students, accounts):
    rows = [_row("John Doe", "2024001", "CSE"), _row("Jane Smith", "2024002", "ECE")]

    result = importer.import_rows(rows, batch="2024", section="A")

    assert result.created_count == 2
    assert result.failed_count == 0
    assert result.errors == []
    emails = sorted(s.email for s in students.by_id.values())
    assert emails == ["jane.2024002@iiitranchi.ac.in", "john.2024001@iiitranchi.ac.in"]
    assert all(s.section == "A" and s.batch == "2024" for s in students.by_id.values())
    assert {a.role for a in accounts.by_id.values()} == {Role.STUDENT}
    assert accounts.create_many_calls == 1


def test_reimport_reports_duplicate_registration(importer, students):
    rows = [_row("John Doe", "2024001", "CSE")]
    importer.import_rows(rows, batch="2024", section="A")

    result = importer.import_rows(rows, batch="2024", section="A")

    assert result.created_count == 0
    assert result.failed_count == 1
    assert result.failures[0].kind == ImportRowError.DUPLICATE_REGISTRATION
    assert result.errors == ["Row 2: Student 2024001 already exists"]
    assert len(students.by_id) == 1


def test_registration_is_normalized_to_uppercase(importer, students):
    result = importer.import_rows([_row("Asha Rao", "ug2024x1", "cse")], batch="2024", section="b")

    assert result.created_count == 1
    student = next(iter(students.by_id.values()))
    assert student.registration_no == "UG2024X1"
    assert student.branch == "CSE"
    assert student.section == "B"
    assert student.email == "asha.ug2024x1@iiitranchi.ac.in"


def test_missing_data_fails_only_that_row(importer):
    rows = [_row("John Doe", "2024001", "CSE"), _row("  ", "2024002", "ECE"), _row("Ravi Kumar", "2024003", "")]

    result = importer.import_rows(rows, batch="2024", section="A")

    assert result.created_count == 1
    assert result.failed_count == 2
    assert result.errors == ["Row 3: Missing required data", "Row 4: Missing required data"]
    assert {f.kind for f in result.failures} == {ImportRowError.MISSING_DATA}


def test_underivable_email_is_invalid_data(importer):
    result = importer.import_rows([_row("123 Numbers", "2024001", "CSE")], batch="2024", section="A")

    assert result.created_count == 0
    assert result.failures[0].kind == ImportRowError.INVALID_DATA


def test_existing_account_with_other_role_is_role_conflict(importer, accounts, students):
    accounts.add("john.2024001@iiitranchi.ac.in", Role.TEACHER)

    result = importer.import_rows(
        [_row("John Doe", "2024001", "CSE"), _row("Jane Smith", "2024002", "ECE")], batch="2024", section="A"
    )

    assert result.created_count == 1
    assert result.failures[0].kind == ImportRowError.ROLE_CONFLICT
    assert result.errors == ["Row 2: Email john.2024001@iiitranchi.ac.in already exists with role 'teacher'"]
    assert students.get_by_registration_no("2024001") is None


def test_existing_student_account_is_reused(importer, accounts, students):
    existing = accounts.add("john.2024001@iiitranchi.ac.in", Role.STUDENT)

    result = importer.import_rows([_row("John Doe", "2024001", "CSE")], batch="2024", section="A")

    assert result.created_count == 1
    assert accounts.count() == 1
    assert students.get_by_registration_no("2024001").account_id == existing.account_id


def test_repeated_registration_in_file_fails_later_rows(importer, students):
    rows = [_row("John Doe", "2024001", "CSE"), _row("Johnny Doe", "2024001", "CSE")]

    result = importer.import_rows(rows, batch="2024", section="A")

    assert result.created_count == 1
    assert result.failures[0].row_number == 3
    assert result.failures[0].kind == ImportRowError.DUPLICATE_REGISTRATION
    assert len(students.by_id) == 1


def test_concurrent_insert_of_same_registration_fails_row(importer, students):
    students.racing_registrations.add("2024002")

    result = importer.import_rows(
        [_row("John Doe", "2024001", "CSE"), _row("Jane Smith", "2024002", "ECE")], batch="2024", section="A"
    )

    assert result.created_count == 1
    assert result.failed_count == 1
    assert result.failures[0].kind == ImportRowError.DUPLICATE_REGISTRATION
    assert result.failures[0].row_number == 3


def test_missing_columns_raise_schema_error(importer, students):
    with pytest.raises(SchemaError) as exc:
        importer.import_rows([{"Name": "John Doe", "Branch": "CSE"}], batch="2024", section="A")

    assert "Registration No." in str(exc.value)
    assert students.by_id == {}


@pytest.mark.parametrize(
    "batch, section",
    [("", "A"), ("2024", ""), ("2024", "AB")],
)
def test_invalid_target_is_rejected(importer, batch, section):
    with pytest.raises(ValidationError):
        importer.import_rows([_row("John Doe", "2024001", "CSE")], batch=batch, section=section)


def test_too_many_rows_are_rejected_before_processing(students, accounts):
    importer = StudentImporter(students, accounts, email_domain=DOMAIN, max_rows=2)
    rows = [_row(f"Student {c}", f"20240{i}", "CSE") for i, c in enumerate("abc")]

    with pytest.raises(ValidationError):
        importer.import_rows(rows, batch="2024", section="A")

    assert accounts.count() == 0


def test_empty_input_is_rejected(importer):
    with pytest.raises(ValidationError):
        importer.import_rows([], batch="2024", section="A")


def test_import_file_parses_csv(importer, students):
    content = b"Name,Registration No.,Branch\nJohn Doe,2024001,CSE\n\nJane Smith,2024002,ECE\n"

    result = importer.import_file(filename="batch.csv", content=content, batch="2024", section="A")

    assert result.created_count == 2
    assert result.to_dict()["createdCount"] == 2
    assert result.to_dict()["failedCount"] == 0


def test_account_conflict_fails_only_that_row(importer, students, accounts):
    accounts.racing_emails.add("jane.2024002@iiitranchi.ac.in")

    result = importer.import_rows(
        [_row("John Doe", "2024001", "CSE"), _row("Jane Smith", "2024002", "ECE")], batch="2024", section="A"
    )

    assert result.to_dict()["createdCount"] == 1
    assert result.to_dict()["failedCount"] == 1
    assert result.to_dict()["rowErrors"] == [
        {
            "row": 3,
            "kind": "conflict",
            "message": "Row 3: Account jane.2024002@iiitranchi.ac.in could not be created (conflict)",
        }
    ]
    assert [s.registration_no for s in students.by_id.values()] == ["2024001"]


def test_lost_profile_insert_removes_new_account(importer, students, accounts):
    students.racing_registrations.add("2024002")

    importer.import_rows(
        [_row("John Doe", "2024001", "CSE"), _row("Jane Smith", "2024002", "ECE")], batch="2024", section="A"
    )

    assert accounts.get_by_email("jane.2024002@iiitranchi.ac.in") is None
    assert accounts.get_by_email("john.2024001@iiitranchi.ac.in") is not None
    assert len(accounts.deleted_ids) == 1


def test_lost_profile_insert_keeps_existing_account(importer, students, accounts):
    existing = accounts.add("jane.2024002@iiitranchi.ac.in", Role.STUDENT)
    students.racing_registrations.add("2024002")

    result = importer.import_rows([_row("Jane Smith", "2024002", "ECE")], batch="2024", section="A")

    assert result.failed_count == 1
    assert accounts.get_by_id(existing.account_id) is not None
    assert accounts.deleted_ids == []


def test_import_file_stops_reading_past_row_limit(students, accounts, monkeypatch):
    parsed = []

    def counting_parse(filename, content, *, max_rows=None):
        rows = parse_tabular(filename, content, max_rows=max_rows)
        parsed.append(len(rows))
        return rows

    monkeypatch.setattr(importer_module, "parse_tabular", counting_parse)
    lines = ["Name,Registration No.,Branch"] + [f"Student,2024{i:05d},CSE" for i in range(5000)]
    importer = StudentImporter(students, accounts, email_domain=DOMAIN, max_rows=100)

    with pytest.raises(ValidationError, match="Too many rows"):
        importer.import_file(filename="big.csv", content="\n".join(lines).encode(), batch="2024", section="A")

    assert parsed == [101]
    assert accounts.count() == 0
