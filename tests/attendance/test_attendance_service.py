from __future__ import annotations

from datetime import date

import pytest

from scholax.attendance.schemas import MarkAttendanceRequest, SectionAttendanceQuery
from scholax.core.enums import AttendanceStatus
from scholax.core.exceptions import AuthorizationError, NotFoundError, ValidationError


@pytest.fixture
def setup(container):
    teacher = container.teacher_service.add_teacher(name="Dr. Rao", email="rao@faculty.org")
    container.teacher_service.assign(teacher_id=teacher.teacher_id, batch="2024", section="A", subject="Maths")
    john = container.student_service.add_student(
        name="John Doe", registration_no="2024001", branch="CSE", batch="2024", section="A"
    )
    jane = container.student_service.add_student(
        name="Jane Smith", registration_no="2024002", branch="ECE", batch="2024", section="B"
    )
    return teacher, john, jane


def _request(entries, *, subject="Maths", section="a", day="2026-02-02"):
    return MarkAttendanceRequest.from_payload(
        {"date": day, "batch": "2024", "section": section, "subject": subject, "attendanceRecords": entries}
    )


def test_remarking_same_day_overwrites_status(container, attendance, setup):
    teacher, john, _ = setup
    svc = container.attendance_service

    svc.mark(teacher_account_id=teacher.account_id, request=_request([{"studentId": john.student_id, "status": "present"}]))
    svc.mark(teacher_account_id=teacher.account_id, request=_request([{"studentId": john.student_id, "status": "absent"}]))

    records = attendance.list_for_student(john.student_id)
    assert len(records) == 1
    assert records[0].status == AttendanceStatus.ABSENT
    assert records[0].attendance_date == date(2026, 2, 2)


def test_per_record_failures_are_aggregated(container, attendance, setup):
    teacher, john, jane = setup

    result = container.attendance_service.mark(
        teacher_account_id=teacher.account_id,
        request=_request(
            [
                {"studentId": john.student_id, "status": "present"},
                {"studentId": john.student_id},
                {"studentId": john.student_id, "status": "late"},
                {"studentId": jane.student_id, "status": "present"},
            ]
        ),
    )

    assert result.to_dict()["success"] == 1
    assert result.failed == 3
    assert result.errors[0] == "Missing student ID or status"
    assert result.errors[1] == f"Invalid status for student {john.student_id}"
    assert attendance.count() == 1


def test_marking_without_assignment_is_forbidden(container, setup):
    teacher, john, _ = setup

    with pytest.raises(AuthorizationError):
        container.attendance_service.mark(
            teacher_account_id=teacher.account_id,
            request=_request([{"studentId": john.student_id, "status": "present"}], subject="Physics"),
        )


def test_marking_by_account_without_teacher_profile_is_not_found(container, setup):
    _, john, _ = setup

    with pytest.raises(NotFoundError):
        container.attendance_service.mark(
            teacher_account_id=999,
            request=_request([{"studentId": john.student_id, "status": "present"}]),
        )


def test_fetch_for_section_returns_marked_day(container, setup):
    teacher, john, _ = setup
    container.attendance_service.mark(
        teacher_account_id=teacher.account_id, request=_request([{"studentId": john.student_id, "status": "present"}])
    )

    records = container.attendance_service.fetch_for_section(
        teacher_account_id=teacher.account_id,
        query=SectionAttendanceQuery.from_args({"batch": "2024", "section": "a", "subject": "Maths", "date": "2026-02-02"}),
    )

    assert [(r.student_id, r.status) for r in records] == [(john.student_id, AttendanceStatus.PRESENT)]


@pytest.mark.parametrize(
    "payload",
    [
        {"date": "2026-02-02", "batch": "2024", "section": "A", "subject": "Maths", "attendanceRecords": []},
        {"date": "2026-02-02", "batch": "2024", "section": "A", "attendanceRecords": [{"studentId": 1, "status": "present"}]},
        {"date": "02/02/2026", "batch": "2024", "section": "A", "subject": "Maths", "attendanceRecords": [{"studentId": 1, "status": "present"}]},
    ],
)
def test_mark_request_validation(payload):
    with pytest.raises(ValidationError):
        MarkAttendanceRequest.from_payload(payload)
