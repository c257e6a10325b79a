from __future__ import annotations

from flask import Flask, g, request

from ..common.http import ok
from ..container import Container
from ..core.enums import Role
from ..core.exceptions import NotFoundError
from ..students.model import StudentProfile
from ..users.access import role_required
from .schemas import MarkAttendanceRequest, SectionAttendanceQuery


def register(app: Flask, container: Container) -> None:
    teacher_required = role_required(container.access_policy, Role.TEACHER)
    student_required = role_required(container.access_policy, Role.STUDENT)

    def current_student() -> StudentProfile:
        student = container.student_service.profile_for_account(g.identity.account_id)
        if student is None:
            raise NotFoundError("Student record not found")
        return student

    @app.route("/api/teacher/attendance", methods=["POST"], endpoint="mark_attendance")
    @teacher_required
    def mark_attendance():
        body = MarkAttendanceRequest.from_payload(request.get_json(silent=True))
        result = container.attendance_service.mark(teacher_account_id=g.identity.account_id, request=body)
        return ok(
            message=f"Attendance marked: {result.success} successful, {result.failed} failed",
            results=result.to_dict(),
        )

    @app.route("/api/teacher/attendance", methods=["GET"], endpoint="section_attendance")
    @teacher_required
    def section_attendance():
        query = SectionAttendanceQuery.from_args(request.args)
        records = container.attendance_service.fetch_for_section(
            teacher_account_id=g.identity.account_id, query=query
        )
        return ok(attendance=[{"id": r.attendance_id, "studentId": r.student_id, "status": r.status.value} for r in records])

    @app.route("/api/student/attendance", methods=["GET"], endpoint="student_attendance")
    @student_required
    def student_attendance():
        student = current_student()
        return ok(attendance=container.attendance_aggregator.summarize(student.student_id))

    @app.route("/api/student/attendance/details", methods=["GET"], endpoint="student_attendance_details")
    @student_required
    def student_attendance_details():
        student = current_student()
        records = container.attendance_aggregator.detail(
            student.student_id,
            subject=request.args.get("subject"),
            year_month=request.args.get("month"),
        )
        return ok(records=records)
