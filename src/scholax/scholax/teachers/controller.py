from __future__ import annotations

from flask import Flask, g, request

from ..common.http import ok
from ..container import Container
from ..core.enums import Role
from ..users.access import role_required
from .schemas import AddTeacherRequest, AssignTeacherRequest


def register(app: Flask, container: Container) -> None:
    admin_required = role_required(container.access_policy, Role.ADMIN)
    teacher_required = role_required(container.access_policy, Role.TEACHER)

    @app.route("/api/admin/teachers", methods=["GET"], endpoint="admin_teachers")
    @admin_required
    def admin_teachers():
        teachers = container.teacher_service.list_teachers()
        return ok(teachers=[t.to_dict() for t in teachers])

    @app.route("/api/admin/teachers", methods=["POST"], endpoint="add_teacher")
    @admin_required
    def add_teacher():
        body = AddTeacherRequest.from_payload(request.get_json(silent=True))
        teacher = container.teacher_service.add_teacher(name=body.name, email=body.email)
        return ok(
            message="Teacher added successfully",
            teacher={"id": teacher.teacher_id, "name": teacher.full_name, "email": teacher.email},
        )

    @app.route("/api/admin/teachers/assign", methods=["POST"], endpoint="assign_teacher")
    @admin_required
    def assign_teacher():
        body = AssignTeacherRequest.from_payload(request.get_json(silent=True))
        assignment = container.teacher_service.assign(
            teacher_id=body.teacher_id,
            batch=body.batch,
            section=body.section,
            subject=body.subject,
        )
        return ok(
            message="Teacher assigned successfully",
            assignment={"teacherId": assignment.teacher_id, **assignment.to_dict()},
        )

    @app.route("/api/teacher/sections", methods=["GET"], endpoint="teacher_sections")
    @teacher_required
    def teacher_sections():
        sections = container.teacher_service.sections_for_account(g.identity.account_id)
        return ok(sections=[s.to_dict() for s in sections])

    @app.route("/api/teacher/students", methods=["GET"], endpoint="teacher_students")
    @teacher_required
    def teacher_students():
        students = container.student_service.roster(
            batch=request.args.get("batch", ""),
            section=request.args.get("section", ""),
        )
        return ok(
            students=[
                {"id": s.student_id, "name": s.full_name, "registrationNo": s.registration_no, "branch": s.branch}
                for s in students
            ]
        )
