from __future__ import annotations

from flask import Flask, request

from ..common.http import ok
from ..container import Container
from ..core.enums import Role
from ..users.access import role_required
from .schemas import AddStudentRequest, ImportUpload


def register(app: Flask, container: Container) -> None:
    admin_required = role_required(container.access_policy, Role.ADMIN)

    @app.route("/api/admin/stats", methods=["GET"], endpoint="admin_stats")
    @admin_required
    def admin_stats():
        stats = dict(container.student_service.stats())
        stats["totalTeachers"] = container.teacher_service.count()
        return ok(stats=stats)

    @app.route("/api/admin/students", methods=["GET"], endpoint="admin_students")
    @admin_required
    def admin_students():
        students = container.student_service.list_students(
            batch=request.args.get("batch"),
            section=request.args.get("section"),
            branch=request.args.get("branch"),
            search=request.args.get("search"),
        )
        return ok(students=[s.to_dict() for s in students], total=len(students))

    @app.route("/api/admin/students/add", methods=["POST"], endpoint="add_student")
    @admin_required
    def add_student():
        body = AddStudentRequest.from_payload(request.get_json(silent=True))
        student = container.student_service.add_student(
            name=body.name,
            registration_no=body.registration_no,
            branch=body.branch,
            batch=body.batch,
            section=body.section,
        )
        return ok(message="Student added successfully", student=student.to_dict())

    @app.route("/api/admin/students/import", methods=["POST"], endpoint="import_students")
    @admin_required
    def import_students():
        upload = ImportUpload.from_request(request.files, request.form)
        result = container.student_importer.import_file(
            filename=upload.filename,
            content=upload.content,
            batch=upload.batch,
            section=upload.section,
        )
        return ok(
            message=f"Import completed: {result.created_count} students added, {result.failed_count} failed",
            results=result.to_dict(),
        )
