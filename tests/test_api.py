from __future__ import annotations

import io
from dataclasses import replace

import pytest

from scholax.core.enums import Role
from scholax.main import create_app
from scholax.users.model import Identity


@pytest.fixture
def client(container):
    app = create_app(container=container)
    app.config["TESTING"] = True
    return app.test_client()


def _bearer(container, account) -> dict:
    token = container.session_tokens.issue(Identity(account.account_id, account.email, account.role))
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def admin_headers(container, accounts):
    return _bearer(container, accounts.add("admin@college.edu", Role.ADMIN))


@pytest.fixture
def teacher(container):
    return container.teacher_service.add_teacher(name="Dr. Rao", email="rao@faculty.org")


@pytest.fixture
def teacher_headers(container, accounts, teacher):
    return _bearer(container, accounts.get_by_id(teacher.account_id))


def test_admin_route_without_token_is_401(client):
    resp = client.get("/api/admin/students")

    assert resp.status_code == 401
    assert resp.get_json() == {"success": False, "error": "unauthorized", "message": "Unauthorized. Please login."}


def test_admin_route_with_teacher_token_is_403(client, teacher_headers):
    resp = client.get("/api/admin/stats", headers=teacher_headers)

    assert resp.status_code == 403
    assert resp.get_json()["error"] == "forbidden"


def test_tampered_token_is_401(client):
    resp = client.get("/api/auth/me", headers={"Authorization": "Bearer abc.def.ghi"})

    assert resp.status_code == 401


def test_otp_login_sets_cookie_and_me_works(client, accounts, email_sender):
    accounts.add("admin@college.edu", Role.ADMIN)

    assert client.post("/api/auth/request-otp", json={"email": "admin@college.edu"}).status_code == 200
    code = email_sender.sent[-1][1]
    resp = client.post("/api/auth/verify-otp", json={"email": "admin@college.edu", "otp": code})

    assert resp.status_code == 200
    assert resp.get_json()["user"]["role"] == "admin"
    assert client.get_cookie("token") is not None

    me = client.get("/api/auth/me")
    assert me.status_code == 200
    assert me.get_json()["user"]["name"] == "Administrator"

    client.post("/api/auth/logout")
    assert client.get_cookie("token") is None
    assert client.get("/api/auth/me").status_code == 401


def test_request_otp_errors_use_envelope(client):
    bad = client.post("/api/auth/request-otp", json={"email": "nope"})
    unknown = client.post("/api/auth/request-otp", json={"email": "ghost@college.edu"})

    assert bad.status_code == 400 and bad.get_json()["error"] == "validation_error"
    assert unknown.status_code == 404 and unknown.get_json()["error"] == "not_found"


def test_verify_otp_mismatch_is_400(client, accounts, email_sender):
    accounts.add("admin@college.edu", Role.ADMIN)
    client.post("/api/auth/request-otp", json={"email": "admin@college.edu"})
    code = email_sender.sent[-1][1]
    wrong = "100000" if code != "100000" else "100001"

    resp = client.post("/api/auth/verify-otp", json={"email": "admin@college.edu", "otp": wrong})

    assert resp.status_code == 400
    assert resp.get_json()["error"] == "otp_mismatch"


def test_admin_adds_and_lists_students(client, admin_headers):
    payload = {"name": "John Doe", "registrationNo": "2024001", "branch": "cse", "batch": "2024", "section": "a"}

    added = client.post("/api/admin/students/add", json=payload, headers=admin_headers)
    dup = client.post("/api/admin/students/add", json=payload, headers=admin_headers)
    listed = client.get("/api/admin/students?branch=CSE", headers=admin_headers)

    assert added.status_code == 200
    assert added.get_json()["student"]["email"] == "john.2024001@iiitranchi.ac.in"
    assert dup.status_code == 409 and dup.get_json()["error"] == "duplicate_registration"
    assert listed.get_json()["total"] == 1


def test_admin_imports_csv(client, admin_headers):
    content = b"Name,Registration No.,Branch\nJohn Doe,2024001,CSE\nJane Smith,2024002,ECE\n,2024003,CSE\n"

    resp = client.post(
        "/api/admin/students/import",
        data={"file": (io.BytesIO(content), "students.csv"), "batch": "2024", "section": "A"},
        content_type="multipart/form-data",
        headers=admin_headers,
    )

    body = resp.get_json()
    assert resp.status_code == 200
    assert body["results"]["createdCount"] == 2
    assert body["results"]["failedCount"] == 1
    assert body["results"]["errors"] == ["Row 4: Missing required data"]


def test_import_with_missing_columns_is_schema_error(client, admin_headers):
    resp = client.post(
        "/api/admin/students/import",
        data={"file": (io.BytesIO(b"Name,Branch\nJohn Doe,CSE\n"), "students.csv"), "batch": "2024", "section": "A"},
        content_type="multipart/form-data",
        headers=admin_headers,
    )

    assert resp.status_code == 400
    assert resp.get_json()["error"] == "schema_error"


def test_admin_stats_include_teachers(client, admin_headers, teacher):
    resp = client.get("/api/admin/stats", headers=admin_headers)

    stats = resp.get_json()["stats"]
    assert stats["totalTeachers"] == 1
    assert stats["totalStudents"] == 0


def test_teacher_marks_and_student_reads_attendance(client, container, accounts, teacher, teacher_headers):
    container.teacher_service.assign(teacher_id=teacher.teacher_id, batch="2024", section="A", subject="Maths")
    student = container.student_service.add_student(
        name="John Doe", registration_no="2024001", branch="CSE", batch="2024", section="A"
    )

    for day, status in [("2026-02-02", "present"), ("2026-02-03", "absent")]:
        resp = client.post(
            "/api/teacher/attendance",
            json={
                "date": day,
                "batch": "2024",
                "section": "A",
                "subject": "Maths",
                "attendanceRecords": [{"studentId": student.student_id, "status": status}],
            },
            headers=teacher_headers,
        )
        assert resp.get_json()["results"] == {"success": 1, "failed": 0, "errors": []}

    student_headers = _bearer(container, accounts.get_by_id(student.account_id))
    summary = client.get("/api/student/attendance", headers=student_headers).get_json()["attendance"]
    details = client.get("/api/student/attendance/details?month=2026-02", headers=student_headers).get_json()

    assert summary["overall"] == {"present": 1, "total": 2, "percentage": 50.0}
    assert [r["date"] for r in details["records"]] == ["2026-02-03", "2026-02-02"]
    assert client.get("/api/student/attendance", headers=teacher_headers).status_code == 403


def test_teacher_sections_and_roster(client, container, teacher, teacher_headers):
    container.teacher_service.assign(teacher_id=teacher.teacher_id, batch="2024", section="A", subject="Maths")
    container.student_service.add_student(
        name="John Doe", registration_no="2024001", branch="CSE", batch="2024", section="A"
    )

    sections = client.get("/api/teacher/sections", headers=teacher_headers).get_json()["sections"]
    roster = client.get("/api/teacher/students?batch=2024&section=a", headers=teacher_headers).get_json()["students"]

    assert sections == [{"batch": "2024", "section": "A", "subject": "Maths", "studentCount": 1}]
    assert [s["registrationNo"] for s in roster] == ["2024001"]


def test_admin_manages_teachers(client, admin_headers):
    created = client.post("/api/admin/teachers", json={"name": "Dr. Rao", "email": "rao@faculty.org"}, headers=admin_headers)
    teacher_id = created.get_json()["teacher"]["id"]

    assigned = client.post(
        "/api/admin/teachers/assign",
        json={"teacherId": teacher_id, "batch": "2024", "section": "b", "subject": "Physics"},
        headers=admin_headers,
    )
    listed = client.get("/api/admin/teachers", headers=admin_headers).get_json()["teachers"]

    assert assigned.status_code == 200
    assert assigned.get_json()["assignment"]["section"] == "B"
    assert listed[0]["assignments"][0]["subject"] == "Physics"


def test_health_reports_counts(client, accounts):
    accounts.add("admin@college.edu", Role.ADMIN)

    resp = client.get("/api/health")

    assert resp.status_code == 200
    assert resp.get_json()["stats"]["users"] == 1


def test_oversized_upload_is_rejected_with_413(container, admin_headers, students):
    app = create_app(container=container, settings=replace(container.settings, import_max_upload_bytes=1024))
    client = app.test_client()
    content = b"Name,Registration No.,Branch\n" + b"John Doe,2024001,CSE\n" * 200

    resp = client.post(
        "/api/admin/students/import",
        data={"file": (io.BytesIO(content), "students.csv"), "batch": "2024", "section": "A"},
        content_type="multipart/form-data",
        headers=admin_headers,
    )

    assert resp.status_code == 413
    assert resp.get_json()["success"] is False
    assert students.by_id == {}


def test_stale_cookie_falls_back_to_bearer_header(client, admin_headers):
    client.set_cookie("token", "stale.session.token")

    resp = client.get("/api/auth/me", headers=admin_headers)

    assert resp.status_code == 200
    assert resp.get_json()["user"]["role"] == "admin"


def test_stale_cookie_alone_is_401(client):
    client.set_cookie("token", "stale.session.token")

    assert client.get("/api/auth/me").status_code == 401
