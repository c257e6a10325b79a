from __future__ import annotations

from flask import Flask, g, request

from ..common.http import ok
from ..container import Container
from ..core.constants import SESSION_COOKIE_NAME
from .access import role_required
from .schemas import OTPRequest, VerifyOTPRequest


def register(app: Flask, container: Container) -> None:
    login_required = role_required(container.access_policy)

    @app.route("/api/auth/request-otp", methods=["POST"], endpoint="request_otp")
    def request_otp():
        body = OTPRequest.from_payload(request.get_json(silent=True))
        container.auth_service.request_otp(body.email)
        return ok(message="OTP sent successfully to your email")

    @app.route("/api/auth/verify-otp", methods=["POST"], endpoint="verify_otp")
    def verify_otp():
        body = VerifyOTPRequest.from_payload(request.get_json(silent=True))
        login = container.auth_service.verify_otp(body.email, body.otp)

        response, status = ok(message="Login successful", user=login.user)
        response.set_cookie(
            SESSION_COOKIE_NAME,
            login.token,
            max_age=int(container.session_tokens.lifetime.total_seconds()),
            httponly=True,
            secure=not container.settings.debug,
            samesite="Lax",
            path="/",
        )
        return response, status

    @app.route("/api/auth/me", methods=["GET"], endpoint="me")
    @login_required
    def me():
        return ok(user=container.auth_service.me(g.identity))

    @app.route("/api/auth/logout", methods=["POST"], endpoint="logout")
    def logout():
        response, status = ok(message="Logged out successfully")
        response.delete_cookie(SESSION_COOKIE_NAME, path="/")
        return response, status

    @app.route("/api/health", methods=["GET"], endpoint="health")
    def health():
        return ok(
            message="Database connection successful",
            stats={
                "users": container.accounts_repo.count(),
                "students": container.students_repo.stats()["totalStudents"],
                "teachers": container.teachers_repo.count(),
                "attendance": container.attendance_repo.count(),
            },
        )
