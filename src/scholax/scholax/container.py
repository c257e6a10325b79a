from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .attendance.aggregator import AttendanceAggregator
from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .attendance.repository import AttendanceRepository
from .attendance.service import AttendanceService
from .core.settings import Settings
from .database.connection import DBConfig, DatabaseConnection
from .notifications.email_sender import ConsoleEmailSender, EmailSender, SMTPEmailSender
from .students.importer import StudentImporter
from .students.mysql_student_repository import MySQLStudentRepository
from .students.repository import StudentRepository
from .students.service import StudentService
from .teachers.mysql_teacher_repository import MySQLTeacherRepository
from .teachers.repository import TeacherRepository
from .teachers.service import TeacherService
from .users.access import AccessPolicy
from .users.mysql_user_repository import MySQLAccountRepository
from .users.repository import AccountRepository
from .users.service import AuthService
from .users.tokens import SessionTokenService


@dataclass(frozen=True)
class Container:
    settings: Settings
    conn: Optional[DatabaseConnection]

    accounts_repo: AccountRepository
    students_repo: StudentRepository
    teachers_repo: TeacherRepository
    attendance_repo: AttendanceRepository

    email_sender: EmailSender
    session_tokens: SessionTokenService
    access_policy: AccessPolicy

    auth_service: AuthService
    student_service: StudentService
    student_importer: StudentImporter
    teacher_service: TeacherService
    attendance_service: AttendanceService
    attendance_aggregator: AttendanceAggregator


def build_email_sender(settings: Settings) -> EmailSender:
    if settings.email_test_mode:
        return ConsoleEmailSender()
    return SMTPEmailSender(
        host=settings.smtp_host,
        port=settings.smtp_port,
        user=settings.smtp_user,
        password=settings.smtp_password,
        sender_name=settings.email_sender_name,
        ttl_minutes=settings.otp_ttl_minutes,
    )


def wire_container(
    *,
    settings: Settings,
    accounts_repo: AccountRepository,
    students_repo: StudentRepository,
    teachers_repo: TeacherRepository,
    attendance_repo: AttendanceRepository,
    email_sender: EmailSender,
    conn: Optional[DatabaseConnection] = None,
) -> Container:
    """Assemble services over the given repositories (MySQL-backed or in-memory)."""
    session_tokens = SessionTokenService(settings.secret_key, session_days=settings.session_days)
    access_policy = AccessPolicy(session_tokens)

    auth_service = AuthService(
        accounts_repo,
        students_repo,
        teachers_repo,
        email_sender=email_sender,
        tokens=session_tokens,
        otp_ttl_minutes=settings.otp_ttl_minutes,
    )
    student_service = StudentService(
        students_repo,
        accounts_repo,
        email_domain=settings.student_email_domain,
        section_max_length=settings.section_max_length,
    )
    student_importer = StudentImporter(
        students_repo,
        accounts_repo,
        email_domain=settings.student_email_domain,
        section_max_length=settings.section_max_length,
        max_rows=settings.import_max_rows,
    )
    teacher_service = TeacherService(
        teachers_repo,
        accounts_repo,
        students_repo,
        email_domain=settings.student_email_domain,
        section_max_length=settings.section_max_length,
    )
    attendance_service = AttendanceService(attendance_repo, teachers_repo, students_repo)
    attendance_aggregator = AttendanceAggregator(attendance_repo)

    return Container(
        settings=settings,
        conn=conn,
        accounts_repo=accounts_repo,
        students_repo=students_repo,
        teachers_repo=teachers_repo,
        attendance_repo=attendance_repo,
        email_sender=email_sender,
        session_tokens=session_tokens,
        access_policy=access_policy,
        auth_service=auth_service,
        student_service=student_service,
        student_importer=student_importer,
        teacher_service=teacher_service,
        attendance_service=attendance_service,
        attendance_aggregator=attendance_aggregator,
    )


def build_container(*, settings: Settings, email_sender: Optional[EmailSender] = None) -> Container:
    conn = DatabaseConnection(DBConfig.from_dict(settings.db_config))

    return wire_container(
        settings=settings,
        conn=conn,
        accounts_repo=MySQLAccountRepository(conn),
        students_repo=MySQLStudentRepository(conn),
        teachers_repo=MySQLTeacherRepository(conn),
        attendance_repo=MySQLAttendanceRepository(conn),
        email_sender=email_sender or build_email_sender(settings),
    )
