"""RegistrationStore - Main API for teacher/student registration operations."""

from __future__ import annotations

import threading
from collections.abc import Iterable, Sequence
from contextlib import AbstractContextManager, nullcontext
from typing import TYPE_CHECKING, Any

from sqlalchemy import distinct, func, insert, select, update
from sqlalchemy.dialects.postgresql import insert as postgresql_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.exc import SQLAlchemyError

from teachreg.logging import get_logger, truncate_output
from teachreg.registry.database import Database
from teachreg.registry.emails import extract_mentions, validate_email
from teachreg.registry.exceptions import (
    RegistryError,
    StorageError,
    StudentNotFoundError,
    TeacherNotFoundError,
    ValidationError,
)
from teachreg.registry.models import Base, Registration, Student, Teacher

if TYPE_CHECKING:
    from sqlalchemy.orm import Session

logger = get_logger("registry.store")


class RegistrationStore:
    """Main API for the Registration Store.

    Owns all persistent state (teachers, students, registrations) and exposes
    the register, common-students, suspend and notification-recipient
    operations. Each call acquires its own session and releases it before
    returning.
    """

    def __init__(self, database_url: str = "teachreg.db") -> None:
        """Initialize the store.

        Creates database and tables if they don't exist.

        Args:
            database_url: SQLAlchemy URL, SQLite file path, or ":memory:"
        """
        self._db = Database(database_url)
        self._db.create_tables()
        # An in-memory database is one shared connection, hence one transaction
        self._guard: AbstractContextManager[object] = (
            threading.Lock() if self._db.is_memory else nullcontext()
        )

    def close(self) -> None:
        """Close the database connection."""
        self._db.close()

    # --- Internal helpers ---

    def _insert_ignore(self, session: Session, model: type[Base], **values: Any) -> bool:
        """Insert a row unless it collides with a unique constraint.

        Returns:
            True if a row was inserted, False if it already existed.
        """
        dialect = session.get_bind().dialect.name
        if dialect == "sqlite":
            stmt = sqlite_insert(model).values(**values).on_conflict_do_nothing()
        elif dialect == "postgresql":
            stmt = postgresql_insert(model).values(**values).on_conflict_do_nothing()
        elif dialect in ("mysql", "mariadb"):
            stmt = insert(model).values(**values).prefix_with("IGNORE")
        else:
            raise StorageError(f"Unsupported database dialect: {dialect}")
        result = session.execute(stmt)
        return bool(result.rowcount)  # type: ignore[attr-defined]

    def _get_or_create_teacher(self, session: Session, email: str) -> int:
        if self._insert_ignore(session, Teacher, email=email):
            logger.info("Created teacher %s", email)
        return session.execute(select(Teacher.id).where(Teacher.email == email)).scalar_one()

    def _get_or_create_student(self, session: Session, email: str) -> tuple[int, bool]:
        """Get or create a student, returning its id and suspended flag."""
        if self._insert_ignore(session, Student, email=email):
            logger.info("Created student %s", email)
        row = session.execute(
            select(Student.id, Student.suspended).where(Student.email == email)
        ).one()
        return row.id, bool(row.suspended)

    def _find_teacher_id(self, session: Session, email: str) -> int:
        teacher_id = session.execute(
            select(Teacher.id).where(Teacher.email == email)
        ).scalar_one_or_none()
        if teacher_id is None:
            raise TeacherNotFoundError(f"Teacher '{email}' not found")
        return teacher_id

    # --- Lookups ---

    def get_teacher(self, email: str) -> Teacher:
        """Get teacher by email.

        Raises:
            ValidationError: If the email is malformed
            TeacherNotFoundError: If teacher doesn't exist
        """
        validate_email(email, "teacher")
        with self._guard:
            session = self._db.get_session()
            try:
                teacher = session.execute(
                    select(Teacher).where(Teacher.email == email)
                ).scalar_one_or_none()
                if teacher is None:
                    raise TeacherNotFoundError(f"Teacher '{email}' not found")
                return teacher
            finally:
                session.close()

    def get_student(self, email: str) -> Student:
        """Get student by email.

        Raises:
            ValidationError: If the email is malformed
            StudentNotFoundError: If student doesn't exist
        """
        validate_email(email, "student")
        with self._guard:
            session = self._db.get_session()
            try:
                student = session.execute(
                    select(Student).where(Student.email == email)
                ).scalar_one_or_none()
                if student is None:
                    raise StudentNotFoundError(f"Student '{email}' not found")
                return student
            finally:
                session.close()

    # --- Operations ---

    def register(self, teacher_email: str, student_emails: Sequence[str]) -> None:
        """Register students under a teacher in a single transaction.

        Teacher and students are created on first reference. Registering a
        pair that already exists is a no-op. If any step fails, nothing from
        this call is kept.

        Args:
            teacher_email: The teacher's email
            student_emails: Non-empty sequence of student emails, processed in order

        Raises:
            ValidationError: If any email is malformed or no students are given
            StorageError: If the database fails; the batch is rolled back
        """
        validate_email(teacher_email, "teacher")
        if isinstance(student_emails, str) or not isinstance(student_emails, Sequence):
            raise ValidationError("Students must be a list of emails")
        if not student_emails:
            raise ValidationError("At least one student must be specified")
        for email in student_emails:
            validate_email(email, "student")

        with self._guard:
            session = self._db.get_session()
            try:
                teacher_id = self._get_or_create_teacher(session, teacher_email)
                for email in student_emails:
                    student_id, _ = self._get_or_create_student(session, email)
                    self._insert_ignore(
                        session, Registration, teacher_id=teacher_id, student_id=student_id
                    )
                session.commit()
                logger.info(
                    "Registered %d student(s) to teacher %s", len(student_emails), teacher_email
                )
            except RegistryError:
                session.rollback()
                raise
            except SQLAlchemyError as e:
                session.rollback()
                logger.exception("Registration for teacher %s rolled back", teacher_email)
                raise StorageError(f"Failed to register students to '{teacher_email}'") from e
            finally:
                session.close()

    def common_students(self, teacher_emails: Iterable[str]) -> list[str]:
        """Get the students registered to every one of the given teachers.

        Args:
            teacher_emails: Non-empty collection of teacher emails; duplicates are ignored

        Returns:
            Emails of the common students, sorted

        Raises:
            ValidationError: If no teacher is given or any email is malformed
            TeacherNotFoundError: If any teacher doesn't exist
            StorageError: If the database fails
        """
        if isinstance(teacher_emails, str):
            teacher_emails = [teacher_emails]
        emails = list(dict.fromkeys(teacher_emails))
        if not emails:
            raise ValidationError("At least one teacher must be specified")
        for email in emails:
            validate_email(email, "teacher")

        with self._guard:
            session = self._db.get_session()
            try:
                found = set(
                    session.execute(
                        select(Teacher.email).where(Teacher.email.in_(emails))
                    ).scalars()
                )
                missing = [email for email in emails if email not in found]
                if missing:
                    raise TeacherNotFoundError(f"Teacher(s) not found: {', '.join(missing)}")

                stmt = (
                    select(Student.email)
                    .join(Registration, Registration.student_id == Student.id)
                    .join(Teacher, Teacher.id == Registration.teacher_id)
                    .where(Teacher.email.in_(emails))
                    .group_by(Student.id, Student.email)
                    .having(func.count(distinct(Teacher.id)) == len(emails))
                    .order_by(Student.email)
                )
                students = list(session.execute(stmt).scalars())
                logger.debug("Found %d common student(s) for %s", len(students), emails)
                return students
            except SQLAlchemyError as e:
                logger.exception("Common students query failed")
                raise StorageError("Failed to query common students") from e
            finally:
                session.close()

    def suspend(self, student_email: str) -> None:
        """Suspend a student. Suspending twice is not an error.

        Raises:
            ValidationError: If the email is malformed
            StudentNotFoundError: If student doesn't exist
            StorageError: If the database fails
        """
        validate_email(student_email, "student")

        with self._guard:
            session = self._db.get_session()
            try:
                student_id = session.execute(
                    select(Student.id).where(Student.email == student_email)
                ).scalar_one_or_none()
                if student_id is None:
                    raise StudentNotFoundError(f"Student '{student_email}' not found")

                session.execute(
                    update(Student).where(Student.id == student_id).values(suspended=True)
                )
                session.commit()
                logger.info("Suspended student %s", student_email)
            except RegistryError:
                session.rollback()
                raise
            except SQLAlchemyError as e:
                session.rollback()
                logger.exception("Suspending student %s failed", student_email)
                raise StorageError(f"Failed to suspend '{student_email}'") from e
            finally:
                session.close()

    def retrieve_for_notifications(self, teacher_email: str, notification: str) -> list[str]:
        """Get the recipients of a notification sent by a teacher.

        Recipients are the teacher's registered students that are not
        suspended, followed by the students @mentioned in the notification
        that are not suspended. Mentioned students that don't exist yet are
        created (and are therefore never suspended). Each created student is
        committed on its own.

        Args:
            teacher_email: The sending teacher's email
            notification: Free text, possibly containing "@student@domain.tld" mentions

        Returns:
            Recipient emails without duplicates, registered students first

        Raises:
            ValidationError: If the teacher email is malformed
            TeacherNotFoundError: If teacher doesn't exist
            StorageError: If the database fails
        """
        validate_email(teacher_email, "teacher")
        if not isinstance(notification, str):
            raise ValidationError("Notification must be a string")

        with self._guard:
            session = self._db.get_session()
            try:
                teacher_id = self._find_teacher_id(session, teacher_email)

                registered = list(
                    session.execute(
                        select(Student.email)
                        .join(Registration, Registration.student_id == Student.id)
                        .where(
                            Registration.teacher_id == teacher_id,
                            Student.suspended.is_(False),
                        )
                        .order_by(Registration.id)
                    ).scalars()
                )

                mentions = extract_mentions(notification)
                logger.debug(
                    "Notification from %s mentions %s: %s",
                    teacher_email,
                    mentions,
                    truncate_output(notification),
                )

                mentioned: list[str] = []
                for email in mentions:
                    _, suspended = self._get_or_create_student(session, email)
                    session.commit()
                    if not suspended:
                        mentioned.append(email)

                return list(dict.fromkeys([*registered, *mentioned]))
            except RegistryError:
                session.rollback()
                raise
            except SQLAlchemyError as e:
                session.rollback()
                logger.exception("Retrieving recipients for %s failed", teacher_email)
                raise StorageError(f"Failed to retrieve recipients for '{teacher_email}'") from e
            finally:
                session.close()
