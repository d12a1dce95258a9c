"""SQLAlchemy models for the Registration Store."""

from __future__ import annotations

from datetime import datetime  # noqa: TC003 - used at runtime for SQLAlchemy
from typing import Any

from sqlalchemy import (
    Boolean,
    DateTime,
    ForeignKey,
    Integer,
    String,
    UniqueConstraint,
    false,
    func,
)
from sqlalchemy.orm import (
    DeclarativeBase,
    Mapped,
    mapped_column,
    relationship,
)

EMAIL_LENGTH = 255


class Base(DeclarativeBase):
    """Base class for all models."""

    pass


class Teacher(Base):
    """Teacher model - identified by a unique email."""

    __tablename__ = "teachers"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    email: Mapped[str] = mapped_column(String(EMAIL_LENGTH), nullable=False, unique=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime, nullable=False, server_default=func.now()
    )

    # Relationships
    registrations: Mapped[list[Registration]] = relationship(
        "Registration",
        back_populates="teacher",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    def __init__(self, email: str, **kwargs: Any) -> None:
        super().__init__(**kwargs)
        self.email = email

    def __repr__(self) -> str:
        return f"<Teacher(id={self.id!r}, email={self.email!r})>"


class Student(Base):
    """Student model - identified by a unique email, optionally suspended."""

    __tablename__ = "students"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    email: Mapped[str] = mapped_column(String(EMAIL_LENGTH), nullable=False, unique=True)
    suspended: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=False, server_default=false()
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime, nullable=False, server_default=func.now()
    )

    # Relationships
    registrations: Mapped[list[Registration]] = relationship(
        "Registration",
        back_populates="student",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    def __init__(self, email: str, suspended: bool = False, **kwargs: Any) -> None:
        super().__init__(**kwargs)
        self.email = email
        self.suspended = suspended

    def __repr__(self) -> str:
        return (
            f"<Student(id={self.id!r}, email={self.email!r}, suspended={self.suspended!r})>"
        )


class Registration(Base):
    """Registration model - a unique edge between one teacher and one student."""

    __tablename__ = "registrations"
    __table_args__ = (UniqueConstraint("teacher_id", "student_id", name="unique_registration"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    teacher_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("teachers.id", ondelete="CASCADE"), nullable=False
    )
    student_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("students.id", ondelete="CASCADE"), nullable=False
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime, nullable=False, server_default=func.now()
    )

    # Relationships
    teacher: Mapped[Teacher] = relationship("Teacher", back_populates="registrations")
    student: Mapped[Student] = relationship("Student", back_populates="registrations")

    def __init__(self, teacher_id: int, student_id: int, **kwargs: Any) -> None:
        super().__init__(**kwargs)
        self.teacher_id = teacher_id
        self.student_id = student_id

    def __repr__(self) -> str:
        return (
            f"<Registration(id={self.id!r}, teacher_id={self.teacher_id!r}, "
            f"student_id={self.student_id!r})>"
        )
