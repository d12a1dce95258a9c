"""Unit tests for Registration Store models."""

from teachreg.registry.models import Registration, Student, Teacher


class TestTeacherModel:
    """Tests for Teacher model."""

    def test_teacher_model_email(self) -> None:
        """Teacher is built from its email."""
        teacher = Teacher(email="teacherken@gmail.com")
        assert teacher.email == "teacherken@gmail.com"
        assert teacher.id is None

    def test_teacher_model_repr(self) -> None:
        """repr includes the email."""
        teacher = Teacher(email="teacherken@gmail.com")
        assert "teacherken@gmail.com" in repr(teacher)


class TestStudentModel:
    """Tests for Student model."""

    def test_student_model_defaults(self) -> None:
        """suspended defaults to False."""
        student = Student(email="studentjon@gmail.com")
        assert student.suspended is False

    def test_student_model_suspended(self) -> None:
        """suspended can be set at construction."""
        student = Student(email="studentjon@gmail.com", suspended=True)
        assert student.suspended is True

    def test_student_model_repr(self) -> None:
        """repr includes email and suspension."""
        student = Student(email="studentjon@gmail.com")
        assert "studentjon@gmail.com" in repr(student)
        assert "suspended=False" in repr(student)


class TestRegistrationModel:
    """Tests for Registration model."""

    def test_registration_model_ids(self) -> None:
        """Registration links teacher and student ids."""
        registration = Registration(teacher_id=1, student_id=2)
        assert registration.teacher_id == 1
        assert registration.student_id == 2

    def test_registration_unique_constraint(self) -> None:
        """The (teacher, student) pair is declared unique."""
        constraints = {c.name for c in Registration.__table__.constraints}
        assert "unique_registration" in constraints

    def test_registration_cascades_on_delete(self) -> None:
        """Both foreign keys cascade deletes."""
        foreign_keys = Registration.__table__.foreign_keys
        assert {fk.ondelete for fk in foreign_keys} == {"CASCADE"}
