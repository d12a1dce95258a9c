"""Unit tests for RegistrationStore.register."""

import threading
from unittest.mock import patch

import pytest
from sqlalchemy.exc import OperationalError

from teachreg.registry import (
    Registration,
    RegistrationStore,
    StorageError,
    StudentNotFoundError,
    TeacherNotFoundError,
    ValidationError,
)


@pytest.mark.unit
class TestRegister:
    """Tests for register."""

    def test_register_creates_teacher_and_students(self, store: RegistrationStore) -> None:
        """Unknown teacher and students are created on first reference."""
        store.register("teacherken@gmail.com", ["studentjon@gmail.com", "studenthon@gmail.com"])

        teacher = store.get_teacher("teacherken@gmail.com")
        assert teacher.id is not None
        assert teacher.email == "teacherken@gmail.com"
        assert store.get_student("studentjon@gmail.com").suspended is False
        assert store.get_student("studenthon@gmail.com").suspended is False

    def test_register_returns_none(self, store: RegistrationStore) -> None:
        """Success carries no payload."""
        assert store.register("teacherken@gmail.com", ["studentjon@gmail.com"]) is None

    def test_register_roster_matches(self, store: RegistrationStore) -> None:
        """A single teacher's common students are exactly the registered set."""
        store.register("teacherken@gmail.com", ["studentjon@gmail.com", "studenthon@gmail.com"])

        students = store.common_students(["teacherken@gmail.com"])

        assert set(students) == {"studentjon@gmail.com", "studenthon@gmail.com"}

    def test_register_is_idempotent(self, store: RegistrationStore) -> None:
        """Registering the same pairs again is a no-op."""
        store.register("teacherken@gmail.com", ["studentjon@gmail.com"])
        store.register("teacherken@gmail.com", ["studentjon@gmail.com"])

        assert store.common_students(["teacherken@gmail.com"]) == ["studentjon@gmail.com"]

    def test_register_duplicate_in_same_batch(self, store: RegistrationStore) -> None:
        """A student listed twice in one call is registered once."""
        store.register("teacherken@gmail.com", ["studentjon@gmail.com", "studentjon@gmail.com"])

        assert store.common_students(["teacherken@gmail.com"]) == ["studentjon@gmail.com"]

    def test_register_adds_to_existing_roster(self, store: RegistrationStore) -> None:
        """A second call extends the roster."""
        store.register("teacherken@gmail.com", ["studentjon@gmail.com"])
        store.register("teacherken@gmail.com", ["studenthon@gmail.com"])

        students = store.common_students(["teacherken@gmail.com"])

        assert set(students) == {"studentjon@gmail.com", "studenthon@gmail.com"}

    def test_register_keeps_suspension(self, store: RegistrationStore) -> None:
        """Registering an existing suspended student does not unsuspend them."""
        store.register("teacherken@gmail.com", ["studentjon@gmail.com"])
        store.suspend("studentjon@gmail.com")

        store.register("teacherjoe@gmail.com", ["studentjon@gmail.com"])

        assert store.get_student("studentjon@gmail.com").suspended is True

    def test_register_invalid_teacher_email(self, store: RegistrationStore) -> None:
        """ValidationError before anything is written."""
        with pytest.raises(ValidationError) as exc_info:
            store.register("teacherken", ["studentjon@gmail.com"])

        assert "teacher" in str(exc_info.value)
        with pytest.raises(StudentNotFoundError):
            store.get_student("studentjon@gmail.com")

    def test_register_invalid_student_email(self, store: RegistrationStore) -> None:
        """One bad student email rejects the whole batch."""
        with pytest.raises(ValidationError) as exc_info:
            store.register("teacherken@gmail.com", ["studentjon@gmail.com", "bad-email"])

        assert "bad-email" in str(exc_info.value)
        with pytest.raises(TeacherNotFoundError):
            store.get_teacher("teacherken@gmail.com")

    def test_register_empty_students(self, store: RegistrationStore) -> None:
        """At least one student is required."""
        with pytest.raises(ValidationError):
            store.register("teacherken@gmail.com", [])

    def test_register_students_not_a_list(self, store: RegistrationStore) -> None:
        """A bare string is not a list of students."""
        with pytest.raises(ValidationError):
            store.register("teacherken@gmail.com", "studentjon@gmail.com")

    def test_register_rolls_back_on_storage_failure(self, store: RegistrationStore) -> None:
        """A failure mid-batch leaves no partial state."""
        original = store._insert_ignore
        registrations_seen = []

        def failing_insert(session, model, **values):
            if model is Registration:
                registrations_seen.append(values)
                if len(registrations_seen) == 2:
                    raise OperationalError("INSERT", {}, Exception("disk I/O error"))
            return original(session, model, **values)

        with (
            patch.object(store, "_insert_ignore", side_effect=failing_insert),
            pytest.raises(StorageError),
        ):
            store.register(
                "teacherken@gmail.com", ["studentjon@gmail.com", "studenthon@gmail.com"]
            )

        with pytest.raises(TeacherNotFoundError):
            store.get_teacher("teacherken@gmail.com")
        with pytest.raises(StudentNotFoundError):
            store.get_student("studentjon@gmail.com")
        with pytest.raises(StudentNotFoundError):
            store.get_student("studenthon@gmail.com")

    def test_register_rollback_not_committed_by_concurrent_call(
        self, store: RegistrationStore
    ) -> None:
        """A concurrent register can't commit a failing batch on a shared in-memory DB."""
        original = store._insert_ignore
        batch_started = threading.Event()
        other_finished = threading.Event()
        errors: list[BaseException] = []

        def stalling_insert(session, model, **values):
            if model is Registration and values.get("teacher_id") is not None:
                if threading.current_thread().name == "failing-batch":
                    batch_started.set()
                    other_finished.wait(timeout=0.5)
                    raise OperationalError("INSERT", {}, Exception("disk I/O error"))
            return original(session, model, **values)

        def failing_batch() -> None:
            try:
                store.register("teacherken@gmail.com", ["studentjon@gmail.com"])
            except StorageError as e:
                errors.append(e)

        def other_batch() -> None:
            store.register("teacherjoe@gmail.com", ["studenthon@gmail.com"])
            other_finished.set()

        with patch.object(store, "_insert_ignore", side_effect=stalling_insert):
            first = threading.Thread(target=failing_batch, name="failing-batch")
            first.start()
            assert batch_started.wait(timeout=5)
            second = threading.Thread(target=other_batch, name="other-batch")
            second.start()
            first.join(timeout=5)
            second.join(timeout=5)

        assert len(errors) == 1
        with pytest.raises(TeacherNotFoundError):
            store.get_teacher("teacherken@gmail.com")
        with pytest.raises(StudentNotFoundError):
            store.get_student("studentjon@gmail.com")
        assert store.common_students(["teacherjoe@gmail.com"]) == ["studenthon@gmail.com"]
