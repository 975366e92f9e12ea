"""Tests for the student directory adapters."""

import json
from unittest.mock import MagicMock

import pytest

from app.models.student import Student
from app.services.directory_service import FirestoreDirectory, InMemoryDirectory, load_students_file
from app.services.exceptions import CollaboratorUnavailable


class TestInMemoryDirectory:
    def test_lookup_by_normalized_identifier(self, directory):
        assert directory.lookup("7").name == "Bond"
        assert directory.lookup("0007") is None

    def test_attributes_of(self, directory):
        attributes = directory.attributes_of("42")

        assert attributes.name == "Ada"
        assert attributes.department == "CS"
        assert attributes.batch == "2024"
        assert attributes.semester == 3

    def test_unknown_student(self, directory):
        assert directory.lookup("999") is None
        assert directory.attributes_of("999") is None

    def test_remove(self, directory):
        directory.remove("42")

        assert directory.lookup("42") is None


class TestLoadStudentsFile:
    def test_loads_records(self, tmp_path):
        students_file = tmp_path / "students.json"
        students_file.write_text(json.dumps([
            {"enrollment_number": "0042", "name": "Ada", "department": "CS", "batch": "2024", "semester": 3},
        ]), encoding="utf-8")

        directory = load_students_file(str(students_file))

        assert len(directory) == 1
        assert directory.lookup("42").enrollment_number == "42"

    def test_missing_file_gives_empty_directory(self, tmp_path):
        assert len(load_students_file(str(tmp_path / "missing.json"))) == 0

    def test_empty_file_gives_empty_directory(self, tmp_path):
        students_file = tmp_path / "students.json"
        students_file.write_text("", encoding="utf-8")

        assert len(load_students_file(str(students_file))) == 0


class TestFirestoreDirectory:
    def test_lookup(self):
        db = MagicMock()
        doc = MagicMock()
        doc.to_dict.return_value = {
            "enrollment_number": "42", "name": "Ada", "department": "CS",
            "batch": "2024", "semester": 3, "phone_no": "555",
        }
        db.collection.return_value.where.return_value.limit.return_value.get.return_value = [doc]

        student = FirestoreDirectory(db).lookup("42")

        assert isinstance(student, Student)
        assert student.name == "Ada"
        db.collection.assert_called_once_with("students")
        db.collection.return_value.where.assert_called_once_with('enrollment_number', '==', '42')

    def test_lookup_unknown(self):
        db = MagicMock()
        db.collection.return_value.where.return_value.limit.return_value.get.return_value = []

        assert FirestoreDirectory(db).lookup("42") is None

    def test_outage_is_wrapped(self):
        db = MagicMock()
        db.collection.return_value.where.side_effect = ConnectionError("unavailable")

        with pytest.raises(CollaboratorUnavailable) as excinfo:
            FirestoreDirectory(db).lookup("42")

        assert excinfo.value.entity_ref == "42"
        assert isinstance(excinfo.value.cause, ConnectionError)
