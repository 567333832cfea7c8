"""Tests for the default data seeder."""

from models import db, Degree, Classroom, Student
from config import TestConfig
from utils.seeding import seed_degrees


def test_seed_creates_degrees_classrooms_and_students(app):
    created = seed_degrees()

    assert [d.name for d in created] == ["Bachelor", "Master", "PhD"]
    assert Classroom.query.count() == 21
    assert Student.query.count() == 21 * 15
    assert Student.query.filter_by(gender="female").count() == 21 * 5
    assert sorted(c.name for c in Classroom.query.join(Degree).filter(Degree.name == "Master")) == [
        "M1", "M2", "M3", "M4", "M5", "M6", "M7"
    ]


def test_seeded_students_are_born_before_cutoff(app):
    seed_degrees()

    latest = db.session.query(db.func.max(Student.date_of_birth)).scalar()

    assert latest < TestConfig.DATE_OF_BIRTH_CUTOFF


def test_seed_is_skipped_for_existing_degrees(app, make_degree):
    make_degree(name="Master", max_year=2)

    created = seed_degrees()

    assert [d.name for d in created] == ["Bachelor", "PhD"]
    assert Degree.query.count() == 3
