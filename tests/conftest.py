"""Pytest configuration and fixtures."""

from datetime import date
from itertools import count

import pytest
from flask.testing import FlaskClient
from sqlalchemy import event

from app import create_app
from models import db, Degree, Classroom, Student


class FreshSessionClient(FlaskClient):
    """Test client that gives every request its own database session.

    The test holds one app context open, so without this every request and
    the test body would share a single session and identity map.
    """

    def open(self, *args, **kwargs):
        db.session.remove()
        try:
            return super().open(*args, **kwargs)
        finally:
            db.session.remove()


@pytest.fixture
def app():
    """Application bound to a fresh in-memory SQLite database."""
    app = create_app("testing")
    app.test_client_class = FreshSessionClient
    with app.app_context():
        db.create_all()
        try:
            yield app
        finally:
            db.session.remove()
            db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def make_degree(app):
    names = count(1)

    def _make(name=None, max_year=4):
        degree = Degree(name=name or f"Degree {next(names)}", max_year=max_year)
        db.session.add(degree)
        db.session.commit()
        db.session.refresh(degree)
        return degree

    return _make


@pytest.fixture
def make_classroom(app, make_degree):
    names = count(1)

    def _make(degree=None, name=None):
        degree = degree or make_degree()
        classroom = Classroom(name=name or f"Room {next(names)}", degree_id=degree.id)
        db.session.add(classroom)
        db.session.commit()
        db.session.refresh(classroom)
        return classroom

    return _make


@pytest.fixture
def make_student(app, make_classroom):
    numbers = count(1)

    def _make(classroom=None, **fields):
        classroom = classroom or make_classroom()
        n = next(numbers)
        values = {
            "first_name": f"First{n}",
            "last_name": f"Last{n}",
            "email": f"student{n}@example.edu",
            "gender": "female" if n % 2 else "male",
            "date_of_birth": date(2001, 1, 1),
        }
        values.update(fields)
        student = Student(classroom_id=classroom.id, **values)
        db.session.add(student)
        db.session.commit()
        db.session.refresh(student)
        return student

    return _make


@pytest.fixture
def query_counter(app):
    """Count SQL statements sent to the engine while the fixture is active."""
    statements = []

    def _record(conn, cursor, statement, parameters, context, executemany):
        statements.append(statement)

    event.listen(db.engine, "before_cursor_execute", _record)
    try:
        yield statements
    finally:
        event.remove(db.engine, "before_cursor_execute", _record)
