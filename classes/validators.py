from datetime import date, datetime
from flask import current_app
from models import db, Degree, Classroom, Student
from models.students import GENDERS
from classes.filters import Predicate


# Range of the Integer columns (signed 32-bit)
INT_MIN = -2**31
INT_MAX = 2**31 - 1


def validate_length(field_name, value, max_length):
    if len(value) > max_length:
        raise ValueError(f"{field_name} must be {max_length} characters or fewer.")

def parse_positive_int(field_name, value):
    if isinstance(value, bool):
        raise ValueError(f"{field_name} must be an integer.")
    try:
        number = int(value)
    except (TypeError, ValueError):
        raise ValueError(f"{field_name} must be an integer.")
    if isinstance(value, float) and value != number:
        raise ValueError(f"{field_name} must be an integer.")
    if number <= 0:
        raise ValueError(f"{field_name} must be greater than 0.")
    if number > INT_MAX:
        raise ValueError(f"{field_name} must be at most {INT_MAX}.")
    return number

def parse_int(field_name, value):
    """Parse any integer that fits the Integer columns."""
    if isinstance(value, bool):
        raise ValueError(f"{field_name} must be an integer.")
    try:
        number = int(value)
    except (TypeError, ValueError):
        raise ValueError(f"{field_name} must be an integer.")
    if not INT_MIN <= number <= INT_MAX:
        raise ValueError(f"{field_name} is out of range.")
    return number

def parse_date(field_name, value):
    if isinstance(value, date):
        return value
    try:
        return datetime.strptime(str(value), "%Y-%m-%d").date()
    except (TypeError, ValueError):
        raise ValueError(f"{field_name} is not a valid date.")

def validate_date_of_birth(value):
    born = parse_date("date_of_birth", value)
    cutoff = current_app.config["DATE_OF_BIRTH_CUTOFF"]
    if born >= cutoff:
        raise ValueError(f"date_of_birth must be a date before {cutoff.isoformat()}.")
    return born

def _text(field_name, value, max_length):
    if not isinstance(value, str) or not value.strip():
        raise ValueError(f"{field_name} must be a non-empty string.")
    validate_length(field_name, value, max_length)
    return value.strip()

def _is_taken(model, column, value, ignore_id):
    query = model.query.filter(column == value)
    if ignore_id is not None:
        query = query.filter(model.id != ignore_id)
    return db.session.query(query.exists()).scalar()

def _exists(model, value):
    return value is not None and db.session.get(model, value) is not None


class FormValidator:
    """Validate a request body against a field -> parser table.

    ``partial`` is the PATCH mode: absent fields are skipped, present fields
    must still be valid. An optional field sent as null comes back as None.
    Returns ``(clean_data, errors)``.
    """

    fields = {}
    required = ()

    def __init__(self, data, partial=False, instance_id=None):
        self.data = data
        self.partial = partial
        self.instance_id = instance_id
        self.errors = {}
        self.clean = {}

    def add_error(self, field, message):
        self.errors.setdefault(field, []).append(message)

    def validate(self):
        for field, parser in self.fields.items():
            if field not in self.data or self.data[field] is None:
                if field in self.required and (not self.partial or field in self.data):
                    self.add_error(field, f"The {field} field is required.")
                elif field in self.data:
                    # explicit null on an optional field clears it
                    self.clean[field] = None
                continue
            try:
                self.clean[field] = parser(self.data[field])
            except ValueError as e:
                self.add_error(field, str(e))
        if not self.errors:
            self.check_references()
        return self.clean, self.errors

    def revalidate(self):
        """Run every check again from scratch, e.g. after a rollback."""
        self.errors = {}
        self.clean = {}
        return self.validate()

    def check_references(self):
        """Database-backed rules (uniqueness, foreign keys)."""


class DegreeForm(FormValidator):
    fields = {
        "name": lambda v: _text("name", v, 255),
        "max_year": lambda v: parse_positive_int("max_year", v),
    }
    required = ("name", "max_year")

    def check_references(self):
        if "name" in self.clean and _is_taken(Degree, Degree.name, self.clean["name"], self.instance_id):
            self.add_error("name", "The name has already been taken.")


class ClassroomForm(FormValidator):
    fields = {
        "name": lambda v: _text("name", v, 255),
        "degree_id": lambda v: parse_positive_int("degree_id", v),
    }
    required = ("name", "degree_id")

    def check_references(self):
        if "name" in self.clean and _is_taken(Classroom, Classroom.name, self.clean["name"], self.instance_id):
            self.add_error("name", "The name has already been taken.")
        if "degree_id" in self.clean and not _exists(Degree, self.clean["degree_id"]):
            self.add_error("degree_id", "The selected degree_id is invalid.")


def _gender(value):
    if value not in GENDERS:
        raise ValueError(f"gender must be one of: {', '.join(GENDERS)}.")
    return value

def _email(value):
    email = _text("email", value, 255)
    if "@" not in email:
        raise ValueError("email must be a valid email address.")
    return email


class StudentForm(FormValidator):
    fields = {
        "classroom_id": lambda v: parse_positive_int("classroom_id", v),
        "first_name": lambda v: _text("first_name", v, 100),
        "last_name": lambda v: _text("last_name", v, 100),
        "email": _email,
        "gender": _gender,
        "date_of_birth": validate_date_of_birth,
    }
    required = ("classroom_id", "first_name", "last_name", "email", "gender")

    def check_references(self):
        if "email" in self.clean and _is_taken(Student, Student.email, self.clean["email"], self.instance_id):
            self.add_error("email", "The email has already been taken.")
        if "classroom_id" in self.clean and not _exists(Classroom, self.clean["classroom_id"]):
            self.add_error("classroom_id", "The selected classroom_id is invalid.")


# Filter values arrive as strings; these turn them into column-typed values.
FILTER_COERCERS = {
    "degree": {
        "max_year": lambda v: parse_int("max_year", v),
    },
    "student": {
        "date_of_birth": lambda v: parse_date("date_of_birth", v),
    },
}

def coerce_predicates(predicates, resource):
    """Coerce predicate values for ``resource``; drop the ones that do not parse."""
    coercers = FILTER_COERCERS.get(resource, {})
    coerced = []
    for predicate in predicates:
        convert = coercers.get(predicate.field)
        if convert is None:
            coerced.append(predicate)
            continue
        try:
            coerced.append(Predicate(predicate.field, predicate.operator, convert(predicate.value)))
        except (TypeError, ValueError):
            current_app.logger.debug("Dropping filter %s with unparseable value", predicate.field)
    return coerced
