"""
JSON shapes for degrees, classrooms and students.

A relation that was not loaded is rendered as ``None``; a loaded but empty
collection is ``[]``. Serializing never touches an unloaded attribute, so it
never issues a query.

Nesting stops at MAX_DEPTH: a resource rendered that deep shows all of its
relations as ``None`` even when they happen to be loaded in the session.
"""
from sqlalchemy import inspect

# degree -> classrooms -> students is the deepest include path
MAX_DEPTH = 2


def _relation(obj, name, serialize, depth):
    if depth >= MAX_DEPTH or name in inspect(obj).unloaded:
        return None
    value = getattr(obj, name)
    if value is None:
        return None
    if isinstance(value, list):
        return [serialize(item, depth + 1) for item in value]
    return serialize(value, depth + 1)


def degree_resource(degree, depth=0):
    data = degree.to_dict()
    data["classrooms"] = _relation(degree, "classrooms", classroom_resource, depth)
    data["students"] = _relation(degree, "students", student_resource, depth)
    return data


def classroom_resource(classroom, depth=0):
    data = classroom.to_dict()
    data["degree"] = _relation(classroom, "degree", degree_resource, depth)
    data["students"] = _relation(classroom, "students", student_resource, depth)
    return data


def student_resource(student, depth=0):
    data = student.to_dict()
    data["classroom"] = _relation(student, "classroom", classroom_resource, depth)
    data["degree"] = _relation(student, "degree", degree_resource, depth)
    return data
