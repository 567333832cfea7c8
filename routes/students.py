from flask import Blueprint, request, jsonify

from models import db, Student
from classes.filters import FILTER_POLICIES, transform, to_clauses
from classes.validators import StudentForm, coerce_predicates
from classes.relations import requested_paths, eager_load, load_missing
from classes.cascade_manager import CascadeDeleteManager
from utils.helpers import request_json, paginate_query, paginated_response, get_or_none, commit_form
from utils.resources import student_resource

student_bp = Blueprint("students", __name__)


def _not_found():
    return jsonify({"error": "Student not found"}), 404

def _invalid_body():
    return jsonify({"error": "Request body must be a JSON object"}), 400

def _save(student, status, form):
    error = commit_form(form)
    if error:
        return error
    return jsonify(student_resource(student)), status


# List students
@student_bp.route("", methods=["GET"])
def list_students():
    predicates = coerce_predicates(transform(request.args, FILTER_POLICIES["student"]), "student")
    query = Student.query.filter(*to_clauses(Student, predicates)).order_by(Student.id)
    query = eager_load(query, Student, requested_paths(request.args, "student"))

    page = paginate_query(query)
    return jsonify(paginated_response(page, student_resource)), 200


@student_bp.route("", methods=["POST"])
def create_student():
    data = request_json()
    if data is None:
        return _invalid_body()

    form = StudentForm(data)
    clean, errors = form.validate()
    if errors:
        return jsonify({"error": "Validation failed", "errors": errors}), 422

    student = Student(**clean)
    db.session.add(student)
    return _save(student, 201, form)


@student_bp.route("/<int:student_id>", methods=["GET"])
def show_student(student_id):
    student = get_or_none(Student, student_id)
    if not student:
        return _not_found()

    load_missing(student, requested_paths(request.args, "student"))
    return jsonify(student_resource(student)), 200


@student_bp.route("/<int:student_id>", methods=["PUT", "PATCH"])
def update_student(student_id):
    student = get_or_none(Student, student_id)
    if not student:
        return _not_found()

    data = request_json()
    if data is None:
        return _invalid_body()

    partial = request.method == "PATCH"
    form = StudentForm(data, partial=partial, instance_id=student.id)
    clean, errors = form.validate()
    if errors:
        return jsonify({"error": "Validation failed", "errors": errors}), 422

    if not partial:
        # PUT replaces the whole record, optional fields included
        clean.setdefault("date_of_birth", None)
    for field, value in clean.items():
        setattr(student, field, value)
    return _save(student, 200, form)


@student_bp.route("/<int:student_id>", methods=["DELETE"])
def delete_student(student_id):
    student = get_or_none(Student, student_id)
    if not student:
        return _not_found()

    CascadeDeleteManager.delete(student)
    return "", 204
