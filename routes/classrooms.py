from flask import Blueprint, request, jsonify

from models import db, Classroom
from classes.filters import FILTER_POLICIES, transform, to_clauses
from classes.validators import ClassroomForm, coerce_predicates
from classes.relations import requested_paths, eager_load, load_missing
from classes.cascade_manager import CascadeDeleteManager
from utils.helpers import query_flag, request_json, paginate_query, paginated_response, get_or_none, commit_form
from utils.resources import classroom_resource

classroom_bp = Blueprint("classrooms", __name__)


def _not_found():
    return jsonify({"error": "Classroom not found"}), 404

def _invalid_body():
    return jsonify({"error": "Request body must be a JSON object"}), 400

def _save(classroom, status, form):
    error = commit_form(form)
    if error:
        return error
    return jsonify(classroom_resource(classroom)), status


# List classrooms
@classroom_bp.route("", methods=["GET"])
def list_classrooms():
    predicates = coerce_predicates(transform(request.args, FILTER_POLICIES["classroom"]), "classroom")
    query = Classroom.query.filter(*to_clauses(Classroom, predicates)).order_by(Classroom.id)
    query = eager_load(query, Classroom, requested_paths(request.args, "classroom"))

    page = paginate_query(query)
    return jsonify(paginated_response(page, classroom_resource)), 200


@classroom_bp.route("", methods=["POST"])
def create_classroom():
    data = request_json()
    if data is None:
        return _invalid_body()

    form = ClassroomForm(data)
    clean, errors = form.validate()
    if errors:
        return jsonify({"error": "Validation failed", "errors": errors}), 422

    classroom = Classroom(**clean)
    db.session.add(classroom)
    return _save(classroom, 201, form)


@classroom_bp.route("/<int:classroom_id>", methods=["GET"])
def show_classroom(classroom_id):
    classroom = get_or_none(Classroom, classroom_id)
    if not classroom:
        return _not_found()

    load_missing(classroom, requested_paths(request.args, "classroom"))
    return jsonify(classroom_resource(classroom)), 200


@classroom_bp.route("/<int:classroom_id>", methods=["PUT", "PATCH"])
def update_classroom(classroom_id):
    classroom = get_or_none(Classroom, classroom_id)
    if not classroom:
        return _not_found()

    data = request_json()
    if data is None:
        return _invalid_body()

    partial = request.method == "PATCH"
    form = ClassroomForm(data, partial=partial, instance_id=classroom.id)
    clean, errors = form.validate()
    if errors:
        return jsonify({"error": "Validation failed", "errors": errors}), 422

    for field, value in clean.items():
        setattr(classroom, field, value)
    return _save(classroom, 200, form)


@classroom_bp.route("/<int:classroom_id>", methods=["DELETE"])
def delete_classroom(classroom_id):
    classroom = get_or_none(Classroom, classroom_id)
    if not classroom:
        return _not_found()

    outcome = CascadeDeleteManager.delete(classroom, force=query_flag(request.args, "forceDelete"))
    if not outcome.deleted:
        load_missing(classroom, ["students"])
        return jsonify({"msg": outcome.reason, "data": classroom_resource(classroom)}), 422

    return "", 204
