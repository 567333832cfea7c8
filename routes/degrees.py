from flask import Blueprint, request, jsonify

from models import db, Degree
from classes.filters import FILTER_POLICIES, transform, to_clauses
from classes.validators import DegreeForm, coerce_predicates
from classes.relations import requested_paths, eager_load, load_missing
from classes.cascade_manager import CascadeDeleteManager
from utils.helpers import query_flag, request_json, paginate_query, paginated_response, get_or_none, commit_form
from utils.resources import degree_resource

degree_bp = Blueprint("degrees", __name__)


def _not_found():
    return jsonify({"error": "Degree not found"}), 404

def _invalid_body():
    return jsonify({"error": "Request body must be a JSON object"}), 400

def _save(degree, status, form):
    error = commit_form(form)
    if error:
        return error
    return jsonify(degree_resource(degree)), status


# List degrees
@degree_bp.route("", methods=["GET"])
def list_degrees():
    predicates = coerce_predicates(transform(request.args, FILTER_POLICIES["degree"]), "degree")
    query = Degree.query.filter(*to_clauses(Degree, predicates)).order_by(Degree.id)
    query = eager_load(query, Degree, requested_paths(request.args, "degree"))

    page = paginate_query(query)
    return jsonify(paginated_response(page, degree_resource)), 200


@degree_bp.route("", methods=["POST"])
def create_degree():
    data = request_json()
    if data is None:
        return _invalid_body()

    form = DegreeForm(data)
    clean, errors = form.validate()
    if errors:
        return jsonify({"error": "Validation failed", "errors": errors}), 422

    degree = Degree(**clean)
    db.session.add(degree)
    return _save(degree, 201, form)


@degree_bp.route("/<int:degree_id>", methods=["GET"])
def show_degree(degree_id):
    degree = get_or_none(Degree, degree_id)
    if not degree:
        return _not_found()

    load_missing(degree, requested_paths(request.args, "degree"))
    return jsonify(degree_resource(degree)), 200


@degree_bp.route("/<int:degree_id>", methods=["PUT", "PATCH"])
def update_degree(degree_id):
    degree = get_or_none(Degree, degree_id)
    if not degree:
        return _not_found()

    data = request_json()
    if data is None:
        return _invalid_body()

    partial = request.method == "PATCH"
    form = DegreeForm(data, partial=partial, instance_id=degree.id)
    clean, errors = form.validate()
    if errors:
        return jsonify({"error": "Validation failed", "errors": errors}), 422

    for field, value in clean.items():
        setattr(degree, field, value)
    return _save(degree, 200, form)


@degree_bp.route("/<int:degree_id>", methods=["DELETE"])
def delete_degree(degree_id):
    degree = get_or_none(Degree, degree_id)
    if not degree:
        return _not_found()

    outcome = CascadeDeleteManager.delete(degree, force=query_flag(request.args, "forceDelete"))
    if not outcome.deleted:
        load_missing(degree, ["classrooms.students"])
        return jsonify({"msg": outcome.reason, "data": degree_resource(degree)}), 422

    return "", 204
