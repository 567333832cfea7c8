from flask import current_app, jsonify, request, url_for
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from models import db
from classes.validators import INT_MIN, INT_MAX

TRUTHY = {"1", "true", "on", "yes"}

# Reported when a commit hits a constraint the form checks could not pin on a field
CONFLICT_ERRORS = {"record": ["The record conflicts with existing data."]}


def query_flag(args, name, default=False):
    """Read a boolean query parameter (``1``, ``true``, ``on``, ``yes`` are true)."""
    value = args.get(name) if args else None
    if value is None:
        return default
    if isinstance(value, bool):
        return value
    return str(value).strip().lower() in TRUTHY


def request_json():
    """Return the JSON object body of the current request, or None."""
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        return None
    return data


def get_or_none(model, ident):
    # ids past the Integer range cannot exist and overflow some drivers
    if not INT_MIN <= ident <= INT_MAX:
        return None
    return db.session.get(model, ident)


def commit_form(form):
    """Commit the session holding the changes validated by ``form``.

    Returns None when the commit succeeds, otherwise a ``(response, status)``
    tuple. On an integrity error the form is run again against the rolled
    back session, so a row written by a concurrent request shows up as the
    usual field error.
    """
    try:
        db.session.commit()
    except IntegrityError:
        db.session.rollback()
        current_app.logger.warning("Integrity error while saving %s", form.__class__.__name__, exc_info=True)
        _, errors = form.revalidate()
        return jsonify({"error": "Validation failed", "errors": errors or CONFLICT_ERRORS}), 422
    except SQLAlchemyError:
        db.session.rollback()
        current_app.logger.exception("Database error while saving %s", form.__class__.__name__)
        return jsonify({"error": "Database error"}), 500
    return None


def paginate_query(query):
    return query.paginate(
        page=request.args.get("page", 1, type=int),
        per_page=request.args.get("per_page", current_app.config["PER_PAGE"], type=int),
        max_per_page=current_app.config["MAX_PER_PAGE"],
        error_out=False,
    )


def page_url(number):
    """URL of page ``number`` of the current listing, keeping its other query args."""
    if number is None:
        return None
    params = request.args.to_dict(flat=False)
    params["page"] = number
    return url_for(request.endpoint, _external=True, **params)


def paginated_response(page, serialize):
    """Shape a Flask-SQLAlchemy pagination into ``data``/``meta``/``links``."""
    return {
        "data": [serialize(item) for item in page.items],
        "meta": {
            "current_page": page.page,
            "per_page": page.per_page,
            "total": page.total,
            "last_page": page.pages,
        },
        "links": {
            "prev": page_url(page.prev_num),
            "next": page_url(page.next_num),
        },
    }
