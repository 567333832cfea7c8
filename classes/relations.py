"""
Explicit relation loading driven by ``includeX`` query flags.

Relationships on the models are declared ``lazy="raise"``: nothing is fetched
on attribute access, so every relation that ends up in a response was asked
for here.
"""
from sqlalchemy import inspect, select
from sqlalchemy.orm import selectinload
from models import db
from utils.helpers import query_flag

# resource -> flag -> relation paths
RELATION_FLAGS = {
    "degree": {
        "includeClassrooms": ("classrooms",),
        "includeStudents": ("students", "classrooms.students"),
    },
    "classroom": {
        "includeDegree": ("degree",),
        "includeDegrees": ("degree",),
        "includeStudents": ("students",),
    },
    "student": {
        "includeClassroom": ("classroom",),
        "includeDegree": ("degree", "classroom.degree"),
    },
}


def requested_paths(args, resource):
    """Relation paths switched on by the request, in declaration order, without duplicates."""
    paths = []
    for flag, flag_paths in RELATION_FLAGS[resource].items():
        if query_flag(args, flag):
            for path in flag_paths:
                if path not in paths:
                    paths.append(path)
    return paths


def loader_options(model, paths):
    options = []
    for path in paths:
        current = model
        option = None
        for name in path.split("."):
            attr = getattr(current, name)
            option = selectinload(attr) if option is None else option.selectinload(attr)
            current = attr.property.mapper.class_
        options.append(option)
    return options


def eager_load(query, model, paths):
    """Attach batch loaders to a list query before it runs."""
    if not paths:
        return query
    return query.options(*loader_options(model, paths))


def is_loaded(obj, path):
    """True when every hop of ``path`` is already populated on ``obj``."""
    name, _, rest = path.partition(".")
    if obj is None:
        return True
    if name in inspect(obj).unloaded:
        return False
    if not rest:
        return True
    value = obj.__dict__.get(name)
    targets = value if isinstance(value, list) else [value]
    return all(is_loaded(target, rest) for target in targets)


def load_missing(obj, paths):
    """Load the requested relations onto an already fetched entity.

    When every path is already populated nothing is queried, so calling this
    twice is a no-op the second time. Otherwise the entity is re-selected with
    all requested paths, since populate_existing resets relations it is not
    told to load.
    """
    if all(is_loaded(obj, path) for path in paths):
        return obj
    model = type(obj)
    stmt = (
        select(model)
        .where(model.id == obj.id)
        .options(*loader_options(model, paths))
        .execution_options(populate_existing=True)
    )
    db.session.execute(stmt).scalars().one()
    return obj
