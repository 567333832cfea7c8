"""
Whitelisted query filtering.

Query strings carry filters as ``filter[<field>][<op>]=<value>``. Each resource
declares which fields may be filtered and with which operators; anything else
is dropped without an error so callers cannot probe for columns.
"""
import operator
import re
from collections import namedtuple
from collections.abc import Mapping

# op name -> (comparison, symbol)
OPERATORS = {
    "eq": (operator.eq, "="),
    "gt": (operator.gt, ">"),
    "gte": (operator.ge, ">="),
    "lt": (operator.lt, "<"),
    "lte": (operator.le, "<="),
}

ORDERING = ("eq", "gt", "gte", "lt", "lte")

FILTER_POLICIES = {
    "degree": {
        "name": ("eq",),
        "max_year": ORDERING,
    },
    "classroom": {
        "name": ("eq",),
    },
    "student": {
        "first_name": ("eq",),
        "last_name": ("eq",),
        "email": ("eq",),
        "gender": ("eq",),
        "date_of_birth": ORDERING,
    },
}

FILTER_KEY = re.compile(r"^filter\[([^\[\]]+)\]\[([^\[\]]+)\]$")

Predicate = namedtuple("Predicate", ["field", "operator", "value"])


def parse_filter_params(args):
    """Collect ``{field: {op: value}}`` from a query-parameter mapping.

    Accepts flat bracket keys (``request.args``) as well as an already nested
    ``{"filter": {...}}`` mapping. Only the first value of a repeated key is used.
    """
    requested = {}
    if not args:
        return requested

    nested = args.get("filter")
    if isinstance(nested, Mapping):
        for field, ops in nested.items():
            if isinstance(ops, Mapping):
                requested.setdefault(field, {}).update(ops)

    for key, value in args.items():
        match = FILTER_KEY.match(key) if isinstance(key, str) else None
        if match:
            field, op = match.groups()
            requested.setdefault(field, {}).setdefault(op, value)

    return requested


def transform(args, policy):
    """Translate query parameters into an ordered list of predicates.

    Output order follows the policy (field order, then operator order), so the
    same request always yields the same list.
    """
    requested = parse_filter_params(args)
    predicates = []
    for field, allowed in policy.items():
        ops = requested.get(field)
        if not ops:
            continue
        for op in allowed:
            if op in ops and op in OPERATORS:
                predicates.append(Predicate(field, OPERATORS[op][1], ops[op]))
    return predicates


_BY_SYMBOL = {symbol: compare for compare, symbol in OPERATORS.values()}


def to_clauses(model, predicates):
    """Build SQLAlchemy conditions for ``query.filter(*clauses)``."""
    return [_BY_SYMBOL[p.operator](getattr(model, p.field), p.value) for p in predicates]
