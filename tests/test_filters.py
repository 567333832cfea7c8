"""Tests for the whitelisted filter transform."""

from werkzeug.datastructures import MultiDict

from classes.filters import FILTER_POLICIES, OPERATORS, Predicate, parse_filter_params, transform


def test_gte_on_max_year_yields_predicate():
    args = MultiDict({"filter[max_year][gte]": "2"})

    assert transform(args, FILTER_POLICIES["degree"]) == [Predicate("max_year", ">=", "2")]


def test_operator_not_whitelisted_for_field_is_dropped():
    args = MultiDict({"filter[name][gt]": "X"})

    assert transform(args, FILTER_POLICIES["degree"]) == []


def test_unknown_field_is_ignored():
    args = MultiDict({"filter[password][eq]": "x", "filter[name][eq]": "Master"})

    assert transform(args, FILTER_POLICIES["degree"]) == [Predicate("name", "=", "Master")]


def test_absent_filter_gives_no_predicates():
    assert transform(MultiDict(), FILTER_POLICIES["student"]) == []
    assert transform(None, FILTER_POLICIES["student"]) == []
    assert transform(MultiDict({"page": "2", "includeDegree": "true"}), FILTER_POLICIES["student"]) == []


def test_every_whitelisted_pair_maps_to_one_predicate():
    symbols = {name: symbol for name, (_, symbol) in OPERATORS.items()}
    for resource, policy in FILTER_POLICIES.items():
        for field, ops in policy.items():
            for op in ops:
                args = MultiDict({f"filter[{field}][{op}]": "v"})
                predicates = transform(args, policy)
                assert predicates == [Predicate(field, symbols[op], "v")], (resource, field, op)


def test_predicates_stay_inside_whitelist():
    fields = ["name", "max_year", "email", "gender", "date_of_birth", "id", "first_name", "degree_id"]
    ops = ["eq", "gt", "gte", "lt", "lte", "ne", "like", "in"]
    args = MultiDict({f"filter[{f}][{o}]": "1" for f in fields for o in ops})
    symbol_to_op = {symbol: name for name, (_, symbol) in OPERATORS.items()}

    for policy in FILTER_POLICIES.values():
        for predicate in transform(args, policy):
            assert predicate.field in policy
            assert symbol_to_op[predicate.operator] in policy[predicate.field]


def test_output_order_follows_policy():
    args = MultiDict([
        ("filter[date_of_birth][lt]", "2004-01-01"),
        ("filter[gender][eq]", "male"),
        ("filter[date_of_birth][gte]", "2000-01-01"),
    ])

    assert transform(args, FILTER_POLICIES["student"]) == [
        Predicate("gender", "=", "male"),
        Predicate("date_of_birth", ">=", "2000-01-01"),
        Predicate("date_of_birth", "<", "2004-01-01"),
    ]


def test_structured_filter_mapping_is_accepted():
    args = {"filter": {"max_year": {"lt": 5, "between": [1, 2]}, "name": "plain"}}

    assert transform(args, FILTER_POLICIES["degree"]) == [Predicate("max_year", "<", 5)]


def test_malformed_keys_are_ignored():
    parsed = parse_filter_params(MultiDict({
        "filter[name]": "x",
        "filter[name][eq][extra]": "y",
        "filter[][eq]": "z",
        "filter": "nonsense",
    }))

    assert parsed == {}
