from jsondb_mcp.filters import compile_filters, filter_params, param_value
from jsondb_mcp.models import FilterCondition


def test_eq_maps_to_bare_value():
    assert compile_filters([{"field": "status", "operator": "eq", "value": "active"}]) == {
        "status": "active"
    }


def test_comparison_operators_are_wrapped():
    compiled = compile_filters([
        {"field": "age", "operator": "gte", "value": 21},
        {"field": "name", "operator": "contains", "value": "ann"},
        {"field": "role", "operator": "in", "value": ["admin", "editor"]},
        {"field": "email", "operator": "exists", "value": True},
    ])
    assert compiled == {
        "age": {"$gte": 21},
        "name": {"$contains": "ann"},
        "role": {"$in": ["admin", "editor"]},
        "email": {"$exists": True},
    }


def test_unknown_operator_falls_back_to_equality():
    assert compile_filters([{"field": "x", "operator": "between", "value": 3}]) == {"x": 3}


def test_later_entry_for_same_field_wins():
    compiled = compile_filters([
        {"field": "age", "operator": "gt", "value": 18},
        {"field": "age", "operator": "lt", "value": 65},
    ])
    assert compiled == {"age": {"$lt": 65}}


def test_accepts_filter_condition_models():
    conditions = [FilterCondition(field="score", operator="neq", value=0)]
    assert compile_filters(conditions) == {"score": {"$neq": 0}}


def test_empty_filter_list():
    assert compile_filters([]) == {}


def test_filter_params_flattens_plain_and_operator_values():
    params = filter_params({"status": "active", "age": {"$gt": 21, "$lte": 65}})
    assert params == {
        "filter[status]": "active",
        "filter[age][gt]": "21",
        "filter[age][lte]": "65",
    }


def test_filter_params_strips_only_one_dollar():
    assert filter_params({"a": {"$$weird": 1}}) == {"filter[a][$weird]": "1"}
    assert filter_params({"a": {"gt": 1}}) == {"filter[a][gt]": "1"}


def test_filter_params_none_or_empty():
    assert filter_params(None) == {}
    assert filter_params({}) == {}


def test_param_value_rendering():
    assert param_value(True) == "true"
    assert param_value(False) == "false"
    assert param_value(None) == "null"
    assert param_value(["a", 1, True]) == "a,1,true"
    assert param_value(2.5) == "2.5"
    assert param_value("x") == "x"
