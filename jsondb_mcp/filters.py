"""Filter compilation and query-string flattening."""

OPERATORS = ("eq", "neq", "gt", "gte", "lt", "lte", "contains", "in", "exists")


def compile_filters(filters) -> dict:
    """Turn ``[{field, operator, value}, ...]`` into the API's filter object.

    ``eq`` maps to the bare value, every other known operator to
    ``{"$op": value}``. Unknown operators fall back to equality. A later
    entry for the same field replaces the earlier one.
    """
    compiled = {}
    for item in filters:
        field, operator, value = _unpack(item)
        if operator != "eq" and operator in OPERATORS:
            compiled[field] = {f"${operator}": value}
        else:
            compiled[field] = value
    return compiled


def _unpack(item):
    if isinstance(item, dict):
        return item["field"], item["operator"], item.get("value")
    return item.field, item.operator, item.value


def param_value(value) -> str:
    """Render a scalar the way the API expects it in a query string."""
    if isinstance(value, bool):
        return "true" if value else "false"
    if value is None:
        return "null"
    if isinstance(value, (list, tuple)):
        return ",".join(param_value(v) for v in value)
    return str(value)


def filter_params(filter_obj) -> dict[str, str]:
    """Flatten a filter object into ``filter[field]`` / ``filter[field][op]`` params."""
    params: dict[str, str] = {}
    for field, value in (filter_obj or {}).items():
        if isinstance(value, dict):
            for op, v in value.items():
                op = op[1:] if op.startswith("$") else op
                params[f"filter[{field}][{op}]"] = param_value(v)
        else:
            params[f"filter[{field}]"] = param_value(value)
    return params
