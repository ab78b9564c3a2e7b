"""
Compile employee filter expressions into Elasticsearch bool queries.

Each call builds its query from scratch and returns a plain dict, so
concurrent searches never share query state.
"""

from typing import Any

from app.core.exceptions import BadRequestError, UnsupportedOperatorError
from app.models.search import EmployeeField, FilterEmployee, FilterOperator


def _terms_clause(field: EmployeeField, values: list[str]) -> dict[str, Any]:
    return {"terms": {field.field_name: field.convert(values)}}


def _range_clause(
    field: EmployeeField, bound: str, values: list[str]
) -> dict[str, Any]:
    if not values:
        raise BadRequestError(
            f"Range filter on {field.field_name} requires at least one value"
        )
    # Only the first value bounds the range; the rest are ignored
    return {"range": {field.field_name: {bound: field.convert(values[:1])[0]}}}


def build_employee_query(filter_employee: FilterEmployee) -> dict[str, Any]:
    """
    Translate a filter expression into a conjunctive bool query.

    EQUAL becomes a terms (membership) clause under ``must``; GREATER and
    LESS become exclusive range clauses under ``filter``. All clauses are
    ANDed together. An empty expression matches every document.

    Raises:
        UnsupportedOperatorError: if an operator is not EQUAL, GREATER or LESS
        BadRequestError: if a value cannot be converted for its field
    """
    must: list[dict[str, Any]] = []
    filters: list[dict[str, Any]] = []

    for operator, fields in filter_employee.filter_map.items():
        for field, values in fields.items():
            if operator == FilterOperator.EQUAL:
                must.append(_terms_clause(field, values))
            elif operator == FilterOperator.GREATER:
                filters.append(_range_clause(field, "gt", values))
            elif operator == FilterOperator.LESS:
                filters.append(_range_clause(field, "lt", values))
            else:
                raise UnsupportedOperatorError(
                    f"Unsupported filter operator: {operator}"
                )

    if not must and not filters:
        return {"match_all": {}}

    bool_query: dict[str, Any] = {}
    if must:
        bool_query["must"] = must
    if filters:
        bool_query["filter"] = filters
    return {"bool": bool_query}
