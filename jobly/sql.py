"""
Helpers for building parameterized SQL fragments from partial field sets.

Both builders return an SqlFragment: clause text with positional
placeholders ($1, $2, ...) and the list of values those placeholders bind
to, in the same order. Only values are parameterized; column names come
from the caller-supplied mapping, so every field must be mapped.
"""

from enum import Enum
from typing import Any, Dict, List, Mapping, NamedTuple

from .errors import BadRequestError, UnknownFieldError


class Comparison(Enum):
    """How a filter field is compared against its column."""

    EXACT = "exact"
    SUBSTRING = "substring"
    THRESHOLD = "threshold"


class FilterColumn(NamedTuple):
    """Storage column plus the comparison applied to it."""

    column: str
    comparison: Comparison = Comparison.EXACT


class SqlFragment(NamedTuple):
    clause: str
    values: List[Any]


CONJUNCTIONS = ("AND", "OR")


def _resolve(field: str, column_map: Mapping[str, Any]) -> Any:
    try:
        return column_map[field]
    except KeyError:
        raise UnknownFieldError(field) from None


def build_update_clause(
    data: Mapping[str, Any],
    column_map: Mapping[str, str],
) -> SqlFragment:
    """
    Build the SET clause of a partial update.

    Args:
        data: field name -> new value, only the fields being changed
        column_map: field name -> column name, must cover every field

    Returns:
        SqlFragment such as ('"first_name"=$1, "age"=$2', ['Aliya', 32])

    Raises:
        BadRequestError: data is empty
        UnknownFieldError: a field has no column mapping
    """
    if not data:
        raise BadRequestError("No data")

    # {firstName: 'Aliya', age: 32} => ['"first_name"=$1', '"age"=$2']
    terms = []
    values = []
    for idx, (field, value) in enumerate(data.items(), start=1):
        column = _resolve(field, column_map)
        terms.append(f'"{column}"=${idx}')
        values.append(value)

    return SqlFragment(", ".join(terms), values)


def _filter_term(target: FilterColumn, idx: int) -> str:
    if target.comparison is Comparison.SUBSTRING:
        return f"{target.column} LIKE '%' || ${idx} || '%'"
    if target.comparison is Comparison.THRESHOLD:
        return f"{target.column} > ${idx}"
    return f"{target.column} = ${idx}"


def build_filter_clause(
    data: Mapping[str, Any],
    column_map: Mapping[str, FilterColumn],
    conjunction: str = "AND",
) -> SqlFragment:
    """
    Build a predicate for dynamic filtering.

    The clause has no leading WHERE; callers interpolate it into their own
    statement.

    Args:
        data: field name -> filter value
        column_map: field name -> FilterColumn, must cover every field
        conjunction: "AND" or "OR"

    Returns:
        SqlFragment such as ("j.title LIKE '%' || $1 || '%' AND j.salary > $2",
        ['eng', 50000])

    Raises:
        BadRequestError: data is empty
        UnknownFieldError: a field has no column mapping
    """
    if conjunction not in CONJUNCTIONS:
        raise ValueError(f"Unsupported conjunction: {conjunction!r}")
    if not data:
        raise BadRequestError("No filter data")

    terms = []
    values = []
    for idx, (field, value) in enumerate(data.items(), start=1):
        terms.append(_filter_term(_resolve(field, column_map), idx))
        values.append(value)

    return SqlFragment(f" {conjunction} ".join(terms), values)


sql_for_partial_update = build_update_clause
sql_for_filter_by = build_filter_clause

