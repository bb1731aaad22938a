from typing import Any, Dict, List

from .errors import BadRequestError

NEW_JOB_FIELDS = ("title", "salary", "equity", "company_handle")
UPDATE_JOB_FIELDS = ("title", "salary", "equity")
FILTER_JOB_FIELDS = ("title", "min_salary", "has_equity")


def is_scalar(v: Any) -> bool:
    """True for the value kinds a field may carry: str, int, float, bool or None."""
    return v is None or isinstance(v, (str, int, float, bool))


def _is_non_empty_str(v: Any) -> bool:
    return isinstance(v, str) and v.strip() != ""


def _is_int(v: Any) -> bool:
    # bool is a subclass of int but never a valid count
    return isinstance(v, int) and not isinstance(v, bool)


def _as_number(v: Any):
    if isinstance(v, bool):
        return None
    if isinstance(v, (int, float)):
        return v
    if isinstance(v, str):
        try:
            return float(v)
        except ValueError:
            return None
    return None


def validate_scalar(name: str, value: Any) -> List[str]:
    if is_scalar(value):
        return []
    return [f"Field '{name}' must be a string, number, boolean or null"]


def _unknown_fields(data: Dict[str, Any], allowed) -> List[str]:
    return [f"Unknown field: {f}" for f in data if f not in allowed]


def _check_job_fields(data: Dict[str, Any]) -> List[str]:
    errors: List[str] = []

    for f, v in data.items():
        errors.extend(validate_scalar(f, v))

    if "title" in data and not _is_non_empty_str(data["title"]):
        errors.append("Field 'title' must be a non-empty string")

    salary = data.get("salary")
    if salary is not None and not (_is_int(salary) and salary >= 0):
        errors.append("Field 'salary' must be a non-negative integer")

    equity = data.get("equity")
    if equity is not None:
        number = _as_number(equity)
        if number is None or not 0 <= number <= 1:
            errors.append("Field 'equity' must be a number between 0 and 1")

    return errors


def validate_job_new(data: Dict[str, Any]) -> List[str]:
    """
    Returns a list of validation error messages. Empty list means valid.

    title and company_handle are required; salary and equity may be
    omitted or null.
    """
    errors = _unknown_fields(data, NEW_JOB_FIELDS)

    for f in ("title", "company_handle"):
        if f not in data:
            errors.append(f"Missing required field: {f}")

    if "company_handle" in data and not _is_non_empty_str(data["company_handle"]):
        errors.append("Field 'company_handle' must be a non-empty string")

    errors.extend(_check_job_fields(data))
    return errors


def validate_job_update(data: Dict[str, Any]) -> List[str]:
    """Partial update payload: only title, salary and equity may change."""
    if not data:
        return ["No data"]
    errors = _unknown_fields(data, UPDATE_JOB_FIELDS)
    errors.extend(_check_job_fields(data))
    return errors


def validate_job_filter(data: Dict[str, Any]) -> List[str]:
    if not data:
        return ["No filter data"]
    errors = _unknown_fields(data, FILTER_JOB_FIELDS)

    if "title" in data and not isinstance(data["title"], str):
        errors.append("Field 'title' must be a string")

    min_salary = data.get("min_salary")
    if "min_salary" in data and not (_is_int(min_salary) and min_salary >= 0):
        errors.append("Field 'min_salary' must be a non-negative integer")

    if "has_equity" in data and not isinstance(data["has_equity"], bool):
        errors.append("Field 'has_equity' must be a boolean")

    return errors


def require_valid(errors: List[str]) -> None:
    """Raise BadRequestError carrying every message when errors is non-empty."""
    if errors:
        raise BadRequestError("; ".join(errors))
