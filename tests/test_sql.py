"""
Tests for sql.py - SET and WHERE fragment builders.
"""

import pytest

from jobly.errors import BadRequestError, UnknownFieldError
from jobly.sql import (
    Comparison,
    FilterColumn,
    SqlFragment,
    build_filter_clause,
    build_update_clause,
    sql_for_filter_by,
    sql_for_partial_update,
)


class TestBuildUpdateClause:
    """Test partial update SET clause generation."""

    def test_no_data_raises_bad_request(self):
        """An empty update is a usage error."""
        with pytest.raises(BadRequestError):
            build_update_clause({}, {})

    def test_single_mapped_field(self):
        """Field name is replaced by its column name."""
        result = build_update_clause({"firstName": "Bob"}, {"firstName": "first_name"})
        assert result.clause == '"first_name"=$1'
        assert result.values == ["Bob"]

    def test_placeholders_follow_input_order(self):
        """Each field gets the next placeholder and its value lines up."""
        data = {"firstName": "Aliya", "age": 32, "isAdmin": False, "bio": None}
        column_map = {"firstName": "first_name", "age": "age", "isAdmin": "is_admin", "bio": "bio"}

        result = build_update_clause(data, column_map)

        assert result.clause == '"first_name"=$1, "age"=$2, "is_admin"=$3, "bio"=$4'
        assert result.values == ["Aliya", 32, False, None]

    def test_unmapped_field_is_rejected(self):
        """Caller keys never reach the SQL text."""
        with pytest.raises(UnknownFieldError) as exc:
            build_update_clause({"title": "x", "is_admin": True}, {"title": "title"})
        assert exc.value.field == "is_admin"
        assert isinstance(exc.value, BadRequestError)

    def test_input_is_not_mutated(self):
        data = {"title": "x"}
        result = build_update_clause(data, {"title": "title"})
        result.values.append("extra")
        assert data == {"title": "x"}

    def test_returns_sql_fragment(self):
        result = build_update_clause({"a": 1}, {"a": "a"})
        assert isinstance(result, SqlFragment)
        clause, values = result
        assert clause == '"a"=$1'
        assert values == [1]

    def test_alias(self):
        assert sql_for_partial_update is build_update_clause


class TestBuildFilterClause:
    """Test WHERE predicate generation."""

    @pytest.fixture
    def column_map(self):
        return {
            "title": FilterColumn("j.title", Comparison.SUBSTRING),
            "min_salary": FilterColumn("j.salary", Comparison.THRESHOLD),
            "company_handle": FilterColumn("j.company_handle", Comparison.EXACT),
        }

    def test_no_data_raises_bad_request(self):
        with pytest.raises(BadRequestError):
            build_filter_clause({}, {})

    def test_substring_match(self, column_map):
        result = build_filter_clause({"title": "eng"}, column_map)
        assert result.clause == "j.title LIKE '%' || $1 || '%'"
        assert result.values == ["eng"]

    def test_threshold_match(self, column_map):
        result = build_filter_clause({"min_salary": 50000}, column_map)
        assert result.clause == "j.salary > $1"
        assert result.values == [50000]

    def test_exact_match(self, column_map):
        result = build_filter_clause({"company_handle": "c1"}, column_map)
        assert result.clause == "j.company_handle = $1"
        assert result.values == ["c1"]

    def test_default_comparison_is_exact(self):
        result = build_filter_clause({"name": "Acme"}, {"name": FilterColumn("c.name")})
        assert result.clause == "c.name = $1"

    def test_terms_joined_with_and(self, column_map):
        """Placeholders increase in input order across mixed comparisons."""
        data = {"min_salary": 100, "title": "eng", "company_handle": "c1"}

        result = build_filter_clause(data, column_map)

        assert result.clause == (
            "j.salary > $1 AND j.title LIKE '%' || $2 || '%' AND j.company_handle = $3"
        )
        assert result.values == [100, "eng", "c1"]

    def test_terms_joined_with_or(self, column_map):
        result = build_filter_clause({"title": "a", "min_salary": 1}, column_map, conjunction="OR")
        assert result.clause == "j.title LIKE '%' || $1 || '%' OR j.salary > $2"

    def test_unsupported_conjunction(self, column_map):
        with pytest.raises(ValueError):
            build_filter_clause({"title": "a"}, column_map, conjunction="; DROP TABLE jobs")

    def test_unmapped_field_is_rejected(self, column_map):
        with pytest.raises(UnknownFieldError):
            build_filter_clause({"title": "a", "salary > 0 OR 1=1 --": 1}, column_map)

    def test_clause_never_contains_caller_keys(self, column_map):
        """With an exhaustive mapping only mapped columns appear."""
        data = {"title": "a", "min_salary": 1, "company_handle": "c1"}
        result = build_filter_clause(data, column_map)
        assert "min_salary" not in result.clause
        assert "title" not in result.clause.replace("j.title", "")

    def test_input_is_not_mutated(self, column_map):
        data = {"title": "a", "min_salary": 5}
        build_filter_clause(data, column_map)
        assert data == {"title": "a", "min_salary": 5}

    def test_alias(self):
        assert sql_for_filter_by is build_filter_clause
