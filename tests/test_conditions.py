import pytest

from modelmap.conditions import (
    and_clauses,
    comparison_operands,
    condition_node,
    where_clause,
)
from modelmap.exceptions import InvalidConditionError
from modelmap.operators import Operator, comparison_operator


def test_where_clause_empty_conditions() -> None:
    assert where_clause(None) is None
    assert where_clause({}) is None


def test_where_clause_single_condition_is_not_wrapped() -> None:
    assert where_clause({"id": 1}) == ("=", "id", 1)


def test_where_clause_multiple_conditions_are_anded() -> None:
    clause = where_clause({"b": 2, "a": 1})
    assert clause is not None
    assert clause[0] == "and"
    assert set(clause[1:]) == {("=", "a", 1), ("=", "b", 2)}
    assert len(clause) == 3


def test_operator_tagged_values() -> None:
    assert where_clause({"id": (">", 1)}) == (">", "id", 1)
    assert where_clause({"id": ["in", [1, 2]]}) == ("in", "id", [1, 2])
    assert where_clause({"a": ("between", 1, 2)}) == ("between", "a", 1, 2)
    assert where_clause({"name": ("is_null",)}) == ("is_null", "name")
    assert where_clause({"id": (Operator.NE, 3)}) == ("!=", "id", 3)


def test_plain_sequence_is_an_equality_value() -> None:
    # first element is not an operator token
    assert condition_node("tags", ("red", "green")) == ("=", "tags", ("red", "green"))
    assert condition_node("tags", []) == ("=", "tags", [])


def test_operator_arity_is_checked() -> None:
    with pytest.raises(InvalidConditionError) as exc_info:
        where_clause({"a": ("between", 1)})
    assert exc_info.value.column == "a"
    assert isinstance(exc_info.value, ValueError)

    with pytest.raises(InvalidConditionError):
        condition_node("id", ("=",))


def test_comparison_operator_lookup() -> None:
    assert comparison_operator("LIKE") is Operator.LIKE
    assert comparison_operator("and") is None
    assert comparison_operator(Operator.OR) is None
    assert comparison_operator(42) is None


def test_and_clauses_ignores_missing() -> None:
    assert and_clauses() is None
    assert and_clauses(None, None) is None
    assert and_clauses(None, ("=", "id", 1)) == ("=", "id", 1)


def test_and_clauses_flattens_and_dedupes() -> None:
    existing = ("and", ("=", "a", 1), ("=", "b", 2))
    merged = and_clauses(existing, ("=", "c", 3))
    assert merged == ("and", ("=", "a", 1), ("=", "b", 2), ("=", "c", 3))
    assert and_clauses(merged, ("=", "c", 3)) == merged
    assert and_clauses(("=", "a", 1), ("=", "a", 1)) == ("=", "a", 1)


def test_and_clauses_keeps_nested_or() -> None:
    either = ("or", ("=", "a", 1), ("=", "a", 2))
    assert and_clauses(either, ("=", "b", 3)) == ("and", either, ("=", "b", 3))


def test_comparison_operands() -> None:
    assert comparison_operands(("is_null", "name")) == ("name", None)
    assert comparison_operands(("in", "id", [1, 2])) == ("id", [1, 2])
    assert comparison_operands(("between", "id", 1, 3)) == ("id", (1, 3))
