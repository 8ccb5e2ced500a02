"""
Tests for binary operators and comparators.
"""

import operator

import pytest

from itchain import BINARY_OPERATORS, Comparator, It, Pipeline, Self, compare_by


class TestBinaryOperators:
    """One operand composes; the subject is the left-hand side."""

    @pytest.mark.parametrize("name, subject, operand, expected", [
        ("eq", 1, 1, True),
        ("eq", 1, 2, False),
        ("neq", 1, 2, True),
        ("gt", 3, 2, True),
        ("gt", 2, 2, False),
        ("gte", 2, 2, True),
        ("lt", 1, 2, True),
        ("lte", 3, 2, False),
        ("add", 10, 1, 11),
        ("sub", 10, 1, 9),
        ("mul", 10, 3, 30),
        ("div", 10, 4, 2.5),
    ])
    def test_subject_is_left_operand(self, name, subject, operand, expected):
        assert getattr(It, name)(operand)(subject) == expected

    def test_sub_order(self):
        assert It.sub(1)(10) == 9
        assert It.div(2)(1) == 0.5

    def test_add_concatenates(self):
        assert It.add("!")("hi") == "hi!"
        assert It.add([3])([1, 2]) == [1, 2, 3]

    def test_chained(self):
        assert It.get("age").gte(18)({"age": 21}) is True
        assert It.get("n").mul(2).add(1)({"n": 4}) == 9

    def test_eq_is_loose_about_numeric_types(self):
        assert It.eq(1.0)(1) is True
        assert It.eq(True)(1) is True

    def test_strict_eq_requires_same_type(self):
        assert It.strict_eq(1)(1) is True
        assert It.strict_eq(1.0)(1) is False
        assert It.strict_eq(True)(1) is False
        assert It.strict_eq("1")(1) is False
        assert It.strict_neq("1")(1) is True
        assert It.strict_neq(1)(1) is False

    def test_division_by_zero_propagates(self):
        with pytest.raises(ZeroDivisionError):
            It.div(0)(1)

    def test_type_errors_propagate(self):
        with pytest.raises(TypeError):
            It.add(1)("a")


class TestOperandCount:

    def test_two_operands_evaluate_immediately(self):
        assert It.sub(10, 1) == 9
        assert It.strict_eq(1, 1.0) is False
        assert It.get("a").gt(2, 1) is True

    def test_no_operands_return_function(self):
        assert It.add() is operator.add
        assert It.sub()(10, 1) == 9
        assert It.strict_eq() is BINARY_OPERATORS["strict_eq"]

    def test_too_many_operands(self):
        with pytest.raises(TypeError):
            It.add(1, 2, 3)

    def test_receiver_pipeline(self):
        assert Self.get("n").add(1).call({"n": 1}) == 2


class TestOperatorRepr:

    def test_repr(self):
        assert repr(It.sub(1)) == "It.sub(1)"
        assert repr(It.get("name").eq("Ann")) == "It.get('name').eq('Ann')"


# =============================================================================
# Comparators
# =============================================================================

class TestCompareBy:

    @pytest.fixture
    def people(self):
        return [
            {"name": "Ann", "age": 40},
            {"name": "Bo", "age": 20},
            {"name": "Cy", "age": 30},
        ]

    def test_three_way_result(self, people):
        by_age = compare_by("age")
        assert by_age(people[0], people[1]) == 1
        assert by_age(people[1], people[0]) == -1
        assert by_age(people[0], people[0]) == 0

    def test_sort_key(self, people):
        ordered = sorted(people, key=compare_by("age").sort_key)
        assert [p["name"] for p in ordered] == ["Bo", "Cy", "Ann"]

    def test_reverse(self, people):
        ordered = sorted(people, key=compare_by("age").reverse().sort_key)
        assert [p["name"] for p in ordered] == ["Ann", "Cy", "Bo"]
        assert compare_by("age").reverse().reverse() == compare_by("age")

    def test_key_pipeline(self):
        by_length = compare_by(It.invoke("strip").compose(len))
        assert by_length(" ab ", "abc") == -1

    def test_key_function(self):
        assert compare_by(len)("aa", "b") == 1

    def test_identity_key(self):
        assert sorted([3, 1, 2], key=compare_by().sort_key) == [1, 2, 3]

    def test_is_not_a_pipeline(self):
        comparator = compare_by("age")
        assert isinstance(comparator, Comparator)
        assert not isinstance(comparator, Pipeline)
        assert not hasattr(comparator, "get")

    def test_repr(self):
        assert repr(compare_by("age")) == "compare_by(It.get('age'))"
        assert repr(compare_by("age").reverse()) == "compare_by(It.get('age')).reverse()"
        assert repr(compare_by()) == "compare_by()"
