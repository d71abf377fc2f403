"""
Unit tests for the criteria model and serializer.
"""

import pytest

from objectquery.query.criteria import (
    Comparison,
    CompiledQuery,
    CriteriaGroup,
    CriteriaOperator,
    Keyword,
    render_entry,
    serialize,
)


class TestRenderEntry:
    """Rendering single entries."""

    def test_simple_comparison(self):
        """Test a comparison takes the next placeholder."""
        text, bound = render_entry(Comparison("age", CriteriaOperator.GT, (20,)), ())

        assert text == "age > $0"
        assert bound == (20,)

    def test_placeholder_offset(self):
        """Test numbering continues after values already bound."""
        text, bound = render_entry(
            Comparison("name", CriteriaOperator.EQ, ("phu",)),
            ("a", "b"),
        )

        assert text == "name == $2"
        assert bound == ("a", "b", "phu")

    def test_between(self):
        """Test between renders two bounds."""
        text, bound = render_entry(Comparison("age", CriteriaOperator.BETWEEN, (20, 30)), ())

        assert text == "age >= $0 AND age <= $1"
        assert bound == (20, 30)

    def test_in(self):
        """Test in renders an OR chain in parentheses."""
        text, bound = render_entry(Comparison("id", CriteriaOperator.IN, (1, 2, 3)), ())

        assert text == "(id == $0 OR id == $1 OR id == $2)"
        assert bound == (1, 2, 3)

    def test_in_empty(self):
        """Test in without values renders an empty clause."""
        text, bound = render_entry(Comparison("id", CriteriaOperator.IN, ()), ())

        assert text == "()"
        assert bound == ()

    @pytest.mark.parametrize("operator,token", [
        (CriteriaOperator.BEGINSWITH, "BEGINSWITH"),
        (CriteriaOperator.ENDSWITH, "ENDSWITH"),
        (CriteriaOperator.CONTAINS, "CONTAINS"),
    ])
    def test_case_insensitive_marker(self, operator, token):
        """Test [c] follows string operators only when requested."""
        plain, _ = render_entry(Comparison("name", operator, ("x",)), ())
        folded, _ = render_entry(Comparison("name", operator, ("x",), True), ())

        assert plain == f"name {token} $0"
        assert folded == f"name {token}[c] $0"

    def test_keyword(self):
        """Test keywords render as themselves and bind nothing."""
        text, bound = render_entry(Keyword.OR, (1,))

        assert text == "OR"
        assert bound == (1,)


class TestSerialize:
    """Serializing criteria lists."""

    def test_empty(self):
        """Test an empty list serializes to an empty expression."""
        compiled = serialize([])

        assert compiled.expression == ""
        assert compiled.values == ()
        assert not compiled

    def test_top_level_and_join(self):
        """Test top-level entries are AND-joined."""
        compiled = serialize([
            Comparison("age", CriteriaOperator.GT, (20,)),
            Comparison("name", CriteriaOperator.NE, ("bob",)),
        ])

        assert compiled.expression == "age > $0 AND name <> $1"
        assert compiled.values == (20, "bob")

    def test_group(self):
        """Test group members are space-joined in parentheses."""
        compiled = serialize([
            Comparison("name", CriteriaOperator.CONTAINS, ("phu",), True),
            CriteriaGroup([
                Comparison("age", CriteriaOperator.GT, (25,)),
                Keyword.OR,
                Comparison("id", CriteriaOperator.IN, (1001, 1002)),
            ]),
        ])

        assert compiled.expression == (
            "name CONTAINS[c] $0 AND (age > $1 OR (id == $2 OR id == $3))"
        )
        assert compiled.values == ("phu", 25, 1001, 1002)

    def test_not_at_top_level(self):
        """Test NOT wraps everything and emits no fragment."""
        compiled = serialize([
            Keyword.NOT,
            Comparison("age", CriteriaOperator.GT, (25,)),
            Comparison("id", CriteriaOperator.EQ, (1,)),
        ])

        assert compiled.expression == "NOT(age > $0 AND id == $1)"

    def test_not_inside_group_wraps_whole_expression(self):
        """Test NOT in a group still negates the whole expression."""
        compiled = serialize([
            Comparison("age", CriteriaOperator.GT, (25,)),
            CriteriaGroup([
                Keyword.NOT,
                Comparison("id", CriteriaOperator.EQ, (1,)),
            ]),
        ])

        assert compiled.expression == "NOT(age > $0 AND (id == $1))"

    def test_multiple_not_wrap_once(self):
        """Test repeated NOT markers wrap a single time."""
        compiled = serialize([
            Keyword.NOT,
            Comparison("age", CriteriaOperator.GT, (25,)),
            Keyword.NOT,
        ])

        assert compiled.expression == "NOT(age > $0)"

    def test_top_level_keyword_is_emitted(self):
        """Test a stray OR at top level is AND-joined like any entry."""
        compiled = serialize([
            Comparison("a", CriteriaOperator.EQ, (1,)),
            Keyword.OR,
            Comparison("b", CriteriaOperator.EQ, (2,)),
        ])

        assert compiled.expression == "a == $0 AND OR AND b == $1"

    def test_numbering_across_groups(self):
        """Test placeholders increase across groups and operators."""
        compiled = serialize([
            Comparison("a", CriteriaOperator.BETWEEN, (1, 2)),
            CriteriaGroup([
                Comparison("b", CriteriaOperator.IN, (3, 4)),
                Keyword.AND,
                Comparison("c", CriteriaOperator.LTE, (5,)),
            ]),
            Comparison("d", CriteriaOperator.BEGINSWITH, ("x",)),
        ])

        assert compiled.expression == (
            "a >= $0 AND a <= $1 AND ((b == $2 OR b == $3) AND c <= $4) "
            "AND d BEGINSWITH $5"
        )
        assert compiled.values == (1, 2, 3, 4, 5, "x")

    def test_serialize_is_repeatable(self):
        """Test serializing the same list twice gives the same result."""
        criteria = [
            Comparison("age", CriteriaOperator.GT, (25,)),
            CriteriaGroup([Comparison("id", CriteriaOperator.IN, (1, 2))]),
        ]

        assert serialize(criteria) == serialize(criteria)


class TestCompiledQuery:
    """CompiledQuery value object."""

    def test_to_dict(self):
        """Test dictionary form."""
        compiled = CompiledQuery("age > $0", (30,))

        assert compiled.to_dict() == {"expression": "age > $0", "values": [30]}
        assert str(compiled) == "age > $0"
        assert compiled
