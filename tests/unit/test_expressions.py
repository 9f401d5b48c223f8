# Copyright (c) 2026 Veritas Aequitas Holdings LLC. All rights reserved.
"""Tests for condition/update expressions and their rendering."""

from __future__ import annotations

import pytest

from dynacache.cache.entry import AttributeNames
from dynacache.cache.expiration import refresh_condition, refresh_update
from dynacache.store.expressions import (
    And,
    AttributeAliases,
    AttributeExists,
    AttributeNotExists,
    Increment,
    LessThan,
    Or,
)


class TestAttributeAliases:
    def test_stable_placeholders(self) -> None:
        aliases = AttributeAliases()
        assert aliases("ttl") == "#n0"
        assert aliases("span") == "#n1"
        assert aliases("ttl") == "#n0"
        assert aliases.names == ["ttl", "span"]
        assert aliases.expression_attribute_names() == {"#n0": "ttl", "#n1": "span"}

    def test_template_and_start(self) -> None:
        argv = AttributeAliases("ARGV[{}]", start=1)
        assert argv("a") == "ARGV[1]"
        assert argv("b") == "ARGV[2]"


class TestEvaluate:
    def test_exists(self) -> None:
        assert AttributeExists("a").evaluate({"a": {"N": "1"}})
        assert not AttributeExists("a").evaluate({})
        assert AttributeNotExists("a").evaluate({})

    def test_less_than_requires_both_numbers(self) -> None:
        cond = LessThan("a", "b")
        assert cond.evaluate({"a": {"N": "1"}, "b": {"N": "2"}})
        assert not cond.evaluate({"a": {"N": "2"}, "b": {"N": "2"}})
        assert not cond.evaluate({"a": {"N": "1"}})
        assert not cond.evaluate({"a": {"S": "1"}, "b": {"N": "2"}})

    def test_operators_compose(self) -> None:
        cond = AttributeExists("a") & (AttributeNotExists("b") | LessThan("a", "b"))
        assert isinstance(cond, And)
        assert isinstance(cond.operands[1], Or)
        assert cond.evaluate({"a": {"N": "1"}})
        assert cond.evaluate({"a": {"N": "1"}, "b": {"N": "5"}})
        assert not cond.evaluate({"a": {"N": "9"}, "b": {"N": "5"}})

    def test_boolean_nodes_need_two_operands(self) -> None:
        with pytest.raises(ValueError):
            And(AttributeExists("a"))
        with pytest.raises(ValueError):
            Or(AttributeExists("a"))


class TestIncrement:
    def test_apply(self) -> None:
        item = {"t": {"N": "10"}, "s": {"N": "5"}}
        Increment("t", "s").apply(item)
        assert item["t"] == {"N": "15"}

    def test_apply_missing_operand(self) -> None:
        with pytest.raises(ValueError):
            Increment("t", "s").apply({"t": {"N": "10"}})

    def test_target(self) -> None:
        assert Increment("t", "s").target == "t"


class TestDynamoDbRendering:
    def test_refresh_expressions(self) -> None:
        names = AttributeNames()
        aliases = AttributeAliases()
        condition = refresh_condition(names).to_dynamodb(aliases)
        update = refresh_update(names).to_dynamodb(aliases)

        assert condition == (
            "attribute_exists(#n0) and (attribute_not_exists(#n1) or #n2 < #n1)"
        )
        assert update == "SET #n2 = #n2 + #n0"
        assert aliases.expression_attribute_names() == {
            "#n0": "sliding_exp_timespan",
            "#n1": "abs_exp_timestamp",
            "#n2": "ttl_value",
        }

    def test_reserved_names_never_appear_bare(self) -> None:
        aliases = AttributeAliases()
        rendered = LessThan("ttl", "size").to_dynamodb(aliases)
        assert "ttl" not in rendered
        assert "size" not in rendered


class TestLuaRendering:
    def test_refresh_condition(self) -> None:
        argv = AttributeAliases("ARGV[{}]", start=1)
        lua = refresh_condition(AttributeNames()).to_lua(argv)
        assert lua.startswith("(h[ARGV[1]] ~= nil) and (")
        assert "h[ARGV[2]] == nil" in lua
        assert "tonumber(h[ARGV[3]]) < tonumber(h[ARGV[2]])" in lua
        assert argv.names == ["sliding_exp_timespan", "abs_exp_timestamp", "ttl_value"]

    def test_increment(self) -> None:
        argv = AttributeAliases("ARGV[{}]", start=1)
        lua = Increment("t", "s").to_lua(argv)
        assert "redis.call('HINCRBY', KEYS[1], ARGV[1], tonumber(h[ARGV[2]]))" in lua
