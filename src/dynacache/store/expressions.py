# Copyright (c) 2026 Veritas Aequitas Holdings LLC. All rights reserved.
"""Condition and update expressions for conditional writes.

Expressions are small immutable trees.  Each node can be evaluated
against an in-memory item and rendered into the two dialects the
bundled stores speak:

* DynamoDB ``ConditionExpression`` / ``UpdateExpression`` text, with
  every attribute name replaced by a ``#nN`` alias collected in an
  :class:`AttributeAliases` (this sidesteps reserved words);
* a Lua boolean expression over a table ``h`` of hash fields, where
  attribute names are passed to the script as ``ARGV`` entries.
"""

from __future__ import annotations

import abc
from dataclasses import dataclass

from dynacache.store.base import Item


class AttributeAliases:
    """Assigns stable placeholders to attribute names."""

    def __init__(self, template: str = "#n{}", start: int = 0) -> None:
        self._template = template
        self._start = start
        self._aliases: dict[str, str] = {}

    def __call__(self, name: str) -> str:
        alias = self._aliases.get(name)
        if alias is None:
            alias = self._template.format(self._start + len(self._aliases))
            self._aliases[name] = alias
        return alias

    @property
    def names(self) -> list[str]:
        """Attribute names in placeholder order."""
        return list(self._aliases)

    def expression_attribute_names(self) -> dict[str, str]:
        """Return the ``ExpressionAttributeNames`` mapping (alias -> name)."""
        return {alias: name for name, alias in self._aliases.items()}


def _number(item: Item, name: str) -> int | None:
    attr = item.get(name)
    if attr is None or "N" not in attr:
        return None
    return int(attr["N"])


class Condition(abc.ABC):
    @abc.abstractmethod
    def evaluate(self, item: Item) -> bool: ...

    @abc.abstractmethod
    def to_dynamodb(self, aliases: AttributeAliases) -> str: ...

    @abc.abstractmethod
    def to_lua(self, argv: AttributeAliases) -> str: ...

    def __and__(self, other: Condition) -> Condition:
        return And(self, other)

    def __or__(self, other: Condition) -> Condition:
        return Or(self, other)


@dataclass(frozen=True)
class AttributeExists(Condition):
    name: str

    def evaluate(self, item: Item) -> bool:
        return self.name in item

    def to_dynamodb(self, aliases: AttributeAliases) -> str:
        return f"attribute_exists({aliases(self.name)})"

    def to_lua(self, argv: AttributeAliases) -> str:
        return f"h[{argv(self.name)}] ~= nil"


@dataclass(frozen=True)
class AttributeNotExists(Condition):
    name: str

    def evaluate(self, item: Item) -> bool:
        return self.name not in item

    def to_dynamodb(self, aliases: AttributeAliases) -> str:
        return f"attribute_not_exists({aliases(self.name)})"

    def to_lua(self, argv: AttributeAliases) -> str:
        return f"h[{argv(self.name)}] == nil"


@dataclass(frozen=True)
class LessThan(Condition):
    """``left < right`` where both sides are number attributes.

    A missing operand makes the comparison false, as in DynamoDB.
    """

    left: str
    right: str

    def evaluate(self, item: Item) -> bool:
        left, right = _number(item, self.left), _number(item, self.right)
        return left is not None and right is not None and left < right

    def to_dynamodb(self, aliases: AttributeAliases) -> str:
        return f"{aliases(self.left)} < {aliases(self.right)}"

    def to_lua(self, argv: AttributeAliases) -> str:
        left, right = argv(self.left), argv(self.right)
        return (
            f"(h[{left}] ~= nil and h[{right}] ~= nil"
            f" and tonumber(h[{left}]) < tonumber(h[{right}]))"
        )


@dataclass(frozen=True, init=False)
class And(Condition):
    operands: tuple[Condition, ...]

    def __init__(self, *operands: Condition) -> None:
        if len(operands) < 2:
            raise ValueError("And needs at least two operands")
        object.__setattr__(self, "operands", operands)

    def evaluate(self, item: Item) -> bool:
        return all(op.evaluate(item) for op in self.operands)

    def to_dynamodb(self, aliases: AttributeAliases) -> str:
        return " and ".join(_group(op.to_dynamodb(aliases), op) for op in self.operands)

    def to_lua(self, argv: AttributeAliases) -> str:
        return " and ".join(f"({op.to_lua(argv)})" for op in self.operands)


@dataclass(frozen=True, init=False)
class Or(Condition):
    operands: tuple[Condition, ...]

    def __init__(self, *operands: Condition) -> None:
        if len(operands) < 2:
            raise ValueError("Or needs at least two operands")
        object.__setattr__(self, "operands", operands)

    def evaluate(self, item: Item) -> bool:
        return any(op.evaluate(item) for op in self.operands)

    def to_dynamodb(self, aliases: AttributeAliases) -> str:
        return " or ".join(_group(op.to_dynamodb(aliases), op) for op in self.operands)

    def to_lua(self, argv: AttributeAliases) -> str:
        return " or ".join(f"({op.to_lua(argv)})" for op in self.operands)


def _group(rendered: str, op: Condition) -> str:
    if isinstance(op, (And, Or)):
        return f"({rendered})"
    return rendered


class Update(abc.ABC):
    @property
    @abc.abstractmethod
    def target(self) -> str:
        """The attribute this update writes."""

    @abc.abstractmethod
    def apply(self, item: Item) -> None:
        """Mutate *item* in place."""

    @abc.abstractmethod
    def to_dynamodb(self, aliases: AttributeAliases) -> str: ...

    @abc.abstractmethod
    def to_lua(self, argv: AttributeAliases) -> str:
        """Render a Lua statement mutating hash ``KEYS[1]`` given fields ``h``."""


@dataclass(frozen=True)
class Increment(Update):
    """``SET attribute = attribute + amount_attribute``.

    The amount is read from another number attribute of the same item at
    the time the update is applied.
    """

    attribute: str
    amount_attribute: str

    @property
    def target(self) -> str:
        return self.attribute

    def apply(self, item: Item) -> None:
        current = _number(item, self.attribute)
        amount = _number(item, self.amount_attribute)
        if current is None or amount is None:
            raise ValueError(
                f"cannot increment {self.attribute!r} by {self.amount_attribute!r}: "
                "both must be number attributes"
            )
        item[self.attribute] = {"N": str(current + amount)}

    def to_dynamodb(self, aliases: AttributeAliases) -> str:
        attr = aliases(self.attribute)
        return f"SET {attr} = {attr} + {aliases(self.amount_attribute)}"

    def to_lua(self, argv: AttributeAliases) -> str:
        attr, amount = argv(self.attribute), argv(self.amount_attribute)
        return (
            f"if h[{attr}] == nil or h[{amount}] == nil then "
            f"return redis.error_reply('increment operands missing') end\n"
            f"redis.call('HINCRBY', KEYS[1], {attr}, tonumber(h[{amount}]))"
        )
