"""Validation rules: pure predicates over a candidate value and current state.

A rule never performs I/O and never mutates anything. The ``state`` argument is
a read-only view of the entity as it would look after the change, so rules such
as "balance stays above the overdraft limit" can consult sibling fields.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable
from dataclasses import dataclass, replace
from decimal import Decimal
from numbers import Real
from types import MappingProxyType
from typing import Any

from vetted.domain.types import StateView

Predicate = Callable[[Any, StateView], bool]

_NO_STATE: StateView = MappingProxyType({})


def _escape(text: str) -> str:
    return text.replace("{", "{{").replace("}", "}}")


@dataclass(frozen=True, slots=True)
class Rule:
    """Named predicate with a failure message template.

    ``message`` may reference ``{value}`` or ``{value!r}``. Predicates that
    raise ``TypeError``, ``ValueError`` or ``ArithmeticError`` on odd input are
    treated as a failed check.
    """

    name: str
    predicate: Predicate | None = None
    message: str = "{value!r} is not allowed"
    parts: tuple[Rule, ...] = ()
    allow_none: bool = False

    def failure(self, value: Any, state: StateView = _NO_STATE) -> str | None:
        """Return the failure message, or ``None`` when ``value`` passes."""

        if value is None and self.allow_none:
            return None
        if self.parts:
            for part in self.parts:
                reason = part.failure(value, state)
                if reason is not None:
                    return reason
            return None
        if self.predicate is None:
            return None
        try:
            ok = bool(self.predicate(value, state))
        except (TypeError, ValueError, ArithmeticError):
            ok = False
        if ok:
            return None
        return self.message.format(value=value)

    def accepts(self, value: Any, state: StateView = _NO_STATE) -> bool:
        return self.failure(value, state) is None

    def __and__(self, other: Rule) -> Rule:
        if not isinstance(other, Rule):
            return NotImplemented
        return all_of(self, other)


def satisfies(name: str, predicate: Callable[[Any], bool], message: str) -> Rule:
    """Wrap a single-argument predicate that ignores entity state."""

    return Rule(name, lambda value, _state: predicate(value), message)


def all_of(*rules: Rule) -> Rule:
    flattened: list[Rule] = []
    for rule in rules:
        flattened.extend(rule.parts or (rule,))
    return Rule(" & ".join(rule.name for rule in flattened), parts=tuple(flattened))


def is_number() -> Rule:
    return satisfies(
        "number",
        lambda value: isinstance(value, Real | Decimal) and not isinstance(value, bool),
        "{value!r} is not a number",
    )


def whole_number() -> Rule:
    return satisfies(
        "whole number",
        lambda value: isinstance(value, int) and not isinstance(value, bool),
        "{value!r} is not a whole number",
    )


def in_range(lo: Any, hi: Any) -> Rule:
    """Inclusive numeric bound ``lo <= value <= hi``."""

    if lo > hi:
        msg = f"Lower bound {lo} exceeds upper bound {hi}"
        raise ValueError(msg)
    return satisfies(
        f"in [{lo}, {hi}]",
        lambda value: lo <= value <= hi,
        "{value!r} is outside " + _escape(f"[{lo}, {hi}]"),
    )


def at_least(lo: Any) -> Rule:
    return satisfies(f">= {lo}", lambda value: value >= lo, "{value!r} is below " + _escape(str(lo)))


def at_most(hi: Any) -> Rule:
    return satisfies(f"<= {hi}", lambda value: value <= hi, "{value!r} is above " + _escape(str(hi)))


def positive() -> Rule:
    return satisfies("> 0", lambda value: value > 0, "{value!r} must be positive")


def non_negative() -> Rule:
    return satisfies(">= 0", lambda value: value >= 0, "{value!r} must not be negative")


def not_blank() -> Rule:
    return satisfies(
        "not blank",
        lambda value: isinstance(value, str) and bool(value.strip()),
        "{value!r} must be a non-empty string",
    )


def max_length(limit: int) -> Rule:
    return satisfies(
        f"len <= {limit}",
        lambda value: len(value) <= limit,
        "value is longer than " + str(limit) + " characters",
    )


def contains(fragment: str) -> Rule:
    return satisfies(
        f"contains {fragment!r}",
        lambda value: isinstance(value, str) and fragment in value,
        "{value!r} must contain " + _escape(repr(fragment)),
    )


def one_of(choices: Iterable[Any]) -> Rule:
    allowed = tuple(choices)
    rendered = ", ".join(repr(choice) for choice in allowed)
    return satisfies(
        "one of",
        lambda value: value in allowed,
        "{value!r} is not one of " + _escape(rendered),
    )


def optional(rule: Rule) -> Rule:
    """Accept ``None`` in addition to whatever ``rule`` accepts."""

    return replace(rule, name=f"optional {rule.name}", allow_none=True)


__all__ = [
    "Predicate",
    "Rule",
    "all_of",
    "at_least",
    "at_most",
    "contains",
    "in_range",
    "is_number",
    "max_length",
    "non_negative",
    "not_blank",
    "one_of",
    "optional",
    "positive",
    "satisfies",
    "whole_number",
]
