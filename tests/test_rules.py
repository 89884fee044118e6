from __future__ import annotations

from decimal import Decimal
from types import MappingProxyType

import pytest

from vetted.entity.rules import (
    Rule,
    contains,
    in_range,
    is_number,
    max_length,
    not_blank,
    one_of,
    optional,
    positive,
    whole_number,
)


def test_in_range_is_inclusive() -> None:
    rule = in_range(0, 100)
    assert rule.accepts(0)
    assert rule.accepts(100)
    assert not rule.accepts(100.01)
    assert rule.failure(-1) == "-1 is outside [0, 100]"


def test_in_range_rejects_inverted_bounds() -> None:
    with pytest.raises(ValueError):
        in_range(10, 1)


def test_predicate_errors_count_as_failures() -> None:
    assert not in_range(0, 10).accepts("five")
    assert not positive().accepts(None)


def test_combined_rule_reports_first_failure() -> None:
    rule = is_number() & in_range(0, 100)
    assert rule.failure("x") == "'x' is not a number"
    assert rule.failure(150) == "150 is outside [0, 100]"
    assert rule.accepts(Decimal("42.5"))
    assert rule.name == "number & in [0, 100]"


def test_number_rules_exclude_bool() -> None:
    assert not is_number().accepts(True)
    assert not whole_number().accepts(False)
    assert whole_number().accepts(3)
    assert not whole_number().accepts(3.0)


def test_string_rules() -> None:
    assert not not_blank().accepts("   ")
    assert not_blank().accepts("Ada")
    assert not max_length(3).accepts("abcd")
    assert contains("@").accepts("ada@example.com")


def test_optional_accepts_none() -> None:
    rule = optional(contains("@"))
    assert rule.accepts(None)
    assert not rule.accepts("nobody")


def test_one_of_message_with_braces() -> None:
    rule = one_of(["{a}", "b"])
    assert rule.accepts("b")
    assert rule.failure("c") == "'c' is not one of '{a}', 'b'"


def test_state_aware_rule() -> None:
    rule = Rule(
        "below ceiling",
        lambda value, state: value <= state["ceiling"],
        "{value} exceeds the ceiling",
    )
    state = MappingProxyType({"ceiling": 5})
    assert rule.accepts(5, state)
    assert rule.failure(6, state) == "6 exceeds the ceiling"
