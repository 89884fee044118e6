"""Exceptions raised by validated entities."""

from __future__ import annotations

from collections.abc import Sequence
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .result import MutationResult


class EntityError(RuntimeError):
    """Base class for entity failures."""


class ValidationRejected(EntityError):
    """Raised under the ``raise`` policy when a mutation fails its rule.

    The entity is left exactly as it was before the call.
    """

    def __init__(self, result: MutationResult) -> None:
        self.result = result
        super().__init__(f"{result.op} on {result.field!r} rejected: {result.reason}")


class InvalidInitialState(EntityError):
    """Raised when constructor values violate a field invariant."""

    def __init__(self, entity_type: str, problems: Sequence[str]) -> None:
        self.entity_type = entity_type
        self.problems = tuple(problems)
        joined = "; ".join(self.problems)
        super().__init__(f"Cannot construct {entity_type}: {joined}")


class FieldAccessError(EntityError, AttributeError):
    """Raised when a caller reaches past a field's access tag."""


class UnknownFieldError(EntityError, KeyError):
    """Raised when a field or derived value name is not declared."""

    def __str__(self) -> str:
        return str(self.args[0]) if self.args else ""
