"""Outcome of a mutation attempt."""

from __future__ import annotations

from typing import Any

from vetted.domain.base import DomainModel


class MutationResult(DomainModel):
    """Immutable record returned by every mutating entity operation.

    Attributes:
        ok: Whether the change was applied.
        op: Operation name (``"mutate"``, ``"append"``, ``"deposit"``...).
        field: Field the operation targeted.
        value: Value the caller asked for.
        previous: Field value before the call.
        current: Field value after the call; equals ``previous`` on rejection.
        reason: Failure message when ``ok`` is False.
    """

    ok: bool
    op: str
    field: str
    value: Any = None
    previous: Any = None
    current: Any = None
    reason: str | None = None

    def __bool__(self) -> bool:
        return self.ok


__all__ = ["MutationResult"]
