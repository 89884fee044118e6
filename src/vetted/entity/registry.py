"""Registry mapping entity kind names to entity classes."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from .base import ValidatedEntity


@dataclass(slots=True)
class EntityRegistry:
    """Runtime registry of constructible entity kinds."""

    _kinds: dict[str, type[ValidatedEntity]] = field(default_factory=dict)

    def register(
        self,
        kind: str,
        entity_type: type[ValidatedEntity],
        *,
        override: bool = False,
    ) -> None:
        key = kind.strip().lower()
        if not key:
            msg = "Entity kind must not be blank"
            raise ValueError(msg)
        if not override and key in self._kinds:
            existing = self._kinds[key]
            msg = f"Kind {key!r} already registered ({existing.__name__})"
            raise ValueError(msg)
        self._kinds[key] = entity_type

    def get(self, kind: str) -> type[ValidatedEntity]:
        try:
            return self._kinds[kind.strip().lower()]
        except KeyError as exc:
            msg = f"Unknown entity kind {kind!r}"
            raise KeyError(msg) from exc

    def kinds(self) -> tuple[str, ...]:
        return tuple(sorted(self._kinds))

    def create(self, kind: str, **values: Any) -> ValidatedEntity:
        return self.get(kind)(**values)


__all__ = ["EntityRegistry"]
