"""Person entity with classic getter/setter properties."""

from __future__ import annotations

from vetted.entity import MutationResult, ValidatedEntity, validated
from vetted.entity.rules import (
    contains,
    in_range,
    is_number,
    max_length,
    not_blank,
    optional,
    whole_number,
)


class Person(ValidatedEntity):
    """Assigning to ``name``, ``age``, ``email`` or ``completion`` runs the field rule.

    Under the silent policy an invalid assignment leaves the old value in place.
    """

    __slots__ = ()

    name = validated(not_blank() & max_length(100), settable=True)
    age = validated(whole_number() & in_range(0, 150), settable=True, default=0)
    email = validated(optional(contains("@")), settable=True, default=None)
    completion = validated(is_number() & in_range(0, 100), settable=True, default=0)

    def celebrate_birthday(self) -> MutationResult:
        return self.mutate("age", self.age + 1)


__all__ = ["Person"]
