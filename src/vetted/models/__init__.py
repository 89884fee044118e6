"""Example entities built on :class:`vetted.entity.ValidatedEntity`."""

from vetted.entity import EntityRegistry

from .account import Account, Transaction
from .person import Person
from .student import GradedStudent


def build_registry() -> EntityRegistry:
    """Registry pre-populated with the bundled entity kinds."""

    registry = EntityRegistry()
    registry.register("account", Account)
    registry.register("person", Person)
    registry.register("student", GradedStudent)
    return registry


__all__ = ["Account", "GradedStudent", "Person", "Transaction", "build_registry"]
