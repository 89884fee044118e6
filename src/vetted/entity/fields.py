"""Field declarations for validated entities.

Fields are declared as class attributes::

    class Gauge(ValidatedEntity):
        label = read_only(rule=not_blank())
        level = validated(in_range(0, 100), default=0)

Each declaration is a data descriptor: reading the attribute goes through
:meth:`ValidatedEntity.read`, and assigning to it either routes through
:meth:`ValidatedEntity.mutate` (``settable=True``) or raises
:class:`FieldAccessError`.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable
from copy import deepcopy
from typing import TYPE_CHECKING, Any

from vetted.domain.enums import FieldAccess
from vetted.domain.types import StateView

from .exceptions import FieldAccessError
from .rules import Rule

if TYPE_CHECKING:
    from .base import ValidatedEntity


class _Missing:
    def __repr__(self) -> str:
        return "MISSING"


MISSING: Any = _Missing()


class FieldSpec:
    """Declaration of one named field, its access tag and its rules."""

    __slots__ = (
        "access",
        "convert",
        "default",
        "default_factory",
        "doc",
        "element_rule",
        "name",
        "rule",
        "settable",
    )

    def __init__(
        self,
        access: FieldAccess = FieldAccess.READ_WRITE,
        *,
        rule: Rule | None = None,
        element_rule: Rule | None = None,
        convert: Callable[[Any], Any] | None = None,
        default: Any = MISSING,
        default_factory: Callable[[], Any] | None = None,
        settable: bool = False,
        doc: str = "",
    ) -> None:
        if default is not MISSING and default_factory is not None:
            msg = "Specify either default or default_factory, not both"
            raise TypeError(msg)
        if settable and access is not FieldAccess.READ_WRITE:
            msg = f"Only {FieldAccess.READ_WRITE} fields can be settable"
            raise TypeError(msg)
        self.name = ""
        self.access = access
        self.rule = rule
        self.element_rule = element_rule
        self.convert = convert
        self.default = default
        self.default_factory = default_factory
        self.settable = settable
        self.doc = doc

    def __set_name__(self, owner: type, name: str) -> None:
        self.name = name

    def __repr__(self) -> str:
        return f"FieldSpec({self.name!r}, access={self.access.value!r})"

    def __get__(self, instance: ValidatedEntity | None, owner: type | None = None) -> Any:
        if instance is None:
            return self
        return instance.read(self.name)

    def __set__(self, instance: ValidatedEntity, value: Any) -> None:
        if not self.settable:
            msg = f"{type(instance).__name__}.{self.name} cannot be assigned directly"
            raise FieldAccessError(msg)
        instance.mutate(self.name, value)

    def __delete__(self, instance: ValidatedEntity) -> None:
        msg = f"{type(instance).__name__}.{self.name} cannot be deleted"
        raise FieldAccessError(msg)

    @property
    def is_sequence(self) -> bool:
        return self.element_rule is not None

    @property
    def has_default(self) -> bool:
        return self.default is not MISSING or self.default_factory is not None

    def initial(self) -> Any:
        if self.default_factory is not None:
            return self.default_factory()
        if self.default is MISSING:
            return MISSING
        return deepcopy(self.default)

    def prepare(self, value: Any) -> Any:
        """Normalize a candidate value into its stored form.

        Sequence fields are stored as fresh lists; other values pass through
        ``convert`` when one is declared.
        """

        if self.is_sequence:
            items = value if isinstance(value, Iterable) and not isinstance(value, str) else None
            if items is None:
                msg = f"{self.name} expects a sequence, got {type(value).__name__}"
                raise TypeError(msg)
            return [self.prepare_element(item) for item in items]
        if self.convert is not None:
            return self.convert(value)
        return value

    def prepare_element(self, value: Any) -> Any:
        if self.convert is not None:
            return self.convert(value)
        return value

    def check(self, value: Any, state: StateView) -> str | None:
        """Return the first rule failure for a prepared value."""

        if self.is_sequence and self.element_rule is not None:
            for item in value:
                reason = self.element_rule.failure(item, state)
                if reason is not None:
                    return reason
        if self.rule is not None:
            return self.rule.failure(value, state)
        return None

    def check_element(self, value: Any, state: StateView) -> str | None:
        if self.element_rule is None:
            return None
        return self.element_rule.failure(value, state)

    def export(self, value: Any) -> Any:
        """Copy a stored value for handing to callers."""

        if isinstance(value, list):
            return tuple(deepcopy(value))
        if isinstance(value, dict | set):
            return deepcopy(value)
        return value

    def describe_rule(self) -> str:
        names = []
        if self.element_rule is not None:
            names.append(f"each {self.element_rule.name}")
        if self.rule is not None:
            names.append(self.rule.name)
        return ", ".join(names) or "-"


def read_only(**kwargs: Any) -> FieldSpec:
    return FieldSpec(FieldAccess.READ_ONLY, **kwargs)


def validated(rule: Rule | None = None, **kwargs: Any) -> FieldSpec:
    return FieldSpec(FieldAccess.READ_WRITE, rule=rule, **kwargs)


def internal(**kwargs: Any) -> FieldSpec:
    return FieldSpec(FieldAccess.INTERNAL, **kwargs)


def sequence(
    element_rule: Rule,
    *,
    access: FieldAccess = FieldAccess.READ_WRITE,
    **kwargs: Any,
) -> FieldSpec:
    """Declare an ordered sequence field whose elements each pass ``element_rule``."""

    kwargs.setdefault("default_factory", list)
    return FieldSpec(access, element_rule=element_rule, **kwargs)


class Derived:
    """Computed, read-only accessor registered for :meth:`ValidatedEntity.derive`.

    The computation never fails: arithmetic, type and empty-sequence errors
    yield ``default`` instead.
    """

    __slots__ = ("default", "doc", "func", "name")

    def __init__(self, func: Callable[[Any], Any], *, default: Any = 0) -> None:
        self.func = func
        self.default = default
        self.doc = func.__doc__ or ""
        self.name = func.__name__

    def __set_name__(self, owner: type, name: str) -> None:
        self.name = name

    def __get__(self, instance: ValidatedEntity | None, owner: type | None = None) -> Any:
        if instance is None:
            return self
        return self.compute(instance)

    def __set__(self, instance: ValidatedEntity, value: Any) -> None:
        msg = f"{type(instance).__name__}.{self.name} is derived and cannot be assigned"
        raise FieldAccessError(msg)

    def compute(self, instance: ValidatedEntity) -> Any:
        try:
            return self.func(instance)
        except (ArithmeticError, TypeError, ValueError):
            return self.default


def derived(*, default: Any = 0) -> Callable[[Callable[[Any], Any]], Derived]:
    """Decorator form of :class:`Derived`."""

    def decorator(func: Callable[[Any], Any]) -> Derived:
        return Derived(func, default=default)

    return decorator


__all__ = [
    "MISSING",
    "Derived",
    "FieldSpec",
    "derived",
    "internal",
    "read_only",
    "sequence",
    "validated",
]
