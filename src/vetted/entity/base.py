"""Validated entity base class.

State for every entity lives in a module-private table keyed by the instance,
not on the instance itself. Instances carry no ``__dict__``, attribute
assignment is refused unless it targets a settable field or a property, and
every change is validated against the candidate state before anything is
written.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Iterator, Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, ClassVar
from weakref import WeakKeyDictionary

from vetted.config import get_settings
from vetted.domain.enums import RejectionPolicy

from .exceptions import (
    FieldAccessError,
    InvalidInitialState,
    UnknownFieldError,
    ValidationRejected,
)
from .fields import MISSING, Derived, FieldSpec
from .result import MutationResult

logger = logging.getLogger(__name__)

_RESERVED = frozenset({"policy", "strict"})


@dataclass(slots=True)
class _Record:
    values: dict[str, Any]
    policy: RejectionPolicy
    lock: threading.RLock = field(default_factory=threading.RLock)


_RECORDS: WeakKeyDictionary[ValidatedEntity, _Record] = WeakKeyDictionary()


class ValidatedEntity:
    """Record type with read accessors and rule-checked mutators."""

    __slots__ = ("__weakref__",)

    _fields: ClassVar[Mapping[str, FieldSpec]] = MappingProxyType({})
    _derived: ClassVar[Mapping[str, Derived]] = MappingProxyType({})

    def __init_subclass__(cls, **kwargs: Any) -> None:
        super().__init_subclass__(**kwargs)
        fields: dict[str, FieldSpec] = {}
        derivations: dict[str, Derived] = {}
        for klass in reversed(cls.__mro__):
            for name, attr in vars(klass).items():
                if isinstance(attr, FieldSpec):
                    fields[name] = attr
                elif isinstance(attr, Derived):
                    derivations[name] = attr
        clash = _RESERVED & fields.keys()
        if clash:
            msg = f"{cls.__name__} declares reserved field names: {sorted(clash)}"
            raise TypeError(msg)
        cls._fields = MappingProxyType(fields)
        cls._derived = MappingProxyType(derivations)

    def __init__(
        self,
        *,
        policy: RejectionPolicy | str | None = None,
        strict: bool | None = None,
        **values: Any,
    ) -> None:
        settings = get_settings()
        resolved_policy = RejectionPolicy(policy) if policy is not None else settings.rejection_policy
        strict_mode = settings.strict_construction if strict is None else strict
        kind = type(self).__name__

        unknown = sorted(values.keys() - self._fields.keys())
        if unknown:
            raise InvalidInitialState(kind, [f"unknown field {name!r}" for name in unknown])

        # Missing or unconvertible values cannot be stored at all, so they fail
        # construction even when strict mode is off.
        problems: list[str] = []
        state: dict[str, Any] = {}
        for name, spec in self._fields.items():
            raw = values[name] if name in values else spec.initial()
            if raw is MISSING:
                problems.append(f"{name} is required")
                continue
            try:
                state[name] = spec.prepare(raw)
            except (TypeError, ValueError, ArithmeticError) as exc:
                problems.append(f"{name}: {exc}")
        if problems:
            raise InvalidInitialState(kind, problems)

        view = MappingProxyType(state)
        for name, spec in self._fields.items():
            reason = spec.check(state[name], view)
            if reason is not None:
                problems.append(f"{name}: {reason}")

        if problems:
            if strict_mode:
                raise InvalidInitialState(kind, problems)
            logger.warning("Accepting invalid initial state for %s: %s", kind, "; ".join(problems))

        _RECORDS[self] = _Record(values=state, policy=resolved_policy)
        logger.debug("Constructed %s with fields %s", kind, sorted(state))

    # -- attribute guard -------------------------------------------------

    def __setattr__(self, name: str, value: Any) -> None:
        target = getattr(type(self), name, None)
        if isinstance(target, FieldSpec | Derived | property):
            object.__setattr__(self, name, value)
            return
        msg = f"{type(self).__name__} has no assignable attribute {name!r}"
        raise FieldAccessError(msg)

    def __delattr__(self, name: str) -> None:
        msg = f"{type(self).__name__}.{name} cannot be deleted"
        raise FieldAccessError(msg)

    def __repr__(self) -> str:
        shown = ", ".join(f"{name}={value!r}" for name, value in self._iter_readable())
        return f"{type(self).__name__}({shown})"

    # -- public contract -------------------------------------------------

    @property
    def policy(self) -> RejectionPolicy:
        return self._record.policy

    @classmethod
    def fields(cls) -> tuple[FieldSpec, ...]:
        return tuple(cls._fields.values())

    @classmethod
    def derivations(cls) -> tuple[Derived, ...]:
        return tuple(cls._derived.values())

    def read(self, name: str) -> Any:
        """Return a copy of a readable field's current value."""

        spec = self._spec(name)
        if not spec.access.readable:
            msg = f"{type(self).__name__}.{name} is internal"
            raise FieldAccessError(msg)
        return self._get(name)

    def mutate(self, name: str, value: Any) -> MutationResult:
        """Replace a read-write field after validating ``value``."""

        self._require_writable(name, "mutate")
        return self._update("mutate", {name: value})

    def append(self, name: str, value: Any) -> MutationResult:
        """Append ``value`` to a sequence field after checking the element rule."""

        spec = self._require_writable(name, "append")
        if not spec.is_sequence:
            msg = f"{type(self).__name__}.{name} is not a sequence field"
            raise FieldAccessError(msg)
        record = self._record
        with record.lock:
            current = record.values[name]
            try:
                element = spec.prepare_element(value)
            except (TypeError, ValueError, ArithmeticError) as exc:
                return self._reject("append", name, value, str(exc))
            candidate = {**record.values, name: [*current, element]}
            view = MappingProxyType(candidate)
            reason = spec.check_element(element, view)
            if reason is None and spec.rule is not None:
                reason = spec.rule.failure(candidate[name], view)
            if reason is not None:
                return self._reject("append", name, value, reason)
            record.values = candidate
        logger.debug("%s.%s appended %r", type(self).__name__, name, element)
        return MutationResult(
            ok=True,
            op="append",
            field=name,
            value=value,
            previous=spec.export(current),
            current=spec.export(candidate[name]),
        )

    def derive(self, name: str) -> Any:
        """Compute a registered derived value; falls back to its default."""

        try:
            derivation = self._derived[name]
        except KeyError as exc:
            msg = f"{type(self).__name__} has no derived value {name!r}"
            raise UnknownFieldError(msg) from exc
        return derivation.compute(self)

    def snapshot(self) -> Mapping[str, Any]:
        """Read-only mapping of every readable field."""

        return MappingProxyType(dict(self._iter_readable()))

    # -- subclass helpers --------------------------------------------------

    @property
    def _record(self) -> _Record:
        try:
            return _RECORDS[self]
        except KeyError as exc:
            msg = f"{type(self).__name__} was not initialised"
            raise FieldAccessError(msg) from exc

    def _spec(self, name: str) -> FieldSpec:
        try:
            return self._fields[name]
        except KeyError as exc:
            msg = f"{type(self).__name__} has no field {name!r}"
            raise UnknownFieldError(msg) from exc

    def _require_writable(self, name: str, op: str) -> FieldSpec:
        spec = self._spec(name)
        if not spec.access.writable:
            msg = f"Cannot {op} {type(self).__name__}.{name}: field is {spec.access.value}"
            raise FieldAccessError(msg)
        return spec

    def _get(self, name: str) -> Any:
        """Copy of any field's value, internal fields included."""

        spec = self._spec(name)
        return spec.export(self._record.values[name])

    def _iter_readable(self) -> Iterator[tuple[str, Any]]:
        values = self._record.values
        for name, spec in self._fields.items():
            if spec.access.readable:
                yield name, spec.export(values[name])

    def _update(
        self,
        op: str,
        changes: Mapping[str, Any],
        *,
        subject: Any = MISSING,
    ) -> MutationResult:
        """Validate and apply ``changes`` together, or not at all.

        Ignores access tags, so subclasses use it for read-only bookkeeping.
        The result reports the first changed field; ``subject`` overrides the
        value echoed back (e.g. the deposit amount rather than the new balance).
        """

        if not changes:
            msg = "No changes supplied"
            raise ValueError(msg)
        primary = next(iter(changes))
        echoed = changes[primary] if subject is MISSING else subject
        record = self._record
        with record.lock:
            candidate = dict(record.values)
            for name, raw in changes.items():
                spec = self._spec(name)
                try:
                    candidate[name] = spec.prepare(raw)
                except (TypeError, ValueError, ArithmeticError) as exc:
                    return self._reject(op, name, echoed, str(exc))
            view = MappingProxyType(candidate)
            for name in changes:
                reason = self._fields[name].check(candidate[name], view)
                if reason is not None:
                    return self._reject(op, name, echoed, reason)
            previous = record.values[primary]
            record.values = candidate
        spec = self._fields[primary]
        logger.debug("%s.%s %s applied", type(self).__name__, primary, op)
        return MutationResult(
            ok=True,
            op=op,
            field=primary,
            value=echoed,
            previous=spec.export(previous),
            current=spec.export(candidate[primary]),
        )

    def _reject(self, op: str, name: str, value: Any, reason: str) -> MutationResult:
        """Build a failed result and surface it per the rejection policy."""

        record = self._record
        current = self._fields[name].export(record.values[name])
        result = MutationResult(
            ok=False,
            op=op,
            field=name,
            value=value,
            previous=current,
            current=current,
            reason=reason,
        )
        logger.info("%s.%s %s rejected: %s", type(self).__name__, name, op, reason)
        if record.policy is RejectionPolicy.RAISE:
            raise ValidationRejected(result)
        return result


__all__ = ["ValidatedEntity"]
