"""Validated entity primitives."""

from .base import ValidatedEntity
from .exceptions import (
    EntityError,
    FieldAccessError,
    InvalidInitialState,
    UnknownFieldError,
    ValidationRejected,
)
from .fields import Derived, FieldSpec, derived, internal, read_only, sequence, validated
from .registry import EntityRegistry
from .result import MutationResult
from .rules import Rule

__all__ = [
    "Derived",
    "EntityError",
    "EntityRegistry",
    "FieldAccessError",
    "FieldSpec",
    "InvalidInitialState",
    "MutationResult",
    "Rule",
    "UnknownFieldError",
    "ValidatedEntity",
    "ValidationRejected",
    "derived",
    "internal",
    "read_only",
    "sequence",
    "validated",
]
