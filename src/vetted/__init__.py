"""In-memory entities whose state only changes through validated accessors."""

from vetted.domain import FieldAccess, RejectionPolicy
from vetted.entity import (
    EntityError,
    FieldAccessError,
    InvalidInitialState,
    MutationResult,
    UnknownFieldError,
    ValidatedEntity,
    ValidationRejected,
)

__version__ = "0.1.0"

__all__ = [
    "EntityError",
    "FieldAccess",
    "FieldAccessError",
    "InvalidInitialState",
    "MutationResult",
    "RejectionPolicy",
    "UnknownFieldError",
    "ValidatedEntity",
    "ValidationRejected",
    "__version__",
]
