"""Domain primitives shared by entities and their specializations."""

from .base import DomainModel
from .enums import FieldAccess, RejectionPolicy, TransactionKind
from .types import AccountId, Amount, Score, StateView

__all__ = [
    "AccountId",
    "Amount",
    "DomainModel",
    "FieldAccess",
    "RejectionPolicy",
    "Score",
    "StateView",
    "TransactionKind",
]
