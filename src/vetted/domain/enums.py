"""Enumerations used across the vetted domain layer."""

from __future__ import annotations

from enum import StrEnum


class FieldAccess(StrEnum):
    """Visibility tag attached to every declared entity field."""

    READ_ONLY = "read-only"
    READ_WRITE = "read-write-validated"
    INTERNAL = "internal-only"

    @property
    def readable(self) -> bool:
        return self is not FieldAccess.INTERNAL

    @property
    def writable(self) -> bool:
        return self is FieldAccess.READ_WRITE


class RejectionPolicy(StrEnum):
    """How an entity reports a mutation that failed validation."""

    SILENT = "silent"
    RAISE = "raise"


class TransactionKind(StrEnum):
    """Ledger entry types recorded by accounts."""

    OPENING = "opening"
    DEPOSIT = "deposit"
    WITHDRAWAL = "withdrawal"
    TRANSFER_IN = "transfer_in"
    TRANSFER_OUT = "transfer_out"
