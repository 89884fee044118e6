"""Bank account entity with a guarded balance and a private ledger."""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import Any

from pydantic import Field

from vetted.domain.base import DomainModel
from vetted.domain.enums import TransactionKind
from vetted.domain.types import AccountId, Amount, StateView
from vetted.entity import (
    MutationResult,
    Rule,
    ValidatedEntity,
    ValidationRejected,
    internal,
    read_only,
)
from vetted.entity.rules import non_negative, not_blank, positive
from vetted.utils import to_decimal, utc_now


class Transaction(DomainModel):
    """Ledger line recorded for every applied balance change."""

    kind: TransactionKind
    amount: Decimal
    balance_after: Decimal
    at: datetime = Field(default_factory=utc_now)


def _within_overdraft(value: Decimal, state: StateView) -> bool:
    limit = state["overdraft_limit"]
    return value >= -limit


class Account(ValidatedEntity):
    """Account whose balance only moves through deposits and withdrawals.

    The balance may not drop below ``-overdraft_limit``; with the default
    limit of zero it stays non-negative.
    """

    __slots__ = ()

    account_id = read_only(rule=not_blank())
    overdraft_limit = read_only(rule=non_negative(), convert=to_decimal, default=Decimal("0"))
    balance = read_only(
        rule=Rule(
            "within overdraft limit",
            _within_overdraft,
            "insufficient funds: balance would be {value}",
        ),
        convert=to_decimal,
        default=Decimal("0"),
    )
    transactions = internal(default_factory=list)

    def __init__(
        self,
        account_id: AccountId | str,
        balance: Amount = Decimal("0"),
        **kwargs: Any,
    ) -> None:
        super().__init__(account_id=account_id, balance=balance, **kwargs)
        opening = self._get("balance")
        if opening:
            self._update(
                "open",
                {"transactions": [self._entry(TransactionKind.OPENING, opening, opening)]},
            )

    def deposit(self, amount: Amount) -> MutationResult:
        """Add a strictly positive amount."""

        return self._move("deposit", TransactionKind.DEPOSIT, amount, sign=1)

    def withdraw(self, amount: Amount) -> MutationResult:
        """Remove an amount in ``(0, balance + overdraft_limit]``."""

        return self._move("withdraw", TransactionKind.WITHDRAWAL, amount, sign=-1)

    def transfer_to(self, other: Account, amount: Amount) -> MutationResult:
        """Move ``amount`` to ``other``; the source side result is returned."""

        if other is self:
            return self._reject("transfer", "balance", amount, "cannot transfer to the same account")
        outbound = self._move("transfer", TransactionKind.TRANSFER_OUT, amount, sign=-1)
        if not outbound.ok:
            return outbound
        try:
            inbound = other._move("transfer", TransactionKind.TRANSFER_IN, amount, sign=1)
        except ValidationRejected:
            self._undo_transfer_out(outbound.value)
            raise
        if not inbound.ok:
            self._undo_transfer_out(outbound.value)
            return self._reject(
                "transfer",
                "balance",
                amount,
                f"target account rejected the deposit: {inbound.reason}",
            )
        return outbound

    def history(self) -> tuple[Transaction, ...]:
        return self._get("transactions")

    def _move(self, op: str, kind: TransactionKind, amount: Amount, *, sign: int) -> MutationResult:
        try:
            value = to_decimal(amount)
        except ValueError as exc:
            return self._reject(op, "balance", amount, str(exc))
        reason = positive().failure(value)
        if reason is not None:
            return self._reject(op, "balance", amount, reason)
        with self._record.lock:
            new_balance = self._get("balance") + sign * value
            ledger = [*self._get("transactions"), self._entry(kind, value, new_balance)]
            return self._update(
                op,
                {"balance": new_balance, "transactions": ledger},
                subject=value,
            )

    def _undo_transfer_out(self, amount: Decimal) -> None:
        with self._record.lock:
            ledger = list(self._get("transactions"))
            for index in range(len(ledger) - 1, -1, -1):
                entry = ledger[index]
                if entry.kind is TransactionKind.TRANSFER_OUT and entry.amount == amount:
                    del ledger[index]
                    break
            self._update(
                "transfer_rollback",
                {"balance": self._get("balance") + amount, "transactions": ledger},
                subject=amount,
            )

    @staticmethod
    def _entry(kind: TransactionKind, amount: Decimal, balance_after: Decimal) -> Transaction:
        return Transaction(kind=kind, amount=amount, balance_after=balance_after)


__all__ = ["Account", "Transaction"]
