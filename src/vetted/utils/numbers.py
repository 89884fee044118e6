"""Numeric coercion helpers for money and scores."""

from __future__ import annotations

from decimal import Decimal, InvalidOperation

from vetted.domain.types import Amount


def to_decimal(value: Amount) -> Decimal:
    """Coerce ``value`` to a finite ``Decimal``.

    Floats go through ``str`` so ``0.1`` becomes ``Decimal("0.1")`` rather than
    its binary expansion. Raises ``ValueError`` for anything non-numeric.
    """

    if isinstance(value, bool):
        msg = f"Expected a numeric amount, got {value!r}"
        raise ValueError(msg)
    if isinstance(value, Decimal):
        result = value
    elif isinstance(value, int | float | str):
        try:
            result = Decimal(str(value).strip())
        except InvalidOperation as exc:
            msg = f"Expected a numeric amount, got {value!r}"
            raise ValueError(msg) from exc
    else:
        msg = f"Expected a numeric amount, got {type(value).__name__}"
        raise ValueError(msg)
    if not result.is_finite():
        msg = f"Amount must be finite, got {value!r}"
        raise ValueError(msg)
    return result
