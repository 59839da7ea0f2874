"""Amount validation and split planning against UPI transaction limits.

Amounts are rupees (major units). Arithmetic is done on ``Decimal`` so that
paise-precision inputs such as ``100000.01`` compare exactly against the
configured ceiling.
"""

from __future__ import annotations

import math
from decimal import Decimal, InvalidOperation
from typing import Any, List, Optional, Tuple

from ..models.payment import DEFAULT_UPI_CONFIG, AmountValidation, UpiConfig
from .formatting import format_inr


def coerce_amount(amount: Any) -> Optional[Decimal]:
    """Return the amount as a finite ``Decimal``, or ``None`` if it is not a number.

    Strings are not numbers here: callers hand over parsed values, and
    accepting ``"250"`` would hide a type mix-up upstream.
    """

    if isinstance(amount, bool) or not isinstance(amount, (int, float, Decimal)):
        return None
    try:
        value = Decimal(str(amount))
    except InvalidOperation:
        return None
    if not value.is_finite():
        return None
    return value


def installment_plan(value: Decimal, ceiling: Decimal) -> Tuple[int, Decimal]:
    """Fewest equal installments covering ``value`` with none above ``ceiling``.

    Returns ``(installments, per_installment)``. With a single installment the
    amount is returned untouched; otherwise each installment is rounded up to
    whole rupees.
    """

    if value <= ceiling:
        return 1, value

    installments = math.ceil(value / ceiling)
    per_installment = Decimal(math.ceil(value / installments))
    # A fractional ceiling can push the rounded share just above it
    while per_installment > ceiling:
        installments += 1
        per_installment = Decimal(math.ceil(value / installments))
    return installments, per_installment


def validate_amount(amount: Any, config: UpiConfig = DEFAULT_UPI_CONFIG) -> AmountValidation:
    value = coerce_amount(amount)
    if value is None:
        return AmountValidation(is_valid=False, error="Amount must be a valid number")

    minimum = Decimal(str(config.min_amount))
    maximum = Decimal(str(config.max_amount))

    if value < minimum:
        return AmountValidation(is_valid=False, error=f"Minimum amount is {format_inr(minimum)}")

    if value > maximum:
        _, per_installment = installment_plan(value, maximum)
        return AmountValidation(
            is_valid=False,
            error=f"Maximum amount is {format_inr(maximum)}",
            suggested_amount=float(per_installment),
        )

    return AmountValidation(is_valid=True)


def split_amounts(value: Decimal, ceiling: Decimal) -> List[Decimal]:
    """Installment amounts in payment order; the last one absorbs the rounding."""

    installments, per_installment = installment_plan(value, ceiling)
    if installments == 1:
        return [value]
    head = [per_installment] * (installments - 1)
    return head + [value - per_installment * (installments - 1)]
