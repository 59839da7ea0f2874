"""Normalisation of payer-reported payment completions."""

from __future__ import annotations

import time
from collections.abc import Mapping
from math import isfinite
from typing import Any, Optional

from ..models.payment import PaymentVerification, VerificationStatus


def _first(payload: Mapping, *keys: str) -> Any:
    for key in keys:
        value = payload.get(key)
        if value not in (None, ""):
            return value
    return None


def parse_upi_response(payload: Any, now: Optional[int] = None) -> Optional[PaymentVerification]:
    """Normalise a UPI app response into a ``PaymentVerification``.

    UPI apps and webhook relays disagree on key names (``txnId`` or
    ``transactionId``, ``bankRef`` or ``referenceId`` for the UTR) and send
    the amount as either a string or a number. Returns ``None`` when the
    payload is not a mapping, the amount is not numeric or the status is not
    one of SUCCESS, FAILED, PENDING. A missing timestamp defaults to ``now``
    (epoch milliseconds).
    """

    if not isinstance(payload, Mapping):
        return None

    raw_amount = _first(payload, "amount")
    if raw_amount is None:
        amount = 0.0
    elif isinstance(raw_amount, bool):
        return None
    else:
        try:
            amount = float(raw_amount)
        except (TypeError, ValueError):
            return None
        if not isfinite(amount):
            return None

    raw_status = _first(payload, "status")
    try:
        status = VerificationStatus(str(raw_status).upper()) if raw_status is not None else VerificationStatus.PENDING
    except ValueError:
        return None

    timestamp = _first(payload, "timestamp")
    if timestamp is None:
        timestamp = now if now is not None else int(time.time() * 1000)
    try:
        timestamp = int(timestamp)
    except (TypeError, ValueError, OverflowError):
        return None

    bank_reference = _first(payload, "bankRef", "referenceId")

    return PaymentVerification(
        transaction_id=str(_first(payload, "txnId", "transactionId") or ""),
        bank_reference=str(bank_reference) if bank_reference is not None else None,
        amount=amount,
        timestamp=timestamp,
        upi_id=str(_first(payload, "upiId", "payeeUpiId") or ""),
        status=status,
    )


def validate_payment_verification(record: PaymentVerification) -> bool:
    """A record is complete when it names a transaction, a positive amount, a time and a payee."""
    return bool(
        record.transaction_id
        and record.amount > 0
        and record.timestamp
        and record.upi_id
        and record.status
    )
