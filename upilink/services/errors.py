"""Payment failure catalogue.

Every user-facing payment error message comes from ``classify_error`` so the
booking UI never hardcodes its own copy. Failures are returned as
``PaymentError`` values; ``PaymentLinkError`` only wraps one for the link
builder, which reports invalid input by raising.
"""

from __future__ import annotations

import math
import re
from decimal import Decimal
from typing import Dict, NamedTuple, Optional, Union

from ..models.payment import DEFAULT_UPI_CONFIG, PaymentError, PaymentErrorKind, UpiConfig
from .formatting import format_inr
from .limits import coerce_amount, installment_plan, validate_amount

MAX_RETRY_DELAY_MS = 30000

_CAMEL_BOUNDARY = re.compile(r"(?<=[a-z0-9])(?=[A-Z])")


class PaymentLinkError(ValueError):
    """Raised by the link builder when its input cannot produce a payable link."""

    def __init__(self, error: PaymentError) -> None:
        self.error = error
        super().__init__(error.message)

    @property
    def kind(self) -> PaymentErrorKind:
        return self.error.kind


class _Entry(NamedTuple):
    message: str
    suggested_action: str
    error_code: str


PAYMENT_ERRORS: Dict[PaymentErrorKind, _Entry] = {
    PaymentErrorKind.BANK_LIMIT_EXCEEDED: _Entry(
        "You've exceeded the bank limit for this payment. Retry with a smaller amount.",
        "Try splitting the payment or use a different payment method",
        "UPI_LIMIT_EXCEEDED",
    ),
    PaymentErrorKind.NETWORK_ERROR: _Entry(
        "Network connection issue. Please check your internet connection.",
        "Check your internet connection and try again",
        "NETWORK_ERROR",
    ),
    PaymentErrorKind.INVALID_IDENTIFIER: _Entry(
        "Invalid UPI ID. Please check and enter a valid UPI ID.",
        "Verify your UPI ID format (e.g., name@bank)",
        "INVALID_UPI_ID",
    ),
    PaymentErrorKind.PAYMENT_FAILED: _Entry(
        "Payment failed. Please try again or contact your bank.",
        "Check your account balance and try again",
        "PAYMENT_FAILED",
    ),
    PaymentErrorKind.VERIFICATION_TIMEOUT: _Entry(
        "Payment verification timeout. Please verify manually.",
        "Check your UPI app for payment status",
        "VERIFICATION_TIMEOUT",
    ),
    PaymentErrorKind.INSUFFICIENT_BALANCE: _Entry(
        "Insufficient balance in your account.",
        "Add money to your account or use a different payment method",
        "INSUFFICIENT_BALANCE",
    ),
    PaymentErrorKind.INVALID_AMOUNT: _Entry(
        "Invalid payment amount. Please check the amount and try again.",
        "Verify the payment amount is correct",
        "INVALID_AMOUNT",
    ),
}

_UNKNOWN = _Entry(
    "An unexpected payment error occurred.",
    "Please try again or contact support",
    "UNKNOWN_ERROR",
)

# Short names and error codes the booking UI already sends
_ALIASES: Dict[str, PaymentErrorKind] = {
    "bank_limit": PaymentErrorKind.BANK_LIMIT_EXCEEDED,
    "upi_limit_exceeded": PaymentErrorKind.BANK_LIMIT_EXCEEDED,
    "invalid_upi": PaymentErrorKind.INVALID_IDENTIFIER,
    "invalid_upi_id": PaymentErrorKind.INVALID_IDENTIFIER,
    "timeout": PaymentErrorKind.VERIFICATION_TIMEOUT,
    "insufficient_funds": PaymentErrorKind.INSUFFICIENT_BALANCE,
    "transaction_failed": PaymentErrorKind.PAYMENT_FAILED,
}


def resolve_kind(cause: Union[str, PaymentErrorKind, None]) -> Optional[PaymentErrorKind]:
    """Map a symbolic cause such as ``"BANK_LIMIT"`` or ``"network-error"`` to a kind."""

    if isinstance(cause, PaymentErrorKind):
        return cause
    if not isinstance(cause, str):
        return None
    key = cause.strip()
    if "_" not in key and key != key.upper():
        key = _CAMEL_BOUNDARY.sub("_", key)
    key = key.lower().replace("-", "_").replace(" ", "_")
    try:
        return PaymentErrorKind(key)
    except ValueError:
        return _ALIASES.get(key)


def calculate_retry_delay(attempt: int, base_delay_ms: int = 1000) -> int:
    """Exponential backoff in milliseconds, capped at 30 seconds."""

    attempt = max(int(attempt), 0)
    # Exponents past 15 cannot lower the result for any positive base; avoid huge integers
    attempt = min(attempt, 15)
    return min(base_delay_ms * 2 ** attempt, MAX_RETRY_DELAY_MS)


def _smaller_amount(value: Decimal, config: UpiConfig) -> int:
    # The bank refused this amount, so propose at least two installments
    # even when it is under our own per-transaction ceiling.
    installments, _ = installment_plan(value, Decimal(str(config.max_amount)))
    installments = max(installments, 2)
    return math.ceil(value / installments)


def classify_error(
    cause: Union[str, PaymentErrorKind, None],
    amount: Optional[float] = None,
    attempt: Optional[int] = None,
    config: UpiConfig = DEFAULT_UPI_CONFIG,
) -> PaymentError:
    """Build the ``PaymentError`` for a failure cause.

    ``amount`` and ``attempt`` are optional context: the amount personalises
    bank-limit and invalid-amount errors and yields a suggested amount, the
    attempt number personalises network errors and sets ``retry_delay_ms``.
    Unknown causes produce a generic retryable ``payment_failed`` error.
    """

    kind = resolve_kind(cause)
    entry = PAYMENT_ERRORS.get(kind) if kind else None
    if entry is None:
        kind, entry = PaymentErrorKind.PAYMENT_FAILED, _UNKNOWN

    message = entry.message
    suggested_amount: Optional[float] = None
    value = coerce_amount(amount)

    if kind is PaymentErrorKind.BANK_LIMIT_EXCEEDED and value is not None and value > 0:
        message = f"Payment amount {format_inr(value)} exceeds your bank limit. Please try with a smaller amount."
        suggested_amount = float(_smaller_amount(value, config))
    elif kind is PaymentErrorKind.INVALID_AMOUNT and amount is not None:
        verdict = validate_amount(amount, config)
        if not verdict.is_valid:
            message = f"{verdict.error}. Please check the amount and try again."
            suggested_amount = verdict.suggested_amount
    elif kind is PaymentErrorKind.NETWORK_ERROR and attempt:
        message = f"Network error (attempt {attempt}). Please check your connection and try again."

    return PaymentError(
        kind=kind,
        message=message,
        retryable=True,
        error_code=entry.error_code,
        suggested_action=entry.suggested_action,
        suggested_amount=suggested_amount,
        retry_delay_ms=calculate_retry_delay(attempt) if attempt is not None else None,
    )
