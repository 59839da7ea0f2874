"""UPI deep link generation and validation.

Builds and reads ``upi://pay`` payment intents in the NPCI parameter layout::

    upi://pay?pa=<vpa>&pn=<name>&am=<amount>&cu=INR&tn=<note>&tr=<ref>&mc=<mcc>

Every function is pure apart from ``generate_transaction_ref``, which reads
the clock and a random source. Limits come from a ``UpiConfig`` argument that
defaults to ``DEFAULT_UPI_CONFIG``.
"""

from __future__ import annotations

import re
import secrets
import string
import time
from decimal import Decimal
from math import isfinite
from typing import Any, Callable, List, Optional
from urllib.parse import parse_qs, quote, urlsplit

from ..models.payment import (
    DEFAULT_UPI_CONFIG,
    ParsedUpiLink,
    PaymentErrorKind,
    PspInfo,
    SplitSuggestion,
    UpiConfig,
)
from .errors import PaymentLinkError, classify_error
from .formatting import format_inr, to_paise_precision
from .limits import coerce_amount, split_amounts, validate_amount

UPI_ID_PATTERN = re.compile(r"^[A-Za-z0-9._-]{2,256}@[A-Za-z]{2,64}$")
TRANSACTION_REF_PATTERN = re.compile(r"^[A-Za-z0-9]{1,35}$")
MERCHANT_CODE_PATTERN = re.compile(r"^[0-9]{4}$")
AMOUNT_PATTERN = re.compile(r"^[0-9]+(\.[0-9]+)?$")
_PREFIX_PATTERN = re.compile(r"^[A-Za-z0-9]{0,16}$")

_BASE36 = string.digits + string.ascii_uppercase
_RANDOM_SUFFIX_LENGTH = 6
_UNSAFE_TEXT = re.compile(r"[&=]")


def validate_upi_id(upi_id: Any) -> bool:
    """True if ``upi_id`` (surrounding whitespace ignored) is a syntactically valid VPA."""
    if not isinstance(upi_id, str) or not upi_id:
        return False
    return UPI_ID_PATTERN.fullmatch(upi_id.strip()) is not None


def format_upi_id(upi_id: Any) -> str:
    if not isinstance(upi_id, str):
        return ""
    return upi_id.strip().lower()


def get_upi_psp_info(upi_id: str, config: UpiConfig = DEFAULT_UPI_CONFIG) -> Optional[PspInfo]:
    """Known provider for the handle after ``@``, if any."""
    if not validate_upi_id(upi_id):
        return None
    psp_code = upi_id.strip().rsplit("@", 1)[1].lower()
    for psp in config.psps:
        if psp.code == psp_code:
            return psp
    return None


def get_upi_suggestions(handle: Any, limit: int = 5, config: UpiConfig = DEFAULT_UPI_CONFIG) -> List[str]:
    if not isinstance(handle, str) or "@" in handle or not handle.strip():
        return []
    handle = handle.strip()
    return [f"{handle}@{psp.code}" for psp in config.psps][:limit]


def validate_transaction_ref(ref: Any) -> bool:
    if not isinstance(ref, str):
        return False
    return TRANSACTION_REF_PATTERN.fullmatch(ref) is not None


def generate_transaction_ref(
    prefix: Optional[str] = None,
    config: UpiConfig = DEFAULT_UPI_CONFIG,
    clock: Callable[[], float] = time.time,
) -> str:
    """Reference of the form ``{prefix}{unix millis}{6 random base36 chars}``.

    Unique enough for reconciling a payment attempt by eye; it is not a
    security token. The prefix must be alphanumeric and at most 16 characters
    so the whole reference stays within the 35 character UPI limit.
    """
    if prefix is None:
        prefix = config.reference_prefix
    if not _PREFIX_PATTERN.fullmatch(prefix):
        raise ValueError("Reference prefix must be at most 16 alphanumeric characters")

    millis = int(clock() * 1000)
    suffix = "".join(secrets.choice(_BASE36) for _ in range(_RANDOM_SUFFIX_LENGTH))
    return f"{prefix}{millis}{suffix}"


def sanitize_text(value: Any) -> str:
    """Drop characters that would break the query string, then trim."""
    if value is None:
        return ""
    return _UNSAFE_TEXT.sub("", str(value)).strip()


def generate_upi_link(
    upi_id: str,
    amount: float,
    payee_name: str,
    note: str,
    ref: Optional[str] = None,
    merchant_code: Optional[str] = None,
    config: UpiConfig = DEFAULT_UPI_CONFIG,
) -> str:
    """Generate a UPI deep link.

    Raises ``PaymentLinkError`` (kind ``invalid_identifier`` or
    ``invalid_amount``) instead of producing a link the UPI app would reject.
    A pinned ``ref`` or ``merchant_code`` in the wrong format is a caller bug
    and raises a plain ``ValueError``.
    The same arguments always yield the same link; pass a fresh ``ref`` per
    payment attempt.
    """

    if not validate_upi_id(upi_id):
        raise PaymentLinkError(classify_error(PaymentErrorKind.INVALID_IDENTIFIER, config=config))

    if not validate_amount(amount, config).is_valid:
        raise PaymentLinkError(classify_error(PaymentErrorKind.INVALID_AMOUNT, amount=amount, config=config))

    params = [
        ("pa", upi_id.strip()),
        ("pn", sanitize_text(payee_name)),
        ("am", str(to_paise_precision(amount))),
        ("cu", config.currency),
        ("tn", sanitize_text(note)),
    ]

    if ref is not None:
        if not validate_transaction_ref(ref):
            raise ValueError("Transaction reference must be 1-35 alphanumeric characters")
        params.append(("tr", ref))

    if merchant_code is None:
        merchant_code = config.merchant_code
    if merchant_code is not None:
        if not MERCHANT_CODE_PATTERN.fullmatch(merchant_code):
            raise ValueError("Merchant category code must be 4 digits")
        params.append(("mc", merchant_code))

    query = "&".join(f"{key}={quote(value, safe='')}" for key, value in params)
    return f"upi://pay?{query}"


def generate_upi_qr_payload(
    upi_id: str,
    amount: float,
    payee_name: str,
    note: str,
    ref: Optional[str] = None,
    merchant_code: Optional[str] = None,
    config: UpiConfig = DEFAULT_UPI_CONFIG,
) -> str:
    """Generate UPI QR payload (same as deep link for standard UPI)"""
    return generate_upi_link(
        upi_id=upi_id,
        amount=amount,
        payee_name=payee_name,
        note=note,
        ref=ref,
        merchant_code=merchant_code,
        config=config,
    )


def parse_upi_link(uri: Any) -> Optional[ParsedUpiLink]:
    """Read the payment fields back out of a ``upi://pay`` link.

    Returns ``None`` for anything that is not a UPI pay link or lacks the
    payee address, payee name or a numeric amount.
    """
    if not isinstance(uri, str):
        return None

    try:
        parts = urlsplit(uri.strip())
    except ValueError:
        return None

    if parts.scheme.lower() != "upi" or parts.netloc.lower() != "pay" or parts.path not in ("", "/"):
        return None

    params = parse_qs(parts.query, keep_blank_values=True)

    def first(key: str) -> str:
        values = params.get(key)
        return values[0] if values else ""

    upi_id = first("pa")
    amount_text = first("am")
    payee_name = first("pn")
    if not upi_id or not amount_text or not payee_name:
        return None

    if not AMOUNT_PATTERN.fullmatch(amount_text):
        return None
    amount = float(amount_text)
    if not isfinite(amount):
        return None

    return ParsedUpiLink(
        upi_id=upi_id,
        amount=amount,
        payee_name=payee_name,
        note=first("tn"),
        ref=first("tr") or None,
        currency=first("cu") or None,
        merchant_code=first("mc") or None,
    )


def suggest_payment_split(amount: float, config: UpiConfig = DEFAULT_UPI_CONFIG) -> SplitSuggestion:
    """Split an amount into the fewest payments that each fit the per-transaction limit.

    Every installment but the last is ``ceil(amount / n)`` whole rupees; the
    last one takes what remains, so it can be smaller and the installments
    always add up to the original amount. Amounts within the limit come back
    as a single installment. Raises ``PaymentLinkError`` for amounts that are
    not numbers or are below the minimum.
    """
    value = coerce_amount(amount)
    if value is None or value < Decimal(str(config.min_amount)):
        raise PaymentLinkError(classify_error(PaymentErrorKind.INVALID_AMOUNT, amount=amount, config=config))

    ceiling = Decimal(str(config.max_amount))
    amounts = split_amounts(value, ceiling)
    installments = len(amounts)
    per_installment, last_installment = amounts[0], amounts[-1]

    if installments == 1:
        message = (
            f"{format_inr(value)} is within the per-transaction limit of "
            f"{format_inr(ceiling)}. Pay it in a single payment."
        )
    elif per_installment == last_installment:
        message = (
            f"{format_inr(value)} exceeds the per-transaction limit of {format_inr(ceiling)}. "
            f"Pay it in {installments} payments of {format_inr(per_installment)} each."
        )
    else:
        message = (
            f"{format_inr(value)} exceeds the per-transaction limit of {format_inr(ceiling)}. "
            f"Pay it in {installments} payments: {installments - 1} of {format_inr(per_installment)} "
            f"and a final payment of {format_inr(last_installment)}."
        )

    return SplitSuggestion(
        installments=installments,
        per_installment=float(per_installment),
        last_installment=float(last_installment),
        amounts=[float(part) for part in amounts],
        message=message,
    )
