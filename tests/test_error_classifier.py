import pytest

from upilink.models.payment import PaymentErrorKind
from upilink.services.errors import PAYMENT_ERRORS, calculate_retry_delay, classify_error, resolve_kind


@pytest.mark.parametrize("kind", list(PaymentErrorKind))
def test_every_kind_has_catalogue_entry(kind):
    error = classify_error(kind)
    assert error.kind is kind
    assert error.message == PAYMENT_ERRORS[kind].message
    assert error.retryable is True
    assert error.suggested_action
    assert error.suggested_amount is None
    assert error.retry_delay_ms is None


@pytest.mark.parametrize(
    "cause, expected",
    [
        ("BANK_LIMIT", PaymentErrorKind.BANK_LIMIT_EXCEEDED),
        ("BankLimitExceeded", PaymentErrorKind.BANK_LIMIT_EXCEEDED),
        ("network-error", PaymentErrorKind.NETWORK_ERROR),
        ("NetworkError", PaymentErrorKind.NETWORK_ERROR),
        ("INVALID_UPI", PaymentErrorKind.INVALID_IDENTIFIER),
        ("InvalidIdentifier", PaymentErrorKind.INVALID_IDENTIFIER),
        ("TIMEOUT", PaymentErrorKind.VERIFICATION_TIMEOUT),
        ("verification timeout", PaymentErrorKind.VERIFICATION_TIMEOUT),
        ("INSUFFICIENT_BALANCE", PaymentErrorKind.INSUFFICIENT_BALANCE),
        ("PAYMENT_FAILED", PaymentErrorKind.PAYMENT_FAILED),
        ("invalid_amount", PaymentErrorKind.INVALID_AMOUNT),
    ],
)
def test_cause_aliases(cause, expected):
    assert resolve_kind(cause) is expected


@pytest.mark.parametrize("cause", ["SOMETHING_ODD", "", None, 42])
def test_unknown_cause_is_generic_and_retryable(cause):
    error = classify_error(cause)
    assert error.kind is PaymentErrorKind.PAYMENT_FAILED
    assert error.error_code == "UNKNOWN_ERROR"
    assert error.message == "An unexpected payment error occurred."
    assert error.retryable is True


def test_bank_limit_with_amount_suggests_smaller_payment():
    error = classify_error("BANK_LIMIT", amount=50000)
    assert error.message.startswith("Payment amount ₹50,000 exceeds your bank limit")
    assert error.suggested_amount == 25000
    assert error.error_code == "UPI_LIMIT_EXCEEDED"


def test_bank_limit_above_ceiling_uses_split():
    error = classify_error("BANK_LIMIT", amount=250000)
    assert error.suggested_amount == 83334


def test_invalid_amount_with_context():
    error = classify_error("INVALID_AMOUNT", amount=150000)
    assert error.message.startswith("Maximum amount is ₹1,00,000")
    assert error.suggested_amount == 75000


def test_invalid_amount_that_is_actually_valid_keeps_generic_copy():
    error = classify_error("INVALID_AMOUNT", amount=250)
    assert error.message == PAYMENT_ERRORS[PaymentErrorKind.INVALID_AMOUNT].message
    assert error.suggested_amount is None


def test_network_error_mentions_attempt_and_backoff():
    error = classify_error("NETWORK_ERROR", attempt=3)
    assert "attempt 3" in error.message
    assert error.retry_delay_ms == 8000


def test_classification_does_not_leak_between_calls():
    classify_error("BANK_LIMIT", amount=50000)
    assert classify_error("BANK_LIMIT").message == PAYMENT_ERRORS[PaymentErrorKind.BANK_LIMIT_EXCEEDED].message


@pytest.mark.parametrize("attempt, expected", [(0, 1000), (1, 2000), (4, 16000), (5, 30000), (100, 30000), (-2, 1000)])
def test_retry_delay(attempt, expected):
    assert calculate_retry_delay(attempt) == expected


@pytest.mark.parametrize("attempt", [0, 3, 15, 100, 10**9])
def test_retry_delay_with_zero_base(attempt):
    assert calculate_retry_delay(attempt, base_delay_ms=0) == 0


def test_retry_delay_with_small_base_keeps_growing():
    assert calculate_retry_delay(14, base_delay_ms=1) == 16384
    assert calculate_retry_delay(100, base_delay_ms=1) == 30000
