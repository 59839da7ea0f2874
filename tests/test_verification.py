import pytest

from upilink.models.payment import VerificationStatus
from upilink.services.verification import parse_upi_response, validate_payment_verification


def test_parses_app_response_with_alternate_keys():
    record = parse_upi_response(
        {
            "transactionId": "T123",
            "referenceId": "412345678901",
            "amount": "250.00",
            "timestamp": 1700000000000,
            "payeeUpiId": "compere@oksbi",
            "status": "success",
        }
    )
    assert record.transaction_id == "T123"
    assert record.bank_reference == "412345678901"
    assert record.amount == 250.0
    assert record.upi_id == "compere@oksbi"
    assert record.status is VerificationStatus.SUCCESS
    assert validate_payment_verification(record) is True


def test_defaults_fill_missing_fields():
    record = parse_upi_response({"txnId": "T1"}, now=1234)
    assert record.status is VerificationStatus.PENDING
    assert record.timestamp == 1234
    assert record.amount == 0.0
    assert record.bank_reference is None
    assert validate_payment_verification(record) is False


@pytest.mark.parametrize(
    "payload",
    [
        None,
        "txnId=1",
        {"amount": "lots"},
        {"amount": True},
        {"amount": "inf"},
        {"status": "MAYBE"},
        {"timestamp": "yesterday"},
        {"txnId": "T1", "amount": 10, "timestamp": float("inf")},
    ],
)
def test_unreadable_responses(payload):
    assert parse_upi_response(payload) is None
