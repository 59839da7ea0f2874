import math
from decimal import Decimal

import pytest

from upilink.models.payment import UpiConfig
from upilink.services.formatting import amount_in_words, format_inr
from upilink.services.limits import validate_amount


@pytest.mark.parametrize("amount", [1, 1.5, 250, 99999.99, 100000, Decimal("100000.00")])
def test_amounts_within_limits(amount):
    result = validate_amount(amount)
    assert result.is_valid is True
    assert result.error is None
    assert result.suggested_amount is None


@pytest.mark.parametrize("amount", [0, -5, 0.99])
def test_below_minimum(amount):
    result = validate_amount(amount)
    assert result.is_valid is False
    assert result.error == "Minimum amount is ₹1"
    assert result.suggested_amount is None


@pytest.mark.parametrize("amount", ["250", None, True, float("nan"), float("inf"), [250]])
def test_not_a_number(amount):
    result = validate_amount(amount)
    assert result.is_valid is False
    assert result.error == "Amount must be a valid number"


def test_over_maximum_suggests_installment():
    result = validate_amount(150000)
    assert result.is_valid is False
    assert result.error == "Maximum amount is ₹1,00,000"
    assert result.suggested_amount == 75000


def test_just_over_maximum():
    result = validate_amount(100000.01)
    assert result.is_valid is False
    assert 0 < result.suggested_amount <= 100000
    assert result.suggested_amount == 50001


@pytest.mark.parametrize("amount", [100001, 250000, 300000, 999999.5, 12345678])
def test_suggested_amount_follows_installment_policy(amount):
    result = validate_amount(amount)
    installments = math.ceil(amount / 100000)
    assert result.suggested_amount == math.ceil(amount / installments)
    assert 0 < result.suggested_amount <= 100000


def test_custom_limits():
    config = UpiConfig(min_amount=10, max_amount=500, max_daily_amount=5000)
    assert validate_amount(5, config).error == "Minimum amount is ₹10"
    over = validate_amount(1200, config)
    assert over.error == "Maximum amount is ₹500"
    assert over.suggested_amount == 400


def test_config_rejects_inverted_limits():
    with pytest.raises(ValueError):
        UpiConfig(min_amount=100, max_amount=10)


@pytest.mark.parametrize("max_amount", [0, 0.5, -10])
def test_config_rejects_sub_rupee_ceiling(max_amount):
    with pytest.raises(ValueError):
        UpiConfig(min_amount=0.01, max_amount=max_amount, max_daily_amount=5)


def test_format_inr_grouping():
    assert format_inr(1) == "₹1"
    assert format_inr(100000) == "₹1,00,000"
    assert format_inr(1000000) == "₹10,00,000"
    assert format_inr(83334.5) == "₹83,334.50"
    assert format_inr(999, symbol=False) == "999"


def test_amount_in_words():
    assert amount_in_words(100000) == "One Lakh Rupees Only"
    assert amount_in_words(250.5) == "Two Hundred Fifty Rupees and Fifty Paise Only"
    assert amount_in_words(0) == "Zero Rupees Only"
    assert amount_in_words(12500000) == "One Crore Twenty Five Lakh Rupees Only"
