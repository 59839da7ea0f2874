"""Rupee formatting with Indian digit grouping"""
from decimal import ROUND_HALF_UP, Decimal
from typing import Union

Number = Union[int, float, Decimal]

_PAISE = Decimal("0.01")

_ONES = ["", "One", "Two", "Three", "Four", "Five", "Six", "Seven", "Eight", "Nine"]
_TENS = ["", "", "Twenty", "Thirty", "Forty", "Fifty", "Sixty", "Seventy", "Eighty", "Ninety"]
_TEENS = ["Ten", "Eleven", "Twelve", "Thirteen", "Fourteen", "Fifteen",
          "Sixteen", "Seventeen", "Eighteen", "Nineteen"]


def to_paise_precision(amount: Number) -> Decimal:
    """Round a rupee amount to two decimal places, half up."""
    return Decimal(str(amount)).quantize(_PAISE, rounding=ROUND_HALF_UP)


def group_indian(rupees: int) -> str:
    """Group digits as lakh/crore: 1234567 -> 12,34,567"""
    digits = str(abs(rupees))
    if len(digits) <= 3:
        grouped = digits
    else:
        head, tail = digits[:-3], digits[-3:]
        pairs = []
        while len(head) > 2:
            pairs.insert(0, head[-2:])
            head = head[:-2]
        if head:
            pairs.insert(0, head)
        grouped = ",".join(pairs) + "," + tail
    return f"-{grouped}" if rupees < 0 else grouped


def format_inr(amount: Number, symbol: bool = True) -> str:
    """Format an amount for display; whole rupees drop the paise."""
    value = to_paise_precision(amount)
    rupees = int(value)
    paise = int(abs(value - rupees) * 100)
    text = group_indian(rupees)
    if paise:
        text = f"{text}.{paise:02d}"
    return f"₹{text}" if symbol else text


def _below_hundred(n: int) -> str:
    if n == 0:
        return ""
    if n < 10:
        return _ONES[n]
    if n < 20:
        return _TEENS[n - 10]
    return _TENS[n // 10] + (" " + _ONES[n % 10] if n % 10 != 0 else "")


def _below_thousand(n: int) -> str:
    if n < 100:
        return _below_hundred(n)
    return _ONES[n // 100] + " Hundred" + (" " + _below_hundred(n % 100) if n % 100 != 0 else "")


def amount_in_words(amount: Number) -> str:
    """Spell out a rupee amount using crore/lakh/thousand"""
    value = to_paise_precision(amount)
    rupees = int(value)
    paise = int((value - rupees) * 100)

    if rupees == 0 and paise == 0:
        return "Zero Rupees Only"

    crore = rupees // 10000000
    lakh = (rupees % 10000000) // 100000
    thousand = (rupees % 100000) // 1000
    hundred = rupees % 1000

    result = []
    if crore > 0:
        # Above 99 crore the crore count itself needs thousands/lakhs
        result.append(amount_in_words(crore).replace(" Rupees Only", "") + " Crore")
    if lakh > 0:
        result.append(_below_hundred(lakh) + " Lakh")
    if thousand > 0:
        result.append(_below_hundred(thousand) + " Thousand")
    if hundred > 0:
        result.append(_below_thousand(hundred))

    words = " ".join(result) + " Rupees" if result else "Zero Rupees"
    if paise > 0:
        words += " and " + _below_hundred(paise) + " Paise"
    return words + " Only"
