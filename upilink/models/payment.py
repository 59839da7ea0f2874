"""Value objects shared by the UPI link engine and the API layer."""

from __future__ import annotations

from enum import Enum
from typing import List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, model_validator


class PspInfo(BaseModel):
    """A known UPI payment service provider handle."""

    model_config = ConfigDict(frozen=True)

    code: str
    name: str
    example: str


DEFAULT_PSPS: Tuple[PspInfo, ...] = (
    PspInfo(code="ybl", name="PhonePe", example="user@ybl"),
    PspInfo(code="paytm", name="Paytm", example="user@paytm"),
    PspInfo(code="oksbi", name="SBI Pay", example="user@oksbi"),
    PspInfo(code="okaxis", name="Axis Pay", example="user@okaxis"),
    PspInfo(code="okicici", name="iMobile Pay", example="user@okicici"),
    PspInfo(code="okhdfcbank", name="HDFC Bank", example="user@okhdfcbank"),
    PspInfo(code="upi", name="BHIM UPI", example="user@upi"),
    PspInfo(code="gpay", name="Google Pay", example="user@gpay"),
)


class UpiConfig(BaseModel):
    """Limits and defaults used by every link engine function.

    ``max_daily_amount`` is informational. Nothing in the engine tracks
    cumulative spend, so it is never enforced.
    """

    model_config = ConfigDict(frozen=True)

    min_amount: float = Field(default=1, gt=0)
    max_amount: float = Field(default=100000, ge=1)
    max_daily_amount: float = Field(default=1000000, gt=0)
    currency: str = Field(default="INR", min_length=3, max_length=3)
    reference_prefix: str = Field(default="TXN", max_length=16, pattern=r"^[A-Za-z0-9]*$")
    merchant_code: Optional[str] = Field(default=None, pattern=r"^[0-9]{4}$")
    psps: Tuple[PspInfo, ...] = DEFAULT_PSPS

    @model_validator(mode="after")
    def _check_bounds(self) -> "UpiConfig":
        if self.max_amount < self.min_amount:
            raise ValueError("max_amount must not be lower than min_amount")
        if self.max_daily_amount < self.max_amount:
            raise ValueError("max_daily_amount must not be lower than max_amount")
        return self


DEFAULT_UPI_CONFIG = UpiConfig()


class PaymentErrorKind(str, Enum):
    INVALID_IDENTIFIER = "invalid_identifier"
    INVALID_AMOUNT = "invalid_amount"
    BANK_LIMIT_EXCEEDED = "bank_limit_exceeded"
    NETWORK_ERROR = "network_error"
    VERIFICATION_TIMEOUT = "verification_timeout"
    INSUFFICIENT_BALANCE = "insufficient_balance"
    PAYMENT_FAILED = "payment_failed"


class PaymentError(BaseModel):
    """User-facing description of a payment failure."""

    model_config = ConfigDict(frozen=True)

    kind: PaymentErrorKind
    message: str
    retryable: bool
    error_code: str
    suggested_action: Optional[str] = None
    suggested_amount: Optional[float] = None
    retry_delay_ms: Optional[int] = None


class AmountValidation(BaseModel):
    is_valid: bool
    error: Optional[str] = None
    suggested_amount: Optional[float] = None


class ParsedUpiLink(BaseModel):
    upi_id: str
    amount: float
    payee_name: str
    note: str = ""
    ref: Optional[str] = None
    currency: Optional[str] = None
    merchant_code: Optional[str] = None


class SplitSuggestion(BaseModel):
    installments: int
    per_installment: float
    last_installment: float
    amounts: List[float]
    message: str


class ConfirmationStrategy(str, Enum):
    """How the booking UI asks the payer to confirm a launched payment."""

    DIRECT_REDIRECT = "direct_redirect"
    CLIPBOARD_COPY = "clipboard_copy"
    QR_DISPLAY = "qr_display"
    SCREENSHOT_UPLOAD = "screenshot_upload"


class PaymentLink(BaseModel):
    deeplink: str
    qr_payload: str
    reference: str
    amount: float
    amount_display: str
    amount_in_words: str


class PaymentLinkResult(BaseModel):
    """Either a generated link or the error that prevented it."""

    ok: bool
    link: Optional[PaymentLink] = None
    error: Optional[PaymentError] = None

    @classmethod
    def success(cls, link: PaymentLink) -> "PaymentLinkResult":
        return cls(ok=True, link=link)

    @classmethod
    def failure(cls, error: PaymentError) -> "PaymentLinkResult":
        return cls(ok=False, error=error)


class VerificationStatus(str, Enum):
    SUCCESS = "SUCCESS"
    FAILED = "FAILED"
    PENDING = "PENDING"


class PaymentVerification(BaseModel):
    """A payer-reported completion, normalised from a UPI app response."""

    transaction_id: str = ""
    bank_reference: Optional[str] = Field(default=None, description="Bank UTR, when the app reports one")
    amount: float = 0.0
    timestamp: int = 0
    upi_id: str = ""
    status: VerificationStatus = VerificationStatus.PENDING
