"""Payment link service used by the booking flow."""

from __future__ import annotations

import re
from typing import Optional

from ..core.logging import get_logger
from ..models.payment import (
    DEFAULT_UPI_CONFIG,
    ConfirmationStrategy,
    PaymentError,
    PaymentLink,
    PaymentLinkResult,
    SplitSuggestion,
    UpiConfig,
)
from .errors import PaymentLinkError, classify_error
from .formatting import amount_in_words, format_inr, to_paise_precision
from .upi import generate_transaction_ref, generate_upi_link, generate_upi_qr_payload, suggest_payment_split

logger = get_logger(__name__)

_MOBILE_AGENT = re.compile(r"Android|webOS|iPhone|iPad|iPod|BlackBerry|IEMobile|Opera Mini", re.IGNORECASE)


def select_confirmation_strategy(
    user_agent: Optional[str],
    prefer_screenshot: bool = False,
) -> ConfirmationStrategy:
    """Pick how the payer should complete and confirm the payment.

    Phones open the UPI app straight from the link; desktops show a QR code
    to scan. Clients that send no user agent get the link to copy.
    """
    if prefer_screenshot:
        return ConfirmationStrategy.SCREENSHOT_UPLOAD
    if not user_agent:
        return ConfirmationStrategy.CLIPBOARD_COPY
    if _MOBILE_AGENT.search(user_agent):
        return ConfirmationStrategy.DIRECT_REDIRECT
    return ConfirmationStrategy.QR_DISPLAY


class PaymentLinkService:
    """Creates payment links for bookings and classifies their failures."""

    def __init__(self, config: UpiConfig = DEFAULT_UPI_CONFIG) -> None:
        self.config = config

    def create_link(
        self,
        upi_id: str,
        amount: float,
        payee_name: str,
        note: str,
        reference: Optional[str] = None,
        merchant_code: Optional[str] = None,
    ) -> PaymentLinkResult:
        """Build a link, minting a fresh reference unless one is pinned."""
        if reference is None:
            reference = generate_transaction_ref(config=self.config)

        try:
            deeplink = generate_upi_link(
                upi_id, amount, payee_name, note,
                ref=reference, merchant_code=merchant_code, config=self.config,
            )
            qr_payload = generate_upi_qr_payload(
                upi_id, amount, payee_name, note,
                ref=reference, merchant_code=merchant_code, config=self.config,
            )
        except PaymentLinkError as exc:
            logger.info("upi_link_rejected", kind=exc.kind.value, reference=reference)
            return PaymentLinkResult.failure(exc.error)

        rounded = to_paise_precision(amount)
        logger.info("upi_link_generated", reference=reference, amount=str(rounded))
        return PaymentLinkResult.success(
            PaymentLink(
                deeplink=deeplink,
                qr_payload=qr_payload,
                reference=reference,
                amount=float(rounded),
                amount_display=format_inr(rounded),
                amount_in_words=amount_in_words(rounded),
            )
        )

    def classify(
        self,
        cause: str,
        amount: Optional[float] = None,
        attempt: Optional[int] = None,
    ) -> PaymentError:
        error = classify_error(cause, amount=amount, attempt=attempt, config=self.config)
        logger.info(
            "payment_error_classified",
            cause=cause,
            kind=error.kind.value,
            error_code=error.error_code,
            attempt=attempt,
        )
        return error

    def split(self, amount: float) -> SplitSuggestion:
        return suggest_payment_split(amount, config=self.config)
