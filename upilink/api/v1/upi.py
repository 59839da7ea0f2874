"""UPI payment link endpoints."""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends, Header, Query
from pydantic import BaseModel, Field

from ...api.deps import enforce_rate_limit, get_payment_service, get_upi_config
from ...api.errors import APIError
from ...models.payment import (
    AmountValidation,
    ConfirmationStrategy,
    ParsedUpiLink,
    PaymentError,
    PaymentVerification,
    PspInfo,
    SplitSuggestion,
    UpiConfig,
)
from ...services.errors import PaymentLinkError
from ...services.limits import validate_amount
from ...services.payment_service import PaymentLinkService, select_confirmation_strategy
from ...services.upi import (
    format_upi_id,
    generate_transaction_ref,
    get_upi_psp_info,
    get_upi_suggestions,
    parse_upi_link,
    validate_upi_id,
)
from ...services.verification import parse_upi_response, validate_payment_verification

router = APIRouter(prefix="/upi")


class UPIDeeplinkRequest(BaseModel):
    upi_id: str
    payee_name: str
    amount: Any
    note: str = ""
    txn_ref: Optional[str] = Field(default=None, pattern=r"^[A-Za-z0-9]{1,35}$")
    merchant_code: Optional[str] = Field(default=None, pattern=r"^[0-9]{4}$")
    prefer_screenshot: bool = False


class UPIDeeplinkResponse(BaseModel):
    deeplink: str
    qr_payload: str
    reference: str
    amount: float
    amount_display: str
    amount_in_words: str
    confirmation_strategy: ConfirmationStrategy


class UpiIdRequest(BaseModel):
    upi_id: Optional[str] = None


class UpiIdResponse(BaseModel):
    valid: bool
    display: str
    psp: Optional[PspInfo] = None


class AmountRequest(BaseModel):
    amount: Any = None


class ParseRequest(BaseModel):
    uri: str


class ParseResponse(BaseModel):
    parsed: Optional[ParsedUpiLink] = None


class ClassifyRequest(BaseModel):
    cause: str
    amount: Optional[float] = None
    attempt: Optional[int] = Field(default=None, ge=0)


class VerificationRequest(BaseModel):
    response: Dict[str, Any]


class VerificationResponse(BaseModel):
    complete: bool
    verification: PaymentVerification


@router.get("/limits")
async def limits(config: UpiConfig = Depends(get_upi_config)) -> dict:
    return {
        "currency": config.currency,
        "min_amount": config.min_amount,
        "max_amount": config.max_amount,
        "max_daily_amount": config.max_daily_amount,
        "daily_limit_enforced": False,
    }


@router.get("/psps")
async def psps(config: UpiConfig = Depends(get_upi_config)) -> Dict[str, List[PspInfo]]:
    return {"psps": list(config.psps)}


@router.post("/validate/id", response_model=UpiIdResponse)
async def validate_id(payload: UpiIdRequest, config: UpiConfig = Depends(get_upi_config)) -> UpiIdResponse:
    return UpiIdResponse(
        valid=validate_upi_id(payload.upi_id),
        display=format_upi_id(payload.upi_id),
        psp=get_upi_psp_info(payload.upi_id, config) if payload.upi_id else None,
    )


@router.get("/suggestions")
async def suggestions(
    handle: str = Query(default=""),
    limit: int = Query(default=5, ge=1, le=20),
    config: UpiConfig = Depends(get_upi_config),
) -> Dict[str, List[str]]:
    return {"suggestions": get_upi_suggestions(handle, limit=limit, config=config)}


@router.post("/validate/amount", response_model=AmountValidation)
async def validate_payment_amount(payload: AmountRequest, config: UpiConfig = Depends(get_upi_config)) -> AmountValidation:
    return validate_amount(payload.amount, config)


@router.get("/reference")
async def reference(
    prefix: Optional[str] = Query(default=None),
    config: UpiConfig = Depends(get_upi_config),
) -> Dict[str, str]:
    try:
        return {"reference": generate_transaction_ref(prefix, config=config)}
    except ValueError as exc:
        raise APIError("INVALID_PREFIX", str(exc), status_code=400) from exc


@router.post(
    "/deeplink",
    response_model=UPIDeeplinkResponse,
    dependencies=[Depends(enforce_rate_limit)],
)
async def create_upi_deeplink(
    payload: UPIDeeplinkRequest,
    service: PaymentLinkService = Depends(get_payment_service),
    user_agent: Optional[str] = Header(default=None),
) -> UPIDeeplinkResponse:
    result = service.create_link(
        upi_id=payload.upi_id,
        amount=payload.amount,
        payee_name=payload.payee_name,
        note=payload.note,
        reference=payload.txn_ref,
        merchant_code=payload.merchant_code,
    )
    if not result.ok:
        raise APIError.from_payment_error(result.error)

    link = result.link
    return UPIDeeplinkResponse(
        **link.model_dump(),
        confirmation_strategy=select_confirmation_strategy(user_agent, payload.prefer_screenshot),
    )


@router.post("/parse", response_model=ParseResponse)
async def parse_link(payload: ParseRequest) -> ParseResponse:
    return ParseResponse(parsed=parse_upi_link(payload.uri))


@router.post("/split", response_model=SplitSuggestion)
async def split_payment(
    payload: AmountRequest,
    service: PaymentLinkService = Depends(get_payment_service),
) -> SplitSuggestion:
    try:
        return service.split(payload.amount)
    except PaymentLinkError as exc:
        raise APIError.from_payment_error(exc.error) from exc


@router.post("/errors/classify", response_model=PaymentError)
async def classify(
    payload: ClassifyRequest,
    service: PaymentLinkService = Depends(get_payment_service),
) -> PaymentError:
    return service.classify(payload.cause, amount=payload.amount, attempt=payload.attempt)


@router.post("/verification", response_model=VerificationResponse)
async def verification(payload: VerificationRequest) -> VerificationResponse:
    record = parse_upi_response(payload.response)
    if record is None:
        raise APIError(
            code="INVALID_VERIFICATION",
            message="Payment response could not be read",
            status_code=422,
        )
    return VerificationResponse(complete=validate_payment_verification(record), verification=record)
