"""Request-scoped dependencies"""
from fastapi import Request

from ..core.rate_limit import client_key, get_rate_limiter
from ..models.payment import UpiConfig
from ..services.payment_service import PaymentLinkService
from .errors import APIError


def get_payment_service(request: Request) -> PaymentLinkService:
    """Get payment link service from app state"""
    return request.app.state.payment_service


def get_upi_config(request: Request) -> UpiConfig:
    return request.app.state.payment_service.config


def enforce_rate_limit(request: Request) -> None:
    """Throttle link generation per client"""
    limiter = get_rate_limiter(request.app)
    if not limiter.allow(client_key(request)):
        raise APIError(
            code="RATE_LIMITED",
            message="Too many payment link requests. Please wait a minute and try again.",
            status_code=429,
        )
