"""Application lifespan management."""

from __future__ import annotations

from contextlib import asynccontextmanager

from fastapi import FastAPI

from .core.config import get_settings
from .core.logging import get_logger
from .core.rate_limit import RateLimiter
from .services.payment_service import PaymentLinkService

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings = get_settings()
    config = settings.upi_config()
    logger.info(
        "application_startup",
        max_amount=config.max_amount,
        reference_prefix=config.reference_prefix,
    )

    app.state.payment_service = PaymentLinkService(config)
    app.state.rate_limiter = RateLimiter(per_minute=settings.rate_limit_per_minute)

    try:
        yield
    finally:
        logger.info("application_shutdown")
