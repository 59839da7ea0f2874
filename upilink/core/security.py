"""API key verification for the payment link endpoints."""

from __future__ import annotations

import secrets
from typing import Optional

from fastapi import Header, HTTPException, status

from .config import get_settings


async def enforce_api_key(x_api_key: Optional[str] = Header(default=None, alias="X-API-Key")) -> None:
    """Reject requests without the configured key; no key configured means open access."""

    expected = get_settings().api_key
    if not expected:
        return
    # Header values arrive latin-1 decoded; compare bytes so non-ASCII keys get a 401
    if x_api_key is None or not secrets.compare_digest(x_api_key.encode(), expected.encode()):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid API key",
        )
