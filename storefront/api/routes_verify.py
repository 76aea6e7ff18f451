"""Verification proxy: ``GET /verify-payment?reference=...``."""
from __future__ import annotations

from fastapi import APIRouter, Query, Request

from storefront.api.common import VerifyResponse, logger
from storefront.api.rate_limit import VERIFY_LIMIT, limiter
from storefront.core.constants import MSG_NO_REFERENCE
from storefront.integrations.paystack import VerificationResult, VerificationStatus

router = APIRouter()


@router.get("/verify-payment", response_model=VerifyResponse, response_model_exclude_none=True)
@limiter.limit(VERIFY_LIMIT)
async def verify_payment(request: Request, reference: str | None = Query(default=None)):
    """Forward ``reference`` to the provider once and relay its verdict."""
    if reference is None or not reference.strip():
        return VerificationResult(VerificationStatus.ERROR, MSG_NO_REFERENCE).to_dict()

    verifier = request.app.state.verifier
    result = await verifier.verify(reference)
    logger.info("verify-payment ref=%s status=%s", reference, result.status.value)
    return result.to_dict()
