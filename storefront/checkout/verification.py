"""Client side of the verification proxy (``GET /verify-payment``)."""
from __future__ import annotations

import asyncio
import logging

import aiohttp

from storefront.core.exceptions import VerificationNetworkError
from storefront.integrations.paystack import VerificationResult

logger = logging.getLogger(__name__)


class HttpVerificationClient:
    """Asks a verification endpoint for the verdict on one reference."""

    def __init__(self, verify_url: str, session: aiohttp.ClientSession | None = None):
        self._verify_url = verify_url
        self._session = session

    @property
    def verify_url(self) -> str:
        return self._verify_url

    async def verify(self, reference: str) -> VerificationResult:
        params = {"reference": reference}
        try:
            if self._session is not None:
                data = await self._fetch(self._session, params)
            else:
                async with aiohttp.ClientSession() as session:
                    data = await self._fetch(session, params)
        except (aiohttp.ClientError, asyncio.TimeoutError, ValueError) as e:
            logger.error(f"Verification call failed for {reference}: {e}")
            raise VerificationNetworkError(reference, str(e)) from e
        return VerificationResult.from_dict(data)

    async def _fetch(self, session: aiohttp.ClientSession, params: dict[str, str]):
        async with session.get(self._verify_url, params=params) as response:
            return await response.json(content_type=None)
