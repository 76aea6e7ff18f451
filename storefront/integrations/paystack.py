"""
Paystack integration: server-side transaction verification.

The secret key is read from PAYSTACK_SECRET_KEY (or a local .env); it is
never part of the source tree. Verification is a single GET per reference,
with no retry and no record kept of the transaction.
"""
from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any
from urllib.parse import quote

import aiohttp

from storefront.core.config import PaystackConfig
from storefront.core.constants import MSG_NOT_CONFIGURED, PAYSTACK_BASE_URL
from storefront.core.exceptions import ConfigurationException

logger = logging.getLogger(__name__)


class VerificationStatus(Enum):
    """Verdicts relayed to the checkout page."""

    SUCCESS = "success"
    FAILED = "failed"
    ERROR = "error"


@dataclass
class VerificationResult:
    status: VerificationStatus
    message: str | None = None

    @property
    def ok(self) -> bool:
        return self.status is VerificationStatus.SUCCESS

    def to_dict(self) -> dict[str, str]:
        data = {"status": self.status.value}
        if self.message:
            data["message"] = self.message
        return data

    @classmethod
    def from_dict(cls, data: Any) -> VerificationResult:
        if not isinstance(data, dict):
            return cls(VerificationStatus.ERROR, "Malformed verification response")
        try:
            status = VerificationStatus(str(data.get("status", "")).lower())
        except ValueError:
            status = VerificationStatus.FAILED
        message = data.get("message")
        return cls(status, str(message) if message else None)


class PaystackClient:
    """Thin client for the Paystack REST API."""

    def __init__(
        self,
        secret_key: str,
        base_url: str = PAYSTACK_BASE_URL,
        session: aiohttp.ClientSession | None = None,
    ):
        if not secret_key:
            raise ConfigurationException("PAYSTACK_SECRET_KEY is not set")
        self._secret_key = secret_key
        self._base_url = base_url.rstrip("/")
        self._session = session

    def verify_url(self, reference: str) -> str:
        return f"{self._base_url}/transaction/verify/{quote(reference, safe='')}"

    async def verify_transaction(self, reference: str) -> dict[str, Any] | None:
        """Return the decoded provider response, or None if it could not be read."""
        headers = {
            "Authorization": f"Bearer {self._secret_key}",
            "Cache-Control": "no-cache",
        }
        url = self.verify_url(reference)
        try:
            if self._session is not None:
                return await self._get_json(self._session, url, headers)
            async with aiohttp.ClientSession() as session:
                return await self._get_json(session, url, headers)
        except (aiohttp.ClientError, asyncio.TimeoutError, ValueError) as e:
            logger.error(f"Paystack verify request failed for {reference}: {e}")
            return None

    @staticmethod
    async def _get_json(
        session: aiohttp.ClientSession, url: str, headers: dict[str, str]
    ) -> dict[str, Any] | None:
        async with session.get(url, headers=headers) as response:
            data = await response.json(content_type=None)
            return data if isinstance(data, dict) else None


class PaystackVerifier:
    """Verification proxy: reference in, success/failed verdict out."""

    def __init__(self, client: PaystackClient):
        self._client = client

    @classmethod
    def from_config(
        cls, config: PaystackConfig, session: aiohttp.ClientSession | None = None
    ) -> PaystackVerifier:
        return cls(PaystackClient(config.secret_key, config.base_url, session=session))

    async def verify(self, reference: str) -> VerificationResult:
        result = await self._client.verify_transaction(reference)
        data = (result or {}).get("data")
        if isinstance(data, dict) and data.get("status") == "success":
            logger.info("Payment %s verified", reference)
            return VerificationResult(VerificationStatus.SUCCESS)
        logger.info("Payment %s not verified", reference)
        return VerificationResult(VerificationStatus.FAILED)


class UnconfiguredVerifier:
    """Stands in when no secret key is configured; always answers ``error``."""

    async def verify(self, reference: str) -> VerificationResult:
        logger.warning("Verification requested for %s but PAYSTACK_SECRET_KEY is empty", reference)
        return VerificationResult(VerificationStatus.ERROR, MSG_NOT_CONFIGURED)


def get_verifier(config: PaystackConfig) -> PaystackVerifier | UnconfiguredVerifier:
    if not config.verification_enabled:
        return UnconfiguredVerifier()
    return PaystackVerifier.from_config(config)
