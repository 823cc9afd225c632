"""
Razorpay API client for checkout orders and webhook verification.

Only the two touch points the store needs are covered:
- Creating a gateway order for a pending store order
- Verifying the signature on incoming webhooks
"""

import hashlib
import hmac
from dataclasses import dataclass
from typing import Optional

import httpx
from libs.common.config import get_settings
from libs.common.logging import get_logger

logger = get_logger(__name__)


@dataclass
class GatewayOrder:
    """Order created on the Razorpay side."""

    id: str
    amount: int  # in paise
    currency: str
    receipt: str


class RazorpayError(Exception):
    """Base exception for Razorpay API errors."""

    def __init__(
        self, message: str, status_code: Optional[int] = None, response_data: Optional[dict] = None
    ):
        self.message = message
        self.status_code = status_code
        self.response_data = response_data or {}
        super().__init__(message)


def verify_webhook_signature(raw_body: bytes, signature: Optional[str], secret: str) -> bool:
    """Check the ``x-razorpay-signature`` header (hex HMAC-SHA256 of the body)."""
    if not signature or not secret:
        return False
    digest = hmac.new(secret.encode("utf-8"), raw_body, hashlib.sha256).hexdigest()
    return hmac.compare_digest(digest, signature)


class RazorpayClient:
    """Async client for the Razorpay Orders API."""

    def __init__(
        self,
        key_id: Optional[str] = None,
        key_secret: Optional[str] = None,
        base_url: Optional[str] = None,
        timeout: float = 30.0,
    ):
        settings = get_settings()
        self.key_id = key_id if key_id is not None else settings.RAZORPAY_KEY_ID
        self.key_secret = (
            key_secret if key_secret is not None else settings.RAZORPAY_KEY_SECRET
        )
        self.base_url = (base_url or settings.RAZORPAY_BASE_URL).rstrip("/")
        self.timeout = timeout

    async def create_order(
        self, amount: int, currency: str, receipt: str, notes: Optional[dict] = None
    ) -> GatewayOrder:
        """Create an order for ``amount`` paise."""
        payload = {
            "amount": amount,
            "currency": currency,
            "receipt": receipt,
            "notes": notes or {},
        }
        async with httpx.AsyncClient(
            base_url=self.base_url,
            auth=(self.key_id, self.key_secret),
            timeout=self.timeout,
        ) as client:
            try:
                response = await client.post("/v1/orders", json=payload)
            except httpx.HTTPError as e:
                logger.error("Razorpay request failed: %s", e)
                raise RazorpayError(f"Razorpay request failed: {e}") from e

        data = response.json() if response.content else {}
        if response.status_code >= 400:
            message = (data.get("error") or {}).get("description") or "Razorpay error"
            logger.error(
                "Razorpay order creation failed (http %d): %s",
                response.status_code,
                message,
            )
            raise RazorpayError(message, response.status_code, data)

        return GatewayOrder(
            id=data["id"],
            amount=data["amount"],
            currency=data["currency"],
            receipt=data.get("receipt", receipt),
        )


def get_razorpay_client() -> RazorpayClient:
    """FastAPI dependency returning a client configured from settings."""
    return RazorpayClient()
