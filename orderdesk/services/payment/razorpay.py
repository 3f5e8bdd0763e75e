"""
Razorpay Payment Gateway Implementation

Production implementation talking to the Razorpay Orders REST API
with httpx. Used when ENV_MODE=production or ENV_MODE=staging.

Requirements:
    - GATEWAY_KEY_ID and GATEWAY_KEY_SECRET must be set in environment

API Documentation:
    https://razorpay.com/docs/api/orders/

Security Notes:
    - The key secret is both the API password and the signing key
    - Never log the key secret or payment signatures
"""

import logging
from typing import Any, Optional

import httpx

from orderdesk.core.config import get_settings
from orderdesk.exceptions import PaymentGatewayError
from orderdesk.services.payment.base import BasePaymentGateway

logger = logging.getLogger(__name__)


class RazorpayPaymentGateway(BasePaymentGateway):
    """
    Production Razorpay client.

    Configuration:
        Requires GATEWAY_KEY_ID and GATEWAY_KEY_SECRET.

    Example:
        >>> gateway = RazorpayPaymentGateway()
        >>> order = await gateway.create_order(49800)
        >>> order["id"]
        'order_NXa1...'
    """

    def __init__(
        self,
        key_id: Optional[str] = None,
        key_secret: Optional[str] = None,
        currency: Optional[str] = None,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Initialize the HTTP client with keys from settings.

        Raises:
            ValueError: If the gateway keys are not configured
        """
        settings = get_settings()

        key_id = key_id or settings.gateway_key_id
        key_secret = key_secret or settings.gateway_key_secret
        if not key_id or not key_secret:
            raise ValueError(
                "GATEWAY_KEY_ID and GATEWAY_KEY_SECRET are required for production mode. "
                "Set them in your .env file or environment variables."
            )

        super().__init__(key_secret, currency or settings.gateway_currency)

        self._client = httpx.AsyncClient(
            base_url=base_url or settings.gateway_base_url,
            auth=(key_id, key_secret),
            timeout=timeout or settings.gateway_timeout,
            transport=transport,
        )

        logger.info(f"RazorpayPaymentGateway initialized (currency={self.currency})")

    @property
    def provider_name(self) -> str:
        return "razorpay"

    async def create_order(
        self,
        amount_minor: int,
        receipt: Optional[str] = None,
    ) -> dict[str, Any]:
        body: dict[str, Any] = {"amount": amount_minor, "currency": self.currency}
        if receipt:
            body["receipt"] = receipt

        logger.info(f"Razorpay: Creating order for {amount_minor} {self.currency}")

        try:
            response = await self._client.post("/orders", json=body)
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            logger.error(
                f"Razorpay: Order creation rejected - "
                f"{e.response.status_code}: {e.response.text}"
            )
            raise PaymentGatewayError(
                "Gateway rejected order creation",
                status_code=e.response.status_code,
            ) from e
        except httpx.HTTPError as e:
            logger.error(f"Razorpay: Connection error - {e}")
            raise PaymentGatewayError("Gateway unreachable") from e

        order = response.json()
        logger.info(f"Razorpay: Order created - {order.get('id')}")
        return order

    async def health_check(self) -> bool:
        """Make a lightweight authenticated call to verify keys and connectivity."""
        try:
            response = await self._client.get("/orders", params={"count": 1})
            return response.status_code == 200
        except httpx.HTTPError as e:
            logger.error(f"Razorpay: Health check failed - {e}")
            return False

    async def aclose(self) -> None:
        await self._client.aclose()
