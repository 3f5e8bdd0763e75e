"""
Mock Payment Gateway Implementation

Simulates Razorpay-style order creation without making real API calls.
Used in development mode (ENV_MODE=development) to:
    - Test the complete checkout flow locally
    - Run the simulation script without gateway keys
    - Develop without internet connectivity

Behavior:
    - Simulates configurable response times
    - Optionally fails a share of requests (simulates gateway outages)
    - Generates Razorpay-like ids (order_xxx)
    - Signs payments with the same HMAC scheme as the real gateway
"""

import asyncio
import logging
import random
import time
import uuid
from typing import Any, Optional

from orderdesk.exceptions import PaymentGatewayError
from orderdesk.services.payment.base import BasePaymentGateway, compute_signature

logger = logging.getLogger(__name__)

MOCK_KEY_SECRET = "mock_key_secret"


class MockPaymentGateway(BasePaymentGateway):
    """
    Mock implementation of the payment gateway.

    Attributes:
        failure_rate: Probability of a simulated gateway failure (0.0-1.0)
        min_latency: Minimum simulated response time in seconds
        max_latency: Maximum simulated response time in seconds

    Example:
        >>> gateway = MockPaymentGateway()
        >>> order = await gateway.create_order(49800)
        >>> signature = gateway.sign_payment(order["id"], "pay_123")
        >>> gateway.verify_payment_signature(order["id"], "pay_123", signature)
        True
    """

    def __init__(
        self,
        key_secret: Optional[str] = None,
        currency: str = "INR",
        failure_rate: float = 0.0,
        min_latency: float = 0.0,
        max_latency: float = 0.0,
    ):
        super().__init__(key_secret or MOCK_KEY_SECRET, currency)
        self.failure_rate = failure_rate
        self.min_latency = min_latency
        self.max_latency = max_latency
        self.created_orders: list[dict[str, Any]] = []

        logger.info(
            f"MockPaymentGateway initialized "
            f"(failure_rate={failure_rate:.0%}, "
            f"latency={min_latency}-{max_latency}s)"
        )

    @property
    def provider_name(self) -> str:
        return "mock"

    async def _simulate_latency(self) -> None:
        if self.max_latency > 0:
            await asyncio.sleep(random.uniform(self.min_latency, self.max_latency))

    def _should_fail(self) -> bool:
        return random.random() < self.failure_rate

    def sign_payment(self, gateway_order_id: str, gateway_payment_id: str) -> str:
        """Issue the signature the gateway checkout would hand the customer."""
        return compute_signature(self._key_secret, gateway_order_id, gateway_payment_id)

    async def create_order(
        self,
        amount_minor: int,
        receipt: Optional[str] = None,
    ) -> dict[str, Any]:
        await self._simulate_latency()

        if self._should_fail():
            logger.debug("Mock: Gateway order creation failed (simulated)")
            raise PaymentGatewayError("Simulated gateway failure", status_code=502)

        order = {
            "id": f"order_mock_{uuid.uuid4().hex[:14]}",
            "entity": "order",
            "amount": amount_minor,
            "amount_paid": 0,
            "amount_due": amount_minor,
            "currency": self.currency,
            "receipt": receipt,
            "status": "created",
            "attempts": 0,
            "created_at": int(time.time()),
        }
        self.created_orders.append(order)

        logger.info(f"Mock: Gateway order created - {order['id']} - {amount_minor} {self.currency}")
        return order

    async def health_check(self) -> bool:
        """Mock health check always returns True."""
        return True
