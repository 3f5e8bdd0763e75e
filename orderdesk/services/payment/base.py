"""
Payment Gateway Abstract Base Class

Defines the interface contract for payment gateway clients.
Both MockPaymentGateway and RazorpayPaymentGateway implement it, so the
order flow behaves identically whichever one is active.

Checkout flow:
    1. The server creates a gateway order for the cart amount.
    2. The customer pays against that order in the gateway's checkout.
    3. The gateway hands the browser a payment id and a signature:
       HMAC-SHA256(key_secret, "<order_id>|<payment_id>") as hex.
    4. The server recomputes the signature before accepting the order.
"""

import hashlib
import hmac
from abc import ABC, abstractmethod
from typing import Any, Optional


def compute_signature(secret: str, gateway_order_id: str, gateway_payment_id: str) -> str:
    """Return the hex HMAC-SHA256 signature the gateway issues for a payment."""
    message = f"{gateway_order_id}|{gateway_payment_id}"
    return hmac.new(
        secret.encode("utf-8"),
        message.encode("utf-8"),
        hashlib.sha256,
    ).hexdigest()


def to_minor_units(amount: float) -> int:
    """
    Convert a major-unit amount to the gateway's smallest currency unit.

    Args:
        amount: Amount in rupees (e.g., 249.5)

    Returns:
        int: Amount in paise (e.g., 24950)
    """
    return int(round(amount * 100))


class BasePaymentGateway(ABC):
    """
    Abstract base class for payment gateway clients.

    Attributes:
        currency: Fixed currency every gateway order is created in
    """

    def __init__(self, key_secret: str, currency: str = "INR"):
        self._key_secret = key_secret
        self.currency = currency

    @property
    @abstractmethod
    def provider_name(self) -> str:
        """
        Return the name of the gateway provider.

        Returns:
            str: Provider name (e.g., "mock", "razorpay")
        """

    @abstractmethod
    async def create_order(
        self,
        amount_minor: int,
        receipt: Optional[str] = None,
    ) -> dict[str, Any]:
        """
        Create a gateway order the customer will pay against.

        Args:
            amount_minor: Amount in the smallest currency unit
            receipt: Optional merchant reference

        Returns:
            dict: The gateway's order descriptor (id, amount, currency, status...)

        Raises:
            PaymentGatewayError: If the gateway call fails
        """

    def verify_payment_signature(
        self,
        gateway_order_id: str,
        gateway_payment_id: str,
        signature: str,
    ) -> bool:
        """
        Check that a payment confirmation was issued by the gateway.

        The expected signature is compared in constant time; any
        difference, including case, is a mismatch.
        """
        expected = compute_signature(
            self._key_secret, gateway_order_id, gateway_payment_id
        )
        return hmac.compare_digest(
            expected.encode("utf-8"), (signature or "").encode("utf-8")
        )

    @abstractmethod
    async def health_check(self) -> bool:
        """
        Verify connectivity to the gateway.

        Returns:
            bool: True if the gateway is reachable and accepts our keys
        """

    async def aclose(self) -> None:
        """Release network resources held by the client."""
