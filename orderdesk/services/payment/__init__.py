"""
Payment Gateway Factory

Provides a single entry point for obtaining a gateway client.
The rest of the application stays agnostic about which implementation
is in use, and tests swap it through FastAPI dependency overrides.

Usage:
    from orderdesk.services.payment import get_payment_gateway

    gateway = get_payment_gateway()
    order = await gateway.create_order(49800)

Environment Switching:
    - ENV_MODE=development → MockPaymentGateway (no API calls)
    - ENV_MODE=staging → RazorpayPaymentGateway (test keys)
    - ENV_MODE=production → RazorpayPaymentGateway (live keys)
"""

import logging
from functools import lru_cache

from orderdesk.core.config import get_settings
from orderdesk.services.payment.base import (
    BasePaymentGateway,
    compute_signature,
    to_minor_units,
)
from orderdesk.services.payment.mock import MockPaymentGateway
from orderdesk.services.payment.razorpay import RazorpayPaymentGateway

logger = logging.getLogger(__name__)


@lru_cache()
def get_payment_gateway() -> BasePaymentGateway:
    """
    Get the configured payment gateway instance.

    The instance is cached so the HTTP connection pool is shared
    across requests.

    Raises:
        ValueError: If production mode but gateway keys not configured
    """
    settings = get_settings()

    if settings.is_development:
        logger.info("Payment Gateway: Using MockPaymentGateway (development mode)")
        return MockPaymentGateway(
            key_secret=settings.gateway_key_secret,
            currency=settings.gateway_currency,
            min_latency=0.1,
            max_latency=0.4,
        )

    logger.info(
        f"Payment Gateway: Using RazorpayPaymentGateway "
        f"({settings.env_mode.value} mode)"
    )
    return RazorpayPaymentGateway()


def reset_payment_gateway() -> None:
    """
    Clear the cached gateway instance.

    The next call to get_payment_gateway() will create a new instance.
    """
    get_payment_gateway.cache_clear()
    logger.debug("Payment gateway cache cleared")


__all__ = [
    "get_payment_gateway",
    "reset_payment_gateway",
    "BasePaymentGateway",
    "MockPaymentGateway",
    "RazorpayPaymentGateway",
    "compute_signature",
    "to_minor_units",
]
