"""
Domain exceptions.

Services raise these; the HTTP layer in ``orderdesk.main`` translates
them into status codes. Expected negative outcomes (bad signature,
bad credentials) are return values, not exceptions.
"""

from typing import Optional


class OrderDeskError(Exception):
    """Base class for all application errors."""


class PaymentGatewayError(OrderDeskError):
    """The remote payment gateway call failed."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class OrderNotFound(OrderDeskError):
    def __init__(self, order_id: int):
        super().__init__(f"Order #{order_id} not found")
        self.order_id = order_id


class InvalidStatusTransition(OrderDeskError):
    def __init__(self, current: str, requested: str):
        super().__init__(f"Cannot move order from '{current}' to '{requested}'")
        self.current = current
        self.requested = requested


class MenuPublishError(OrderDeskError):
    """Writing the published menu file failed."""
