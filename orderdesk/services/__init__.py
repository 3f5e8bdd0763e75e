"""
                        Services Module

Business logic, each service constructed with its collaborators:

    - orders: payment verification and order lifecycle
    - reporting: sales and top-dish aggregates
    - managers: dashboard credential checks
    - menu: published menu file
    - broadcast: live WebSocket events to staff displays
    - payment: gateway clients (mock and Razorpay)
"""

from orderdesk.services.broadcast import Broadcaster, OrderEvent
from orderdesk.services.managers import ManagerAuthService
from orderdesk.services.menu import MenuPublisher
from orderdesk.services.orders import OrderService, VerificationResult
from orderdesk.services.reporting import ReportingService

__all__ = [
    "Broadcaster",
    "OrderEvent",
    "ManagerAuthService",
    "MenuPublisher",
    "OrderService",
    "VerificationResult",
    "ReportingService",
]
