"""
Order Service

Owns the order lifecycle: gateway order creation, payment signature
verification, order persistence and status changes. Every change is
pushed to the staff displays through the injected broadcaster.

Known gap: verification is not idempotent. Replaying the same valid
(order id, payment id, signature) triple creates another order.
"""

import logging
from dataclasses import dataclass
from datetime import date
from typing import Any, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from orderdesk.exceptions import InvalidStatusTransition, OrderNotFound
from orderdesk.models import Order, OrderStatus
from orderdesk.schemas import OrderItem, OrderPayload, OrderResponse
from orderdesk.services.broadcast import EventPublisher, OrderEvent
from orderdesk.services.payment.base import BasePaymentGateway, to_minor_units
from orderdesk.services.reporting import period_window

logger = logging.getLogger(__name__)


@dataclass
class VerificationResult:
    """Outcome of a payment confirmation. A bad signature is not an error."""
    success: bool
    order: Optional[Order] = None


def calculate_total(items: list[OrderItem]) -> float:
    """Sum of price * qty over the line items."""
    return sum(item.line_total for item in items)


def serialize_order(order: Order) -> dict[str, Any]:
    """JSON-ready camelCase view of an order, as sent to listeners."""
    return OrderResponse.model_validate(order).model_dump(mode="json", by_alias=True)


class OrderService:
    """
    Order lifecycle operations.

    Args:
        db: Session the request runs in
        gateway: Payment gateway client
        broadcaster: Channel for live order events
    """

    def __init__(
        self,
        db: AsyncSession,
        gateway: BasePaymentGateway,
        broadcaster: EventPublisher,
    ):
        self.db = db
        self.gateway = gateway
        self.broadcaster = broadcaster

    async def create_payment_order(self, amount: float) -> dict[str, Any]:
        """
        Create the gateway order the customer pays against.

        Raises:
            PaymentGatewayError: If the gateway call fails
        """
        return await self.gateway.create_order(to_minor_units(amount))

    async def verify_and_create_order(
        self,
        gateway_order_id: str,
        gateway_payment_id: str,
        signature: str,
        payload: OrderPayload,
    ) -> VerificationResult:
        """
        Accept an order once its payment signature checks out.

        The stored total is recomputed from the items; whatever total the
        client believes in is never used.
        """
        if not self.gateway.verify_payment_signature(
            gateway_order_id, gateway_payment_id, signature
        ):
            logger.warning(f"Signature mismatch for gateway order {gateway_order_id}")
            return VerificationResult(success=False)

        order = Order(
            order_type=payload.order_type,
            customer_name=payload.customer_name,
            registration_number=payload.registration_number,
            mobile=payload.mobile,
            table_number=payload.table_number,
            address=payload.address,
            items=[item.model_dump() for item in payload.items],
            total=calculate_total(payload.items),
            status=OrderStatus.NEW,
            gateway_order_id=gateway_order_id,
            gateway_payment_id=gateway_payment_id,
        )

        self.db.add(order)
        await self.db.commit()
        await self.db.refresh(order)

        logger.info(f"Order #{order.id} created - total {order.total}")

        await self.broadcaster.broadcast(OrderEvent.NEW_ORDER, serialize_order(order))
        return VerificationResult(success=True, order=order)

    async def list_orders(self, day: date) -> list[Order]:
        """Orders created on ``day``, newest first."""
        start, end = period_window(day)
        result = await self.db.execute(
            select(Order)
            .where(Order.created_at >= start, Order.created_at < end)
            .order_by(Order.created_at.desc(), Order.id.desc())
        )
        return list(result.scalars().all())

    async def update_status(self, order_id: int, status: OrderStatus) -> Order:
        """
        Move an order to ``status`` and notify listeners.

        Raises:
            OrderNotFound: If no order has this id
            InvalidStatusTransition: If the lifecycle forbids the move
        """
        order = await self.db.get(Order, order_id)
        if order is None:
            raise OrderNotFound(order_id)

        if not order.status.can_transition_to(status):
            raise InvalidStatusTransition(order.status.value, status.value)

        order.status = status
        await self.db.commit()
        await self.db.refresh(order)

        logger.info(f"Order #{order.id} status -> {status.value}")

        await self.broadcaster.broadcast(OrderEvent.ORDER_UPDATED, serialize_order(order))
        return order
