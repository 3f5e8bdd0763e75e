"""
SQLAlchemy Database Models

Orders placed after a verified gateway payment, and the manager
accounts allowed onto the staff dashboard.
"""

import enum
from datetime import datetime

from sqlalchemy import JSON, Column, DateTime, Enum, Float, Integer, String

from orderdesk.database import Base


class OrderStatus(str, enum.Enum):
    """Order status workflow."""
    NEW = "new"
    PREPARING = "preparing"
    COMPLETED = "completed"
    DELETED = "deleted"

    def can_transition_to(self, target: "OrderStatus") -> bool:
        if target == self:
            return True
        return target in ALLOWED_TRANSITIONS[self]


# DELETED is a soft marker and terminal
ALLOWED_TRANSITIONS: dict[OrderStatus, frozenset[OrderStatus]] = {
    OrderStatus.NEW: frozenset(
        {OrderStatus.PREPARING, OrderStatus.COMPLETED, OrderStatus.DELETED}
    ),
    OrderStatus.PREPARING: frozenset({OrderStatus.COMPLETED, OrderStatus.DELETED}),
    OrderStatus.COMPLETED: frozenset({OrderStatus.DELETED}),
    OrderStatus.DELETED: frozenset(),
}


class Order(Base):
    """
    Customer order.

    Created once per verified payment and mutated afterwards only through
    status updates. Rows are never removed.
    """
    __tablename__ = "orders"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)

    # =========================================================================
    # CUSTOMER
    # =========================================================================
    order_type = Column(String(30), nullable=True)
    customer_name = Column(String(100), nullable=True)
    registration_number = Column(String(50), nullable=True)
    mobile = Column(String(20), nullable=True)
    table_number = Column(String(20), nullable=True)
    address = Column(String(255), nullable=True)

    # =========================================================================
    # ORDER DETAILS
    # =========================================================================
    items = Column(JSON, nullable=False)  # [{"name", "price", "qty"}, ...]
    total = Column(Float, nullable=False)
    status = Column(
        Enum(
            OrderStatus,
            native_enum=False,
            length=20,
            values_callable=lambda statuses: [s.value for s in statuses],
        ),
        default=OrderStatus.NEW,
        nullable=False,
        index=True,
    )

    # =========================================================================
    # PAYMENT
    # =========================================================================
    gateway_order_id = Column(String(100), nullable=True, index=True)
    gateway_payment_id = Column(String(100), nullable=True)

    # =========================================================================
    # TIMESTAMPS (local time, used for day windows)
    # =========================================================================
    created_at = Column(DateTime, default=datetime.now, nullable=False, index=True)
    updated_at = Column(DateTime, default=datetime.now, onupdate=datetime.now)

    def __repr__(self):
        return f"<Order #{self.id} - {self.order_type} - {self.total} - {self.status.value}>"


class Manager(Base):
    """Dashboard manager account. Credentials are compared verbatim."""
    __tablename__ = "managers"

    id = Column(Integer, primary_key=True, autoincrement=True)
    username = Column(String(100), nullable=False)
    password = Column(String(255), nullable=False)

    def __repr__(self):
        return f"<Manager {self.username}>"
