"""
Sales reporting for the manager dashboard.

All windows are half-open ``[start, end)`` ranges of local time that
begin at midnight of the requested day.
"""

import logging
from datetime import date, datetime, time, timedelta
from typing import Optional

from dateutil.relativedelta import relativedelta
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from orderdesk.models import Order, OrderStatus
from orderdesk.schemas import SalesSummary, TopDish

logger = logging.getLogger(__name__)

PERIOD_STEPS = {
    "day": relativedelta(days=1),
    "week": relativedelta(days=7),
    "month": relativedelta(months=1),
}


def period_window(day: date, period: Optional[str] = None) -> tuple[datetime, datetime]:
    """
    Return the ``[start, end)`` range covered by ``period`` starting on ``day``.

    ``month`` is calendar arithmetic (Jan 15 -> Feb 15, Jan 31 -> Feb 29
    in a leap year). A missing or unrecognised period means one day.
    """
    start = datetime.combine(day, time.min)
    step = PERIOD_STEPS.get(period or "day", PERIOD_STEPS["day"])
    return start, start + step


class ReportingService:
    """Read-only aggregates over the order table."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def _orders_between(
        self,
        start: datetime,
        end: datetime,
        exclude_deleted: bool = False,
    ) -> list[Order]:
        query = (
            select(Order)
            .where(Order.created_at >= start, Order.created_at < end)
            .order_by(Order.id)
        )
        if exclude_deleted:
            query = query.where(Order.status != OrderStatus.DELETED)
        result = await self.db.execute(query)
        return list(result.scalars().all())

    async def sales_summary(self, period: Optional[str], day: date) -> SalesSummary:
        """Revenue and order count for the window, ignoring soft-deleted orders."""
        start, end = period_window(day, period)
        orders = await self._orders_between(start, end, exclude_deleted=True)

        total = sum(order.total for order in orders)
        logger.debug(f"Sales {start:%Y-%m-%d}..{end:%Y-%m-%d}: {len(orders)} orders, {total}")

        return SalesSummary(total=total, count=len(orders))

    async def top_dish(self, day: date) -> Optional[TopDish]:
        """
        Dish with the highest total quantity ordered on ``day``.

        Every order counts, deleted ones included. On a tie the dish seen
        first (by order id, then item position) wins. Returns None for a
        day without orders.
        """
        start, end = period_window(day)
        orders = await self._orders_between(start, end)

        # dict keeps first-seen order, which max() relies on for ties
        dish_count: dict[str, int] = {}
        for order in orders:
            for item in order.items:
                dish_count[item["name"]] = dish_count.get(item["name"], 0) + item["qty"]

        if not dish_count:
            return None

        name = max(dish_count, key=dish_count.__getitem__)
        return TopDish(name=name, count=dish_count[name])
