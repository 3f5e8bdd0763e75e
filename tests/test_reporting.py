"""Tests for dashboard reporting windows and aggregates."""

from datetime import date, datetime

import pytest

from orderdesk.models import OrderStatus
from orderdesk.services.reporting import ReportingService, period_window


@pytest.fixture
def reporting(db_session) -> ReportingService:
    return ReportingService(db_session)


class TestPeriodWindow:
    def test_day(self):
        assert period_window(date(2024, 3, 5), "day") == (
            datetime(2024, 3, 5),
            datetime(2024, 3, 6),
        )

    def test_week(self):
        assert period_window(date(2024, 2, 26), "week") == (
            datetime(2024, 2, 26),
            datetime(2024, 3, 4),
        )

    def test_month_is_calendar_arithmetic(self):
        assert period_window(date(2024, 1, 15), "month")[1] == datetime(2024, 2, 15)

    def test_month_clamps_to_end_of_short_month(self):
        assert period_window(date(2024, 1, 31), "month")[1] == datetime(2024, 2, 29)
        assert period_window(date(2023, 1, 31), "month")[1] == datetime(2023, 2, 28)

    @pytest.mark.parametrize("period", [None, "", "year", "DAY"])
    def test_unknown_period_means_one_day(self, period):
        assert period_window(date(2024, 3, 5), period) == period_window(date(2024, 3, 5), "day")


class TestSalesSummary:
    async def test_month_excludes_deleted_and_out_of_window(self, reporting, make_order):
        await make_order(datetime(2024, 1, 14, 23, 59), total=1000)
        await make_order(datetime(2024, 1, 15, 0, 0), total=100)
        await make_order(datetime(2024, 1, 31, 18, 0), total=250)
        await make_order(datetime(2024, 2, 10, 9, 0), total=75, status=OrderStatus.DELETED)
        await make_order(datetime(2024, 2, 14, 23, 59), total=50, status=OrderStatus.COMPLETED)
        await make_order(datetime(2024, 2, 15, 0, 0), total=1000)

        summary = await reporting.sales_summary("month", date(2024, 1, 15))

        assert summary.total == 400
        assert summary.count == 3

    async def test_week(self, reporting, make_order):
        await make_order(datetime(2024, 3, 1, 12), total=10)
        await make_order(datetime(2024, 3, 7, 23), total=20)
        await make_order(datetime(2024, 3, 8, 0), total=40)

        summary = await reporting.sales_summary("week", date(2024, 3, 1))

        assert (summary.total, summary.count) == (30, 2)

    async def test_unknown_period_falls_back_to_day(self, reporting, make_order):
        await make_order(datetime(2024, 3, 5, 12), total=10)
        await make_order(datetime(2024, 3, 6, 12), total=20)

        summary = await reporting.sales_summary("fortnight", date(2024, 3, 5))

        assert (summary.total, summary.count) == (10, 1)

    async def test_empty_window(self, reporting):
        summary = await reporting.sales_summary("day", date(2024, 3, 5))

        assert (summary.total, summary.count) == (0, 0)


class TestTopDish:
    async def test_highest_quantity_wins(self, reporting, make_order):
        await make_order(
            datetime(2024, 3, 5, 12),
            items=[
                {"name": "Margherita", "price": 199, "qty": 1},
                {"name": "Garlic Bread", "price": 99, "qty": 3},
            ],
        )
        await make_order(
            datetime(2024, 3, 5, 13),
            items=[{"name": "Margherita", "price": 199, "qty": 1}],
        )

        top = await reporting.top_dish(date(2024, 3, 5))

        assert (top.name, top.count) == ("Garlic Bread", 3)

    async def test_tie_goes_to_first_seen(self, reporting, make_order):
        await make_order(
            datetime(2024, 3, 5, 12),
            items=[
                {"name": "Margherita", "price": 199, "qty": 2},
                {"name": "Pepperoni", "price": 249, "qty": 1},
            ],
        )
        await make_order(
            datetime(2024, 3, 5, 13),
            items=[{"name": "Pepperoni", "price": 249, "qty": 1}],
        )

        top = await reporting.top_dish(date(2024, 3, 5))

        assert (top.name, top.count) == ("Margherita", 2)

    async def test_deleted_orders_still_count(self, reporting, make_order):
        await make_order(
            datetime(2024, 3, 5, 12),
            items=[{"name": "Paneer Tikka", "price": 280, "qty": 5}],
            status=OrderStatus.DELETED,
        )
        await make_order(
            datetime(2024, 3, 5, 13),
            items=[{"name": "Margherita", "price": 199, "qty": 1}],
        )

        top = await reporting.top_dish(date(2024, 3, 5))

        assert (top.name, top.count) == ("Paneer Tikka", 5)

    async def test_other_days_are_ignored(self, reporting, make_order):
        await make_order(
            datetime(2024, 3, 4, 23, 59),
            items=[{"name": "Lassi", "price": 60, "qty": 9}],
        )
        await make_order(datetime(2024, 3, 5, 8))

        top = await reporting.top_dish(date(2024, 3, 5))

        assert top.name == "Margherita"

    async def test_no_orders(self, reporting):
        assert await reporting.top_dish(date(2024, 3, 5)) is None
