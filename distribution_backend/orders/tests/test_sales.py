# orders/tests/test_sales.py

from datetime import date
from decimal import Decimal

from django.test import TestCase

from core.exceptions import (
    ConflictError,
    InputValidationError,
    InsufficientStockError,
    InvariantViolationError,
    NotFoundError,
)
from investors.models import Investor
from orders.models import Order, OrderItem
from orders.services import create_sale
from orders.tests.helpers import (
    balance_of,
    line,
    make_batch,
    make_customer,
    make_product,
    sale_payload,
    stock_of,
)


class CreateSaleTests(TestCase):
    """
    GUARANTEES:
    - exact-batch deduction, per-line profit against the batch cost
    - counterparty receive grows by this order's due only
    - any failure leaves orders, items, stock and balances untouched
    """

    def setUp(self):
        self.product = make_product()
        self.b1 = make_batch(self.product, "B1", stock=20, unit_cost="6.00")
        self.b2 = make_batch(self.product, "B2", stock=5, unit_cost="7.00")
        self.customer = make_customer()

    def test_sale_deducts_books_due_and_computes_profit(self):
        result = create_sale(
            data=sale_payload(self.customer, [line(self.product, "B1", 10, "10.00")], paid="40.00"),
            today=date(2026, 3, 20),
        )

        order = result["order"]
        self.assertEqual(order.type, Order.TYPE_SALE)
        self.assertEqual(order.status, Order.STATUS_COMPLETED)
        self.assertEqual(order.due_amount, Decimal("60.00"))
        self.assertEqual(order.profit, Decimal("40.00"))
        self.assertEqual(result["total_profit"], Decimal("40.00"))
        # 40 - 10% charity - 2% of 100 gross
        self.assertEqual(result["distributable"], Decimal("34.00"))

        item = result["items"][0]
        self.assertEqual(item.unit_cost, Decimal("6.00"))
        self.assertEqual(item.expiry_date, self.b1.expiry_date)

        self.assertEqual(stock_of(self.b1), 10)
        self.assertEqual(balance_of(self.customer), (Decimal("0.00"), Decimal("60.00")))

    def test_only_this_orders_due_is_added(self):
        self.customer.receive = Decimal("500.00")
        self.customer.save()

        create_sale(data=sale_payload(self.customer, [line(self.product, "B1", 2, "10.00")]))
        self.assertEqual(balance_of(self.customer), (Decimal("0.00"), Decimal("520.00")))

    def test_sale_nets_against_existing_payable(self):
        self.customer.pay = Decimal("15.00")
        self.customer.save()

        create_sale(data=sale_payload(self.customer, [line(self.product, "B1", 2, "10.00")]))
        self.assertEqual(balance_of(self.customer), (Decimal("0.00"), Decimal("5.00")))

    def test_short_batch_aborts_everything(self):
        payload = sale_payload(
            self.customer,
            [line(self.product, "B1", 10, "10.00"), line(self.product, "B2", 6, "10.00")],
        )

        with self.assertRaises(InsufficientStockError) as ctx:
            create_sale(data=payload)

        self.assertEqual(ctx.exception.batch_number, "B2")
        self.assertEqual(ctx.exception.available, 5)
        self.assertEqual(Order.objects.count(), 0)
        self.assertEqual(OrderItem.objects.count(), 0)
        self.assertEqual((stock_of(self.b1), stock_of(self.b2)), (20, 5))
        self.assertEqual(balance_of(self.customer), (Decimal("0.00"), Decimal("0.00")))

    def test_units_are_aggregated_per_batch(self):
        payload = sale_payload(
            self.customer,
            [line(self.product, "B2", 3, "10.00"), line(self.product, "B2", 3, "10.00")],
        )
        with self.assertRaises(InsufficientStockError):
            create_sale(data=payload)
        self.assertEqual(stock_of(self.b2), 5)

    def test_unknown_batch_is_insufficient_stock(self):
        with self.assertRaises(InsufficientStockError) as ctx:
            create_sale(data=sale_payload(self.customer, [line(self.product, "NOPE", 1, "10.00")]))
        self.assertEqual(ctx.exception.available, 0)

    def test_missing_fields_are_listed(self):
        with self.assertRaises(InputValidationError) as ctx:
            create_sale(data={"invoice_number": "INV-9", "total": "10"})

        self.assertEqual(
            ctx.exception.details["missing"],
            ["counterparty_id", "subtotal", "paid_amount", "net_value", "items"],
        )

    def test_every_line_needs_a_batch(self):
        payload = sale_payload(self.customer, [line(self.product, "", 1, "10.00")])
        with self.assertRaises(InputValidationError):
            create_sale(data=payload)

    def test_paid_cannot_exceed_total(self):
        payload = sale_payload(self.customer, [line(self.product, "B1", 1, "10.00")], paid="11.00")
        with self.assertRaises(InputValidationError):
            create_sale(data=payload)

    def test_unknown_counterparty(self):
        payload = sale_payload(self.customer, [line(self.product, "B1", 1, "10.00")])
        payload["counterparty_id"] = "00000000-0000-0000-0000-000000000000"
        with self.assertRaises(NotFoundError):
            create_sale(data=payload)

    def test_malformed_product_id_is_not_found(self):
        payload = sale_payload(self.customer, [line(self.product, "B1", 1, "10.00", product_id="not-a-uuid")])
        with self.assertRaises(NotFoundError) as ctx:
            create_sale(data=payload)

        self.assertEqual(ctx.exception.details["ids"], ["not-a-uuid"])
        self.assertEqual(stock_of(self.b1), 20)
        self.assertFalse(Order.objects.exists())

    def test_duplicate_invoice_is_conflict(self):
        create_sale(data=sale_payload(self.customer, [line(self.product, "B1", 1, "10.00")]))
        with self.assertRaises(ConflictError):
            create_sale(data=sale_payload(self.customer, [line(self.product, "B1", 1, "10.00")]))
        self.assertEqual(stock_of(self.b1), 19)

    def test_failed_distribution_rolls_back_the_sale(self):
        joined = date(2025, 1, 1)
        Investor.objects.create(name="A", join_date=joined, shares=Decimal("70"))
        Investor.objects.create(name="B", join_date=joined, shares=Decimal("40"))

        with self.assertRaises(InvariantViolationError):
            create_sale(
                data=sale_payload(self.customer, [line(self.product, "B1", 10, "10.00")]),
                today=date(2026, 3, 20),
            )

        self.assertEqual(Order.objects.count(), 0)
        self.assertEqual(stock_of(self.b1), 20)
        self.assertEqual(balance_of(self.customer), (Decimal("0.00"), Decimal("0.00")))


class SaleDistributionTests(TestCase):
    def setUp(self):
        self.product = make_product()
        make_batch(self.product, "B1", stock=20, unit_cost="6.00")
        self.customer = make_customer()

    def test_investor_and_house_are_credited(self):
        investor = Investor.objects.create(
            name="Ali", join_date=date(2025, 6, 1), shares=Decimal("50"), profit_percentage=Decimal("80")
        )

        result = create_sale(
            data=sale_payload(self.customer, [line(self.product, "B1", 10, "10.00")]),
            today=date(2026, 3, 20),
        )

        investor.refresh_from_db()
        # distributable 34.00 -> base 17.00 -> 80% = 13.60, owner 3.40
        self.assertEqual(investor.credit, Decimal("13.60"))
        house = Investor.objects.get(is_house=True)
        self.assertEqual(house.credit, Decimal("3.40"))

        record = result["distribution"].records[0]
        self.assertEqual(record.month, "2026-03")
        self.assertEqual(record.order_id, result["order"].id)
        self.assertEqual(record.net_profit, Decimal("34.00"))

    def test_late_joiner_is_deferred(self):
        investor = Investor.objects.create(name="Late", join_date=date(2026, 3, 18), shares=Decimal("50"))

        create_sale(
            data=sale_payload(self.customer, [line(self.product, "B1", 10, "10.00")]),
            today=date(2026, 3, 20),
        )

        investor.refresh_from_db()
        self.assertEqual(investor.credit, Decimal("0.00"))
        self.assertFalse(investor.profit_records.exists())

    def test_loss_making_sale_distributes_nothing(self):
        investor = Investor.objects.create(name="Ali", join_date=date(2025, 1, 1), shares=Decimal("50"))

        result = create_sale(
            data=sale_payload(self.customer, [line(self.product, "B1", 10, "5.00")]),
            today=date(2026, 3, 20),
        )

        self.assertEqual(result["total_profit"], Decimal("-10.00"))
        investor.refresh_from_db()
        self.assertEqual(investor.credit, Decimal("0.00"))
        self.assertEqual(result["distribution"].records, [])
