# orders/tests/test_deletion_recovery.py

from datetime import date, datetime, timedelta
from datetime import timezone as dt_timezone
from decimal import Decimal

from django.test import TestCase

from core.exceptions import (
    InputValidationError,
    InsufficientStockError,
    InvariantViolationError,
    NotFoundError,
)
from investors.models import Investor, InvestorProfitRecord
from orders.models import Order, OrderItem, Recovery
from orders.services import (
    apply_recovery,
    cancel_order,
    complete_order,
    create_purchase,
    create_sale,
    delete_order,
    return_by_invoice,
)
from orders.services.order_lifecycle import InvalidOrderTransitionError
from orders.tests.helpers import (
    balance_of,
    line,
    make_batch,
    make_customer,
    make_product,
    make_supplier,
    sale_payload,
    stock_of,
)
from products.models import StockBatch


class DeleteOrderTests(TestCase):
    def setUp(self):
        self.product = make_product()
        self.b1 = make_batch(self.product, "B1", stock=20, unit_cost="6.00")
        self.customer = make_customer()

    def test_sale_deletion_restores_everything(self):
        investor = Investor.objects.create(name="Ali", join_date=date(2025, 1, 1), shares=Decimal("50"))
        order = create_sale(
            data=sale_payload(self.customer, [line(self.product, "B1", 10, "10.00")], paid="30.00"),
            today=date(2026, 3, 20),
        )["order"]
        investor.refresh_from_db()
        self.assertEqual(investor.credit, Decimal("17.00"))

        self.assertTrue(delete_order(order_id=order.id))

        self.assertFalse(Order.objects.filter(pk=order.pk).exists())
        self.assertEqual(OrderItem.objects.count(), 0)
        self.assertEqual(stock_of(self.b1), 20)
        self.assertEqual(balance_of(self.customer), (Decimal("0.00"), Decimal("0.00")))

        investor.refresh_from_db()
        self.assertEqual(investor.credit, Decimal("0.00"))
        # Append-only: the original and its compensating record both remain.
        self.assertEqual(InvestorProfitRecord.objects.filter(investor=investor).count(), 2)
        self.assertTrue(InvestorProfitRecord.objects.filter(is_reversal=True, investor_share=Decimal("-17.00")).exists())

    def test_purchase_deletion_removes_received_stock(self):
        supplier = make_supplier()
        order = create_purchase(
            data=sale_payload(
                supplier,
                [line(self.product, "P1", 10, "5.00", expiry_date=date.today() + timedelta(days=90))],
                invoice="PO-1",
            )
        )["order"]

        delete_order(order_id=order.id)

        self.assertFalse(StockBatch.objects.filter(batch_number="P1").exists())
        self.assertEqual(balance_of(supplier), (Decimal("0.00"), Decimal("0.00")))

    def test_purchase_deletion_fails_when_stock_was_sold(self):
        supplier = make_supplier()
        order = create_purchase(
            data=sale_payload(
                supplier,
                [line(self.product, "P1", 10, "5.00", expiry_date=date.today() + timedelta(days=90))],
                invoice="PO-1",
            )
        )["order"]
        create_sale(data=sale_payload(self.customer, [line(self.product, "P1", 4, "9.00")], invoice="INV-7"))

        with self.assertRaises(InsufficientStockError):
            delete_order(order_id=order.id)

        self.assertTrue(Order.objects.filter(pk=order.pk).exists())
        self.assertEqual(StockBatch.objects.get(batch_number="P1").stock, 6)
        self.assertEqual(balance_of(supplier), (Decimal("50.00"), Decimal("0.00")))

    def test_orders_with_returns_cannot_be_deleted(self):
        order = create_sale(data=sale_payload(self.customer, [line(self.product, "B1", 5, "10.00")]))["order"]
        result = return_by_invoice(
            invoice_number="INV-1",
            items=[{"product_id": str(self.product.id), "batch_number": "B1", "units": 1}],
        )

        with self.assertRaises(InvariantViolationError):
            delete_order(order_id=order.id)
        with self.assertRaises(InvariantViolationError):
            delete_order(order_id=result["return_order"].id)

    def test_recovered_orders_cannot_be_deleted(self):
        order = create_sale(data=sale_payload(self.customer, [line(self.product, "B1", 5, "10.00")]))["order"]
        apply_recovery(order_ids=[order.id], total_amount="50.00")

        with self.assertRaises(InvalidOrderTransitionError):
            delete_order(order_id=order.id)

    def test_partially_recovered_sale_leaves_customer_credit(self):
        order = create_sale(data=sale_payload(self.customer, [line(self.product, "B1", 5, "10.00")]))["order"]
        apply_recovery(order_ids=[order.id], total_amount="20.00")

        delete_order(order_id=order.id)

        self.assertEqual(balance_of(self.customer), (Decimal("20.00"), Decimal("0.00")))
        recovery = Recovery.objects.get()
        self.assertIsNone(recovery.order_id)
        self.assertEqual(recovery.invoice_number, "INV-1")

    def test_unknown_order(self):
        with self.assertRaises(NotFoundError):
            delete_order(order_id="not-a-uuid")


class CancelCompleteOrderTests(TestCase):
    def setUp(self):
        self.product = make_product()
        self.b1 = make_batch(self.product, "B1", stock=20, unit_cost="6.00")
        self.customer = make_customer()

    def test_cancelled_sale_is_kept_and_fully_unwound(self):
        investor = Investor.objects.create(name="Ali", join_date=date(2025, 1, 1), shares=Decimal("50"))
        order = create_sale(
            data=sale_payload(self.customer, [line(self.product, "B1", 10, "10.00")], paid="30.00"),
            today=date(2026, 3, 20),
        )["order"]

        cancelled = cancel_order(order_id=order.id)

        self.assertEqual(cancelled.status, Order.STATUS_CANCELLED)
        self.assertEqual(cancelled.due_amount, Decimal("0.00"))
        self.assertEqual(OrderItem.objects.filter(order=order).count(), 1)
        self.assertEqual(stock_of(self.b1), 20)
        self.assertEqual(balance_of(self.customer), (Decimal("0.00"), Decimal("0.00")))
        investor.refresh_from_db()
        self.assertEqual(investor.credit, Decimal("0.00"))
        self.assertTrue(InvestorProfitRecord.objects.filter(order=order, is_reversal=True).exists())

    def test_cancelled_purchase_removes_received_stock(self):
        supplier = make_supplier()
        order = create_purchase(
            data=sale_payload(
                supplier,
                [line(self.product, "P1", 10, "5.00", expiry_date=date.today() + timedelta(days=90))],
                invoice="PO-1",
            )
        )["order"]

        cancel_order(order_id=order.id)

        self.assertFalse(StockBatch.objects.filter(batch_number="P1").exists())
        self.assertEqual(balance_of(supplier), (Decimal("0.00"), Decimal("0.00")))
        self.assertEqual(Order.objects.get(pk=order.pk).status, Order.STATUS_CANCELLED)

    def test_cancelled_order_cannot_be_cancelled_again(self):
        order = create_sale(data=sale_payload(self.customer, [line(self.product, "B1", 5, "10.00")]))["order"]
        cancel_order(order_id=order.id)

        with self.assertRaises(InvalidOrderTransitionError):
            cancel_order(order_id=order.id)
        self.assertEqual(stock_of(self.b1), 20)

    def test_orders_with_returns_cannot_be_cancelled(self):
        order = create_sale(data=sale_payload(self.customer, [line(self.product, "B1", 5, "10.00")]))["order"]
        return_by_invoice(
            invoice_number="INV-1",
            items=[{"product_id": str(self.product.id), "batch_number": "B1", "units": 1}],
        )

        with self.assertRaises(InvariantViolationError):
            cancel_order(order_id=order.id)
        self.assertEqual(Order.objects.get(pk=order.pk).status, Order.STATUS_COMPLETED)

    def test_pending_order_can_be_completed(self):
        payload = sale_payload(self.customer, [line(self.product, "B1", 5, "10.00")])
        payload["status"] = Order.STATUS_PENDING
        order = create_sale(data=payload)["order"]

        completed = complete_order(order_id=order.id)

        self.assertEqual(completed.status, Order.STATUS_COMPLETED)
        self.assertEqual(stock_of(self.b1), 15)
        self.assertEqual(balance_of(self.customer), (Decimal("0.00"), Decimal("50.00")))

    def test_completed_order_cannot_be_completed_again(self):
        order = create_sale(data=sale_payload(self.customer, [line(self.product, "B1", 5, "10.00")]))["order"]

        with self.assertRaises(InvalidOrderTransitionError):
            complete_order(order_id=order.id)


class RecoveryAllocatorTests(TestCase):
    """
    GUARANTEES:
    - oldest order is paid first
    - more than the total due fails with no mutation
    - orders of different counterparties are never mixed
    """

    def setUp(self):
        self.customer = make_customer()
        base = datetime(2026, 1, 1, 9, 0, tzinfo=dt_timezone.utc)
        self.orders = []
        for idx, due in enumerate(("100.00", "50.00", "200.00")):
            order = Order.objects.create(
                invoice_number=f"INV-{idx + 1}",
                type=Order.TYPE_SALE,
                counterparty=self.customer,
                total=Decimal(due),
                due_amount=Decimal(due),
            )
            Order.objects.filter(pk=order.pk).update(created_at=base + timedelta(days=idx))
            self.orders.append(order)
        self.customer.receive = Decimal("350.00")
        self.customer.save()

    def _dues(self):
        return [Order.objects.get(pk=o.pk).due_amount for o in self.orders]

    def _ids(self):
        # Deliberately not in creation order.
        return [self.orders[2].id, self.orders[0].id, self.orders[1].id]

    def test_oldest_first(self):
        result = apply_recovery(order_ids=self._ids(), total_amount="120.00", date=date(2026, 2, 1))

        self.assertEqual(self._dues(), [Decimal("0.00"), Decimal("30.00"), Decimal("200.00")])
        self.assertEqual(
            [Order.objects.get(pk=o.pk).status for o in self.orders],
            [Order.STATUS_RECOVERED, Order.STATUS_COMPLETED, Order.STATUS_COMPLETED],
        )
        self.assertEqual([r.amount for r in result.recoveries], [Decimal("100.00"), Decimal("20.00")])
        self.assertEqual(result.remaining_unallocated, Decimal("0.00"))
        self.assertEqual(balance_of(self.customer), (Decimal("0.00"), Decimal("230.00")))

        first = Order.objects.get(pk=self.orders[0].pk)
        self.assertEqual(first.recovered_amount, Decimal("100.00"))
        self.assertEqual(first.recovered_date, date(2026, 2, 1))

    def test_more_than_total_due_fails_without_mutation(self):
        with self.assertRaises(InputValidationError):
            apply_recovery(order_ids=self._ids(), total_amount="400.00")

        self.assertEqual(self._dues(), [Decimal("100.00"), Decimal("50.00"), Decimal("200.00")])
        self.assertEqual(Recovery.objects.count(), 0)
        self.assertEqual(balance_of(self.customer), (Decimal("0.00"), Decimal("350.00")))

    def test_exact_total_clears_everything(self):
        apply_recovery(order_ids=self._ids(), total_amount="350.00")
        self.assertEqual(self._dues(), [Decimal("0.00")] * 3)
        self.assertEqual(balance_of(self.customer), (Decimal("0.00"), Decimal("0.00")))

    def test_mixed_counterparties_fail(self):
        other = make_customer("Other Pharmacy")
        stranger = Order.objects.create(
            invoice_number="INV-X", type=Order.TYPE_SALE, counterparty=other, total=10, due_amount=10
        )
        with self.assertRaises(InvariantViolationError):
            apply_recovery(order_ids=[self.orders[0].id, stranger.id], total_amount="10.00")
        self.assertEqual(self._dues()[0], Decimal("100.00"))

    def test_amount_must_be_positive(self):
        with self.assertRaises(InputValidationError):
            apply_recovery(order_ids=self._ids(), total_amount="0")

    def test_unknown_orders(self):
        with self.assertRaises(NotFoundError):
            apply_recovery(order_ids=["00000000-0000-0000-0000-000000000000"], total_amount="1")
