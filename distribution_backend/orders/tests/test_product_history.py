# orders/tests/test_product_history.py

from decimal import Decimal

from django.test import TestCase

from core.exceptions import InputValidationError, NotFoundError
from orders.models import Order
from orders.services import cancel_order, create_purchase, create_sale, product_order_history, return_by_invoice
from orders.tests.helpers import line, make_batch, make_customer, make_product, make_supplier, sale_payload


class ProductOrderHistoryTests(TestCase):
    def setUp(self):
        self.product = make_product()
        make_batch(self.product, "B1", stock=10, unit_cost="6.00")
        other = make_product("Amoxicillin 250mg")
        make_batch(other, "A1", stock=10)
        customer = make_customer()

        create_purchase(
            data=sale_payload(make_supplier(), [line(self.product, "B1", 5, "5.00")], invoice="PO-1")
        )
        create_sale(data=sale_payload(customer, [line(self.product, "B1", 4, "10.00")], invoice="INV-1"))
        second = create_sale(
            data=sale_payload(
                customer,
                [line(self.product, "B1", 2, "10.00"), line(other, "A1", 3, "8.00")],
                invoice="INV-2",
            )
        )["order"]
        return_by_invoice(
            invoice_number="INV-1",
            items=[{"product_id": str(self.product.id), "batch_number": "B1", "units": 1}],
        )
        cancel_order(order_id=second.id)

    def test_sales_history_totals_skip_cancelled_orders(self):
        history = product_order_history(product_id=self.product.id, order_type=Order.TYPE_SALE)

        self.assertEqual([i.order.invoice_number for i in history["lines"]], ["INV-2", "INV-1"])
        self.assertEqual(history["units"], 4)
        self.assertEqual(history["returned_units"], 1)
        self.assertEqual(history["net_units"], 3)
        self.assertEqual(history["amount"], Decimal("40.00"))
        self.assertEqual(history["stock_on_hand"], 12)

    def test_purchase_history(self):
        history = product_order_history(product_id=self.product.id, order_type=Order.TYPE_PURCHASE)

        self.assertEqual([i.order.invoice_number for i in history["lines"]], ["PO-1"])
        self.assertEqual(history["units"], 5)
        self.assertEqual(history["amount"], Decimal("25.00"))

    def test_only_sales_and_purchases(self):
        with self.assertRaises(InputValidationError):
            product_order_history(product_id=self.product.id, order_type=Order.TYPE_ESTIMATED)

    def test_unknown_product(self):
        with self.assertRaises(NotFoundError):
            product_order_history(product_id="00000000-0000-0000-0000-000000000000", order_type=Order.TYPE_SALE)
