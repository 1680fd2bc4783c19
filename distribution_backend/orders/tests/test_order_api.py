# orders/tests/test_order_api.py

from datetime import date, timedelta
from decimal import Decimal

from django.contrib.auth import get_user_model
from django.test import TestCase
from rest_framework import status
from rest_framework.test import APIClient

from orders.models import Order
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

User = get_user_model()


class OrderApiTests(TestCase):
    def setUp(self):
        self.client = APIClient()
        self.booker = User.objects.create_user(email="booker@example.com", password="password123", role="booker")
        self.accountant = User.objects.create_user(
            email="accounts@example.com", password="password123", role="accountant"
        )
        self.client.force_authenticate(self.booker)

        self.product = make_product()
        self.batch = make_batch(self.product, "B1", stock=10, unit_cost="6.00")
        self.customer = make_customer()

    def _sale(self, units=4, invoice="INV-1"):
        return self.client.post(
            "/api/orders/sales/",
            sale_payload(self.customer, [line(self.product, "B1", units, "10.00")], invoice=invoice),
            format="json",
        )

    def test_create_sale(self):
        res = self._sale()

        self.assertEqual(res.status_code, status.HTTP_201_CREATED)
        self.assertEqual(res.data["total_profit"], "16.00")
        self.assertEqual(res.data["due_amount"], "40.00")
        self.assertEqual(len(res.data["items"]), 1)
        self.assertEqual(stock_of(self.batch), 6)

    def test_insufficient_stock_envelope(self):
        res = self._sale(units=11)

        self.assertEqual(res.status_code, status.HTTP_409_CONFLICT)
        self.assertEqual(res.data["error"]["code"], "INSUFFICIENT_STOCK")
        self.assertEqual(res.data["error"]["details"]["available"], 10)
        self.assertFalse(Order.objects.exists())

    def test_missing_fields_envelope(self):
        res = self.client.post("/api/orders/sales/", {"invoice_number": "INV-1"}, format="json")

        self.assertEqual(res.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(res.data["error"]["code"], "VALIDATION_ERROR")
        self.assertIn("items", res.data["error"]["details"]["missing"])

    def test_accountants_cannot_book_sales(self):
        self.client.force_authenticate(self.accountant)
        self.assertEqual(self._sale().status_code, status.HTTP_403_FORBIDDEN)

    def test_list_filter_and_detail(self):
        self._sale()
        supplier = make_supplier()
        self.client.post(
            "/api/orders/purchases/",
            sale_payload(
                supplier,
                [line(self.product, "P1", 5, "5.00", expiry_date=str(date.today() + timedelta(days=90)))],
                invoice="PO-1",
            ),
            format="json",
        )

        res = self.client.get("/api/orders/?type=sale")
        self.assertEqual(res.status_code, status.HTTP_200_OK)
        self.assertEqual(res.data["count"], 1)
        order_id = res.data["results"][0]["id"]

        res = self.client.get(f"/api/orders/{order_id}/")
        self.assertEqual(res.status_code, status.HTTP_200_OK)
        self.assertEqual(res.data["counterparty_name"], self.customer.name)
        self.assertEqual(res.data["items"][0]["batch_number"], "B1")

        res = self.client.get(f"/api/orders/?counterparty={supplier.id}")
        self.assertEqual([o["invoice_number"] for o in res.data["results"]], ["PO-1"])

    def test_return_then_delete_is_blocked(self):
        order_id = self._sale().data["id"]

        res = self.client.post(
            "/api/orders/returns/",
            {
                "invoice_number": "INV-1",
                "items": [{"product_id": str(self.product.id), "batch_number": "B1", "units": 2}],
            },
            format="json",
        )
        self.assertEqual(res.status_code, status.HTTP_201_CREATED)
        self.assertEqual(res.data["refund_total"], "20.00")

        res = self.client.delete(f"/api/orders/{order_id}/")
        self.assertEqual(res.status_code, status.HTTP_422_UNPROCESSABLE_ENTITY)
        self.assertEqual(res.data["error"]["code"], "INVARIANT_VIOLATION")

    def test_delete_sale(self):
        order_id = self._sale().data["id"]

        res = self.client.delete(f"/api/orders/{order_id}/")
        self.assertEqual(res.status_code, status.HTTP_204_NO_CONTENT)
        self.assertEqual(stock_of(self.batch), 10)
        self.assertEqual(balance_of(self.customer), (Decimal("0.00"), Decimal("0.00")))

    def test_recovery_requires_ledger_role(self):
        order_id = self._sale().data["id"]
        payload = {"order_ids": [order_id], "amount": "15.00"}

        res = self.client.post("/api/orders/recoveries/", payload, format="json")
        self.assertEqual(res.status_code, status.HTTP_403_FORBIDDEN)

        self.client.force_authenticate(self.accountant)
        res = self.client.post("/api/orders/recoveries/", payload, format="json")
        self.assertEqual(res.status_code, status.HTTP_201_CREATED)
        self.assertEqual(res.data["recoveries"][0]["due_after"], "25.00")

    def test_last_purchase_after_purchase(self):
        supplier = make_supplier()
        self.client.post(
            "/api/orders/purchases/",
            sale_payload(
                supplier,
                [line(self.product, "B1", 5, "5.00")],
                invoice="PO-1",
            ),
            format="json",
        )

        res = self.client.get(f"/api/products/{self.product.id}/last-purchase/")
        self.assertEqual(res.status_code, status.HTTP_200_OK)
        self.assertEqual(res.data["last_purchase"]["invoice_number"], "PO-1")
        self.assertEqual(res.data["last_purchase"]["units"], 5)

    def test_cancel_keeps_order_and_restores_stock(self):
        order_id = self._sale().data["id"]

        res = self.client.post(f"/api/orders/{order_id}/cancel/")
        self.assertEqual(res.status_code, status.HTTP_200_OK)
        self.assertEqual(res.data["status"], "cancelled")
        self.assertEqual(res.data["due_amount"], "0.00")
        self.assertEqual(stock_of(self.batch), 10)

        res = self.client.post(f"/api/orders/{order_id}/cancel/")
        self.assertEqual(res.status_code, status.HTTP_422_UNPROCESSABLE_ENTITY)

    def test_complete_pending_sale(self):
        payload = sale_payload(self.customer, [line(self.product, "B1", 2, "10.00")])
        payload["status"] = "pending"
        order_id = self.client.post("/api/orders/sales/", payload, format="json").data["id"]

        res = self.client.post(f"/api/orders/{order_id}/complete/")
        self.assertEqual(res.status_code, status.HTTP_200_OK)
        self.assertEqual(res.data["status"], "completed")

    def test_patch_estimate(self):
        order_id = self.client.post(
            "/api/orders/estimates/",
            {
                "invoice_number": "EST-1",
                "estimate_customer_name": "Walk-in",
                "total": "20.00",
                "items": [{"estimate_product_name": "Bandage", "units": 2, "unit_price": "10.00"}],
            },
            format="json",
        ).data["id"]

        res = self.client.patch(
            f"/api/orders/estimates/{order_id}/",
            {"total": "30.00", "items": [{"estimate_product_name": "Bandage", "units": 3, "unit_price": "10.00"}]},
            format="json",
        )
        self.assertEqual(res.status_code, status.HTTP_200_OK)
        self.assertEqual(res.data["total"], "30.00")
        self.assertEqual([i["units"] for i in res.data["items"]], [3])

    def test_product_sales_history(self):
        self._sale(units=3)

        res = self.client.get(f"/api/orders/products/{self.product.id}/sales/")
        self.assertEqual(res.status_code, status.HTTP_200_OK)
        self.assertEqual(res.data["units"], 3)
        self.assertEqual(res.data["stock_on_hand"], 7)
        self.assertEqual(res.data["lines"][0]["invoice_number"], "INV-1")
        self.assertEqual(res.data["lines"][0]["counterparty_name"], self.customer.name)

        res = self.client.get(f"/api/orders/products/{self.product.id}/purchases/")
        self.assertEqual(res.data["lines"], [])
