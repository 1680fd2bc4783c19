# products/tests/test_fifo.py

from datetime import date, timedelta
from decimal import Decimal

from django.test import TestCase, override_settings
from django.utils import timezone

from core.exceptions import InputValidationError, InsufficientStockError
from products.models import Product, StockBatch
from products.services.stock_fifo import allocate_stock, deduct_stock_fifo, restore_stock


class FifoAllocationTests(TestCase):
    """
    GUARANTEES:
    - earliest expiry is consumed first
    - allocate_stock() never writes
    - a shortfall fails the whole request and leaves every batch untouched
    """

    def setUp(self):
        self.product = Product.objects.create(name="Amoxicillin 250mg")
        today = date.today()
        # Created out of expiry order on purpose.
        self.late = StockBatch.objects.create(
            product=self.product, batch_number="E3", expiry_date=today + timedelta(days=300), stock=5
        )
        self.early = StockBatch.objects.create(
            product=self.product, batch_number="E1", expiry_date=today + timedelta(days=100), stock=5
        )
        self.mid = StockBatch.objects.create(
            product=self.product, batch_number="E2", expiry_date=today + timedelta(days=200), stock=5
        )

    def _stocks(self):
        return [
            StockBatch.objects.get(pk=b.pk).stock
            for b in (self.early, self.mid, self.late)
        ]

    def test_dry_run_plans_by_expiry(self):
        plan = allocate_stock(product_id=self.product.id, requested_units=7)

        self.assertEqual(
            [(a.batch_number, a.units) for a in plan.allocations],
            [("E1", 5), ("E2", 2)],
        )
        self.assertEqual(plan.shortfall, 0)
        self.assertEqual(self._stocks(), [5, 5, 5])

    def test_deduction_consumes_earliest_expiry_first(self):
        deduct_stock_fifo(product_id=self.product.id, units=7)
        self.assertEqual(self._stocks(), [0, 3, 5])

    def test_shortfall_fails_without_touching_stock(self):
        with self.assertRaises(InsufficientStockError) as ctx:
            deduct_stock_fifo(product_id=self.product.id, units=16)

        self.assertEqual(ctx.exception.shortfall, 1)
        self.assertEqual(ctx.exception.available, 15)
        self.assertEqual(self._stocks(), [5, 5, 5])

    def test_dry_run_shortfall_is_reported(self):
        with self.assertRaises(InsufficientStockError) as ctx:
            allocate_stock(product_id=self.product.id, requested_units=20)
        self.assertEqual(ctx.exception.shortfall, 5)

    def test_units_must_be_positive_integers(self):
        for bad in (0, "2.5", -1):
            with self.assertRaises(InputValidationError):
                allocate_stock(product_id=self.product.id, requested_units=bad)

    def test_empty_batches_are_skipped(self):
        StockBatch.objects.filter(pk=self.early.pk).update(stock=0)
        plan = allocate_stock(product_id=self.product.id, requested_units=6)
        self.assertEqual([a.batch_number for a in plan.allocations], ["E2", "E3"])


class RestoreStockTests(TestCase):
    def setUp(self):
        self.product = Product.objects.create(name="Cetirizine 10mg")
        self.batch = StockBatch.objects.create(
            product=self.product,
            batch_number="CZ-1",
            expiry_date=date.today() + timedelta(days=90),
            stock=2,
            unit_cost=Decimal("4.00"),
        )

    def test_existing_batch_is_credited(self):
        batch = restore_stock(product_id=self.product.id, batch_number="CZ-1", units=3)
        self.assertEqual(batch.pk, self.batch.pk)
        self.assertEqual(StockBatch.objects.get(pk=self.batch.pk).stock, 5)

    @override_settings(RESTORED_BATCH_SHELF_LIFE_DAYS=365)
    def test_missing_batch_is_recreated_with_default_expiry(self):
        batch = restore_stock(product_id=self.product.id, batch_number="GONE-9", units=4)

        self.assertTrue(batch.batch_number.startswith("RESTORED-"))
        self.assertEqual(batch.stock, 4)
        self.assertEqual(batch.expiry_date, timezone.localdate() + timedelta(days=365))
        self.assertEqual(self.product.total_stock, 6)

    def test_missing_batch_keeps_known_expiry(self):
        expiry = date.today() + timedelta(days=30)
        batch = restore_stock(
            product_id=self.product.id, batch_number="GONE-9", units=1, expiry_date=expiry
        )
        self.assertEqual(batch.expiry_date, expiry)

    def test_unknown_product_is_rejected(self):
        with self.assertRaises(InputValidationError):
            restore_stock(
                product_id="00000000-0000-0000-0000-000000000000", batch_number="X", units=1
            )

    def test_repeat_restores_share_one_restored_batch(self):
        expiry = date.today() + timedelta(days=30)
        first = restore_stock(product_id=self.product.id, batch_number="GONE-9", units=2, expiry_date=expiry)
        second = restore_stock(product_id=self.product.id, batch_number="GONE-7", units=3, expiry_date=expiry)

        self.assertEqual(first.pk, second.pk)
        restored = StockBatch.objects.filter(product=self.product, batch_number__startswith="RESTORED-")
        self.assertEqual(restored.count(), 1)
        self.assertEqual(restored.get().stock, 5)

    def test_different_expiry_gets_its_own_restored_batch(self):
        restore_stock(
            product_id=self.product.id, batch_number="GONE-9", units=1, expiry_date=date.today() + timedelta(days=30)
        )
        restore_stock(
            product_id=self.product.id, batch_number="GONE-9", units=1, expiry_date=date.today() + timedelta(days=60)
        )

        self.assertEqual(
            StockBatch.objects.filter(product=self.product, batch_number__startswith="RESTORED-").count(), 2
        )
