# core/tests/test_core.py

from __future__ import annotations

from decimal import Decimal
from unittest import mock

from django.db import OperationalError
from django.test import SimpleTestCase, TransactionTestCase
from rest_framework import serializers

from core.api import exception_handler
from core.exceptions import (
    ConflictError,
    InputValidationError,
    InsufficientStockError,
    InvariantViolationError,
    NotFoundError,
)
from core.money import money, to_int_qty
from core.transactions import retry_on_conflict


class MoneyTests(SimpleTestCase):
    def test_money_rounds_half_up_to_two_places(self):
        self.assertEqual(money("10.005"), Decimal("10.01"))
        self.assertEqual(money(3), Decimal("3.00"))
        self.assertEqual(money(None), Decimal("0.00"))

    def test_money_rejects_garbage(self):
        with self.assertRaises(InputValidationError):
            money("ten")
        with self.assertRaises(InputValidationError):
            money(True)

    def test_quantities_are_whole_units(self):
        self.assertEqual(to_int_qty("12"), 12)
        self.assertEqual(to_int_qty(4), 4)
        for bad in ("1.5", 2.0, True, "-3"):
            with self.assertRaises(InputValidationError):
                to_int_qty(bad)


class ErrorEnvelopeTests(SimpleTestCase):
    def test_error_kinds_have_stable_codes(self):
        self.assertEqual(InputValidationError("x").http_status, 400)
        self.assertEqual(NotFoundError("x").http_status, 404)
        self.assertEqual(ConflictError("x").code, "CONFLICT")
        self.assertEqual(InvariantViolationError("x").http_status, 422)

    def test_insufficient_stock_is_rendered_with_shortfall(self):
        exc = InsufficientStockError("short", shortfall=3, batch_number="B-1", available=2)
        response = exception_handler(exc, {})

        self.assertEqual(response.status_code, 409)
        self.assertEqual(response.data["error"]["code"], "INSUFFICIENT_STOCK")
        self.assertEqual(
            response.data["error"]["details"],
            {"shortfall": 3, "batch_number": "B-1", "available": 2},
        )

    def test_drf_validation_errors_are_wrapped(self):
        exc = serializers.ValidationError({"units": ["This field is required."]})
        response = exception_handler(exc, {})

        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.data["error"]["code"], "VALIDATION_ERROR")
        self.assertIn("units", response.data["error"]["details"])

    def test_unexpected_errors_propagate(self):
        self.assertIsNone(exception_handler(RuntimeError("boom"), {}))


class RetryOnConflictTests(TransactionTestCase):
    def test_retries_deadlocks_then_succeeds(self):
        calls = mock.Mock(side_effect=[OperationalError("deadlock detected"), "done"])

        @retry_on_conflict(attempts=3, base_delay=0)
        def op():
            return calls()

        self.assertEqual(op(), "done")
        self.assertEqual(calls.call_count, 2)

    def test_gives_up_with_conflict_error(self):
        @retry_on_conflict(attempts=2, base_delay=0)
        def op():
            raise OperationalError("database is locked")

        with self.assertRaises(ConflictError):
            op()

    def test_other_operational_errors_are_not_retried(self):
        calls = mock.Mock(side_effect=OperationalError("no such table: x"))

        @retry_on_conflict(attempts=3, base_delay=0)
        def op():
            return calls()

        with self.assertRaises(OperationalError):
            op()
        self.assertEqual(calls.call_count, 1)
