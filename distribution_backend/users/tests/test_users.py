# users/tests/test_users.py

from datetime import date
from decimal import Decimal

from django.contrib.auth import get_user_model
from django.test import TestCase
from rest_framework import status
from rest_framework.test import APIClient, APIRequestFactory

from core.exceptions import InputValidationError, NotFoundError
from users.models import UserLedgerEntry
from users.permissions import CanBookOrders, CanManageInvestors, CanManageLedgers
from users.services.ledger_service import add_ledger_entry, edit_ledger_entry, format_balance, user_ledger

User = get_user_model()


class UserManagerTests(TestCase):
    def test_create_user_defaults_to_booker(self):
        user = User.objects.create_user(email="Booker@Example.com", password="password123")

        self.assertEqual(user.role, User.ROLE_BOOKER)
        self.assertTrue(user.check_password("password123"))
        self.assertFalse(user.is_staff)

    def test_superuser_is_admin(self):
        user = User.objects.create_superuser(email="root@example.com", password="password123")

        self.assertEqual(user.role, User.ROLE_ADMIN)
        self.assertTrue(user.is_superuser)

    def test_superuser_requires_password(self):
        with self.assertRaises(ValueError):
            User.objects.create_superuser(email="root@example.com", password=None)


class RolePermissionTests(TestCase):
    def _allowed(self, permission, role):
        request = APIRequestFactory().get("/")
        request.user = User.objects.create_user(email=f"{role}@example.com", password="password123", role=role)
        return permission().has_permission(request, None)

    def test_booking_roles(self):
        self.assertTrue(self._allowed(CanBookOrders, "booker"))
        self.assertFalse(self._allowed(CanBookOrders, "accountant"))

    def test_ledger_roles(self):
        self.assertTrue(self._allowed(CanManageLedgers, "accountant"))
        self.assertFalse(self._allowed(CanManageLedgers, "booker"))

    def test_investor_roles(self):
        self.assertTrue(self._allowed(CanManageInvestors, "manager"))
        self.assertFalse(self._allowed(CanManageInvestors, "accountant"))


class MeViewTests(TestCase):
    def test_returns_current_user(self):
        user = User.objects.create_user(email="me@example.com", password="password123", role="accountant")
        client = APIClient()
        client.force_authenticate(user)

        res = client.get("/api/auth/me/")

        self.assertEqual(res.status_code, status.HTTP_200_OK)
        self.assertEqual(res.data["email"], "me@example.com")
        self.assertEqual(res.data["role"], "accountant")

    def test_requires_authentication(self):
        res = APIClient().get("/api/auth/me/")

        self.assertEqual(res.status_code, status.HTTP_401_UNAUTHORIZED)


class UserLedgerServiceTests(TestCase):
    def setUp(self):
        self.booker = User.objects.create_user(email="booker@example.com", password="password123")

    def _add(self, day, **amounts):
        return add_ledger_entry(user_id=self.booker.id, data={"date": date(2026, 3, day), **amounts})

    def test_balance_renders_credit_and_debit_sides(self):
        self.assertEqual(format_balance(Decimal("0")), "0.00 CR")
        self.assertEqual(format_balance(Decimal("120.5")), "120.50 CR")
        self.assertEqual(format_balance(Decimal("-35")), "35.00 DB")

    def test_running_balance_and_totals(self):
        self._add(1, credit="100", incentive_amount="100", invoice_number="INV-1", description="Incentive")
        self._add(5, debit="150", description="Advance")
        self._add(9, credit="20")

        ledger = user_ledger(user_id=self.booker.id)

        self.assertEqual([e.balance_display for e in ledger["entries"]], ["30.00 DB", "50.00 DB", "100.00 CR"])
        self.assertEqual(ledger["total_credit"], Decimal("120.00"))
        self.assertEqual(ledger["total_debit"], Decimal("150.00"))
        self.assertEqual(ledger["total_incentive"], Decimal("100.00"))
        self.assertEqual(ledger["balance_display"], "30.00 DB")

    def test_edit_keeps_unset_amounts(self):
        entry = self._add(1, credit="100", incentive_amount="10")

        edited = edit_ledger_entry(entry_id=entry.id, changes={"debit": "40", "description": "Partly settled"})

        self.assertEqual(edited.credit, Decimal("100.00"))
        self.assertEqual(edited.debit, Decimal("40.00"))
        self.assertEqual(edited.incentive_amount, Decimal("10.00"))
        self.assertEqual(user_ledger(user_id=self.booker.id)["balance_display"], "60.00 CR")

    def test_empty_or_negative_entries_are_rejected(self):
        with self.assertRaises(InputValidationError):
            self._add(1)
        with self.assertRaises(InputValidationError):
            self._add(1, debit="-5")
        self.assertFalse(UserLedgerEntry.objects.exists())

    def test_unknown_user(self):
        with self.assertRaises(NotFoundError):
            add_ledger_entry(user_id="00000000-0000-0000-0000-000000000000", data={"credit": "1"})


class UserLedgerApiTests(TestCase):
    def setUp(self):
        self.accountant = User.objects.create_user(email="acc@example.com", password="password123", role="accountant")
        self.booker = User.objects.create_user(email="booker@example.com", password="password123")
        self.other = User.objects.create_user(email="other@example.com", password="password123")
        self.client = APIClient()
        self.client.force_authenticate(self.accountant)

    def test_add_list_and_edit(self):
        url = f"/api/auth/users/{self.booker.id}/ledger/"
        res = self.client.post(url, {"credit": "75.00", "incentive_amount": "75.00", "invoice_number": "INV-4"}, format="json")
        self.assertEqual(res.status_code, status.HTTP_201_CREATED)
        self.assertEqual(res.data["balance"], "75.00 CR")

        res = self.client.patch(f"/api/auth/ledger/{res.data['id']}/", {"debit": "100.00"}, format="json")
        self.assertEqual(res.status_code, status.HTTP_200_OK)

        res = self.client.get(url)
        self.assertEqual(res.status_code, status.HTTP_200_OK)
        self.assertEqual(res.data["balance"], "25.00 DB")
        self.assertEqual(len(res.data["entries"]), 1)

    def test_booker_reads_only_own_ledger(self):
        self.client.force_authenticate(self.booker)

        self.assertEqual(self.client.get(f"/api/auth/users/{self.booker.id}/ledger/").status_code, status.HTTP_200_OK)
        self.assertEqual(
            self.client.get(f"/api/auth/users/{self.other.id}/ledger/").status_code, status.HTTP_403_FORBIDDEN
        )
        res = self.client.post(f"/api/auth/users/{self.booker.id}/ledger/", {"credit": "10.00"}, format="json")
        self.assertEqual(res.status_code, status.HTTP_403_FORBIDDEN)
