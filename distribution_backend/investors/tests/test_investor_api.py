# investors/tests/test_investor_api.py

from django.contrib.auth import get_user_model
from django.test import TestCase
from rest_framework import status
from rest_framework.test import APIClient

User = get_user_model()


class InvestorApiTests(TestCase):
    def setUp(self):
        self.client = APIClient()
        self.manager = User.objects.create_user(email="manager@example.com", password="password123", role="manager")
        self.booker = User.objects.create_user(email="booker@example.com", password="password123", role="booker")
        self.client.force_authenticate(self.manager)

    def _create(self, name="Ali", amount="1000.00"):
        return self.client.post(
            "/api/investors/",
            {"name": name, "amount": amount, "join_date": "2026-01-01"},
            format="json",
        )

    def test_create_and_list(self):
        res = self._create()

        self.assertEqual(res.status_code, status.HTTP_201_CREATED)
        self.assertEqual(res.data["shares"], "100.0000")

        res = self.client.get("/api/investors/")
        self.assertEqual(res.status_code, status.HTTP_200_OK)
        self.assertEqual([row["name"] for row in res.data], ["Ali"])

    def test_booker_cannot_create(self):
        self.client.force_authenticate(self.booker)

        res = self._create()

        self.assertEqual(res.status_code, status.HTTP_403_FORBIDDEN)

    def test_investment_updates_shares(self):
        ali = self._create("Ali", "300.00").data["id"]
        sara = self._create("Sara", "100.00").data["id"]

        res = self.client.post(f"/api/investors/{sara}/investments/", {"amount": "200.00"}, format="json")
        self.assertEqual(res.status_code, status.HTTP_201_CREATED)

        detail = self.client.get(f"/api/investors/{ali}/")
        self.assertEqual(detail.data["investor"]["shares"], "50.0000")
        self.assertEqual(detail.data["capital"], "300.00")

    def test_ledger_entry(self):
        investor_id = self._create().data["id"]

        res = self.client.post(
            f"/api/investors/{investor_id}/ledger/",
            {"type": "debit", "amount": "40.00", "note": "advance"},
            format="json",
        )

        self.assertEqual(res.status_code, status.HTTP_201_CREATED)
        detail = self.client.get(f"/api/investors/{investor_id}/")
        self.assertEqual(detail.data["net_balance"], "-40.00")
        self.assertEqual(detail.data["ledger"][0]["entry_type"], "debit")

    def test_patch_rejects_shares(self):
        investor_id = self._create().data["id"]

        res = self.client.patch(f"/api/investors/{investor_id}/", {"shares": "10"}, format="json")

        self.assertEqual(res.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(res.data["error"]["code"], "VALIDATION_ERROR")

    def test_unknown_investor(self):
        res = self.client.get("/api/investors/00000000-0000-0000-0000-000000000000/")

        self.assertEqual(res.status_code, status.HTTP_404_NOT_FOUND)

    def test_ledger_entry_edit_and_delete(self):
        investor_id = self._create().data["id"]
        entry_id = self.client.post(
            f"/api/investors/{investor_id}/ledger/", {"type": "debit", "amount": "40.00"}, format="json"
        ).data["id"]

        res = self.client.patch(
            f"/api/investors/{investor_id}/ledger/{entry_id}/", {"amount": "25.00"}, format="json"
        )
        self.assertEqual(res.status_code, status.HTTP_200_OK)
        self.assertEqual(self.client.get(f"/api/investors/{investor_id}/").data["net_balance"], "-25.00")

        res = self.client.delete(f"/api/investors/{investor_id}/ledger/{entry_id}/")
        self.assertEqual(res.status_code, status.HTTP_204_NO_CONTENT)
        self.assertEqual(self.client.get(f"/api/investors/{investor_id}/").data["net_balance"], "0.00")
