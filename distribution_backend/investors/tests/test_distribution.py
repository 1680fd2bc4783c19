# investors/tests/test_distribution.py

from datetime import date
from decimal import Decimal

from django.core.exceptions import ValidationError
from django.test import SimpleTestCase, TestCase

from investors.models import Investor, InvestorProfitRecord
from investors.services.profit_distribution import (
    compute_reserves,
    get_house_account,
    is_eligible,
    reverse_order_distribution,
    split_share,
)
from orders.services import create_sale
from orders.tests.helpers import line, make_batch, make_customer, make_product, sale_payload


class ReserveTests(SimpleTestCase):
    def test_expense_and_charity(self):
        r = compute_reserves(gross_sale="100.00", profit="40.00")

        self.assertEqual(r.expense, Decimal("2.00"))
        self.assertEqual(r.charity, Decimal("4.00"))
        self.assertEqual(r.distributable, Decimal("34.00"))

    def test_distributable_formula_holds(self):
        for gross, profit in [("250.00", "60.00"), ("99.99", "12.34"), ("10.00", "1.00"), ("1000.00", "0.00")]:
            r = compute_reserves(gross_sale=gross, profit=profit)
            self.assertEqual(r.distributable, r.profit - r.charity - r.expense)

    def test_loss_stays_negative(self):
        r = compute_reserves(gross_sale="50.00", profit="-10.00")

        self.assertLess(r.distributable, Decimal("0"))


class EligibilityTests(SimpleTestCase):
    def test_joined_before_month(self):
        self.assertTrue(is_eligible(join_date=date(2026, 2, 20), today=date(2026, 3, 5)))

    def test_joined_on_first(self):
        self.assertTrue(is_eligible(join_date=date(2026, 3, 1), today=date(2026, 3, 1)))

    def test_mid_month_joiner_after_cutoff(self):
        self.assertTrue(is_eligible(join_date=date(2026, 3, 10), today=date(2026, 3, 20)))

    def test_mid_month_joiner_before_cutoff(self):
        self.assertFalse(is_eligible(join_date=date(2026, 3, 10), today=date(2026, 3, 10)))

    def test_joined_on_cutoff_day(self):
        self.assertTrue(is_eligible(join_date=date(2026, 3, 15), today=date(2026, 3, 15)))

    def test_late_joiner_waits_for_next_month(self):
        self.assertFalse(is_eligible(join_date=date(2026, 3, 18), today=date(2026, 3, 30)))
        self.assertTrue(is_eligible(join_date=date(2026, 3, 18), today=date(2026, 4, 2)))

    def test_missing_join_date(self):
        self.assertFalse(is_eligible(join_date=None, today=date(2026, 3, 20)))


class SplitShareTests(SimpleTestCase):
    def test_full_percentage_goes_to_investor(self):
        base, investor_share, owner_share = split_share(
            distributable=Decimal("34.00"), shares=Decimal("50"), profit_percentage=None
        )

        self.assertEqual(base, Decimal("17.00"))
        self.assertEqual(investor_share, Decimal("17.00"))
        self.assertEqual(owner_share, Decimal("0.00"))

    def test_truncates_and_conserves(self):
        base, investor_share, owner_share = split_share(
            distributable=Decimal("34.00"), shares=Decimal("33.3333"), profit_percentage=Decimal("80")
        )

        self.assertEqual(base, Decimal("11.33"))
        self.assertEqual(investor_share, Decimal("9.06"))
        self.assertEqual(investor_share + owner_share, base)

    def test_never_exceeds_distributable(self):
        distributable = Decimal("17.77")
        shares = [Decimal("33.3333"), Decimal("33.3333"), Decimal("33.3333")]
        handed_out = sum(
            (split_share(distributable=distributable, shares=s, profit_percentage=Decimal("70"))[0] for s in shares),
            Decimal("0"),
        )

        self.assertLessEqual(handed_out, distributable)


class HouseAccountTests(TestCase):
    def test_created_once(self):
        first = get_house_account()
        second = get_house_account()

        self.assertEqual(first.pk, second.pk)
        self.assertEqual(first.type, Investor.TYPE_COMPANY)
        self.assertEqual(Investor.objects.filter(is_house=True).count(), 1)


class ReverseDistributionTests(TestCase):
    def setUp(self):
        product = make_product()
        make_batch(product, "B1", stock=20, unit_cost="6.00")
        self.investor = Investor.objects.create(
            name="Ali", join_date=date(2025, 6, 1), shares=Decimal("50"), profit_percentage=Decimal("80")
        )
        self.order = create_sale(
            data=sale_payload(make_customer(), [line(product, "B1", 10, "10.00")]),
            today=date(2026, 3, 20),
        )["order"]

    def test_reversal_debits_and_is_idempotent(self):
        reversals = reverse_order_distribution(order=self.order)

        self.assertEqual(len(reversals), 1)
        self.assertTrue(reversals[0].is_reversal)
        self.assertEqual(reversals[0].investor_share, Decimal("-13.60"))

        self.investor.refresh_from_db()
        self.assertEqual(self.investor.credit, Decimal("0.00"))
        self.assertEqual(self.investor.debit, Decimal("0.00"))
        self.assertEqual(get_house_account().credit, Decimal("0.00"))

        self.assertEqual(reverse_order_distribution(order=self.order), [])
        self.assertEqual(InvestorProfitRecord.objects.filter(order=self.order).count(), 2)

    def test_records_are_append_only(self):
        record = InvestorProfitRecord.objects.get(order=self.order)
        record.investor_share = Decimal("99.00")

        with self.assertRaises(ValidationError):
            record.save()
        with self.assertRaises(ValidationError):
            record.delete()


class CompanyHolderDistributionTests(TestCase):
    def setUp(self):
        product = make_product()
        make_batch(product, "B1", stock=20, unit_cost="6.00")
        self.person = Investor.objects.create(name="Ali", join_date=date(2025, 1, 1), shares=Decimal("50"))
        self.company = Investor.objects.create(
            name="Partner Co", type=Investor.TYPE_COMPANY, join_date=date(2025, 1, 1), shares=Decimal("50")
        )
        self.order = create_sale(
            data=sale_payload(make_customer(), [line(product, "B1", 10, "10.00")]),
            today=date(2026, 3, 20),
        )["order"]

    def test_company_share_is_credited_to_house(self):
        company_record = InvestorProfitRecord.objects.get(order=self.order, investor=self.company)
        self.assertEqual(company_record.investor_share, Decimal("0.00"))
        self.assertEqual(company_record.owner_share, Decimal("17.00"))

        self.company.refresh_from_db()
        self.person.refresh_from_db()
        self.assertEqual(self.company.credit, Decimal("0.00"))
        self.assertEqual(self.person.credit, Decimal("17.00"))
        self.assertEqual(get_house_account().credit, Decimal("17.00"))

    def test_every_share_is_accounted_for(self):
        records = list(InvestorProfitRecord.objects.filter(order=self.order))
        investor_total = sum((r.investor_share for r in records), Decimal("0"))
        owner_total = sum((r.owner_share for r in records), Decimal("0"))

        self.assertEqual(len(records), 2)
        self.assertEqual(investor_total + owner_total, sum((r.total for r in records), Decimal("0")))
        self.assertEqual(investor_total + owner_total, Decimal("34.00"))
        self.assertEqual(get_house_account().credit, owner_total)

    def test_reversal_debits_house_for_company_share(self):
        reverse_order_distribution(order=self.order)

        self.assertEqual(get_house_account().credit, Decimal("0.00"))
        self.company.refresh_from_db()
        self.assertEqual(self.company.debit, Decimal("0.00"))
