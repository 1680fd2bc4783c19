# users/models.py

"""
STAFF ACCOUNTS

Email is the login. Each account carries one role, checked by
users/permissions.py:

- admin       full access
- manager     orders, recoveries, investors
- booker      books orders in the field (Order.booker)
- accountant  recoveries and counterparty ledgers

UserLedgerEntry is the per-staff account (bookers' incentives, advances,
settlements) with a CR/DB running balance.
"""

import uuid
from decimal import Decimal

from django.conf import settings
from django.contrib.auth.models import AbstractBaseUser, BaseUserManager, PermissionsMixin
from django.db import models
from django.db.models import Q


class UserManager(BaseUserManager):
    use_in_migrations = True

    def _create_user(self, email, password, **extra_fields):
        if not email:
            raise ValueError("An email address is required")

        user = self.model(email=self.normalize_email(email), **extra_fields)
        if password:
            user.set_password(password)
        else:
            user.set_unusable_password()
        user.save(using=self._db)
        return user

    def create_user(self, email=None, password=None, **extra_fields):
        extra_fields.setdefault("is_staff", False)
        extra_fields.setdefault("is_superuser", False)
        return self._create_user(email, password, **extra_fields)

    def create_superuser(self, email, password=None, **extra_fields):
        if not password:
            raise ValueError("Superuser must have a password")

        extra_fields.update(is_staff=True, is_superuser=True, is_active=True)
        extra_fields.setdefault("role", User.ROLE_ADMIN)
        return self._create_user(email, password, **extra_fields)


class User(AbstractBaseUser, PermissionsMixin):
    ROLE_ADMIN = "admin"
    ROLE_MANAGER = "manager"
    ROLE_BOOKER = "booker"
    ROLE_ACCOUNTANT = "accountant"

    ROLE_CHOICES = [
        (ROLE_ADMIN, "Admin"),
        (ROLE_MANAGER, "Manager"),
        (ROLE_BOOKER, "Booker"),
        (ROLE_ACCOUNTANT, "Accountant"),
    ]

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    email = models.EmailField(unique=True)

    first_name = models.CharField(max_length=100, blank=True)
    last_name = models.CharField(max_length=100, blank=True)
    phone = models.CharField(max_length=32, blank=True)
    role = models.CharField(max_length=20, choices=ROLE_CHOICES, default=ROLE_BOOKER)

    is_active = models.BooleanField(default=True)
    is_staff = models.BooleanField(default=False)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = UserManager()

    USERNAME_FIELD = "email"
    REQUIRED_FIELDS = []

    class Meta:
        ordering = ["-created_at"]

    def has_role(self, *roles) -> bool:
        return self.is_superuser or self.role in roles

    def __str__(self):
        return f"{self.email} ({self.role})"


class UserLedgerEntry(models.Model):
    """
    One line of a staff member's account.

    credit - debit is the entry's effect on the balance; incentive_amount
    records the incentive an order earned and is informational only.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="ledger_entries",
    )

    date = models.DateField()
    description = models.CharField(max_length=255, blank=True, default="")

    debit = models.DecimalField(max_digits=14, decimal_places=2, default=Decimal("0.00"))
    credit = models.DecimalField(max_digits=14, decimal_places=2, default=Decimal("0.00"))
    incentive_amount = models.DecimalField(max_digits=14, decimal_places=2, default=Decimal("0.00"))
    invoice_number = models.CharField(max_length=64, blank=True, default="")

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-date", "-created_at"]
        constraints = [
            models.CheckConstraint(
                condition=Q(debit__gte=0) & Q(credit__gte=0) & Q(incentive_amount__gte=0),
                name="chk_user_ledger_amounts_gte_zero",
            ),
        ]

    @property
    def net(self) -> Decimal:
        return self.credit - self.debit

    def __str__(self):
        return f"{self.user_id} {self.date} {self.net}"
