# users/admin.py

from django.contrib import admin
from django.contrib.auth import get_user_model
from django.contrib.auth.admin import UserAdmin as DjangoUserAdmin

from users.models import UserLedgerEntry

User = get_user_model()


@admin.register(User)
class StaffUserAdmin(DjangoUserAdmin):
    """
    Staff accounts. Roles drive API permissions (users/permissions.py).
    """

    ordering = ("email",)
    list_display = ("email", "first_name", "last_name", "role", "is_active", "created_at")
    list_filter = ("role", "is_active", "is_staff")
    search_fields = ("email", "first_name", "last_name", "phone")
    readonly_fields = ("created_at", "updated_at", "last_login")

    fieldsets = (
        (None, {"fields": ("email", "password")}),
        ("Profile", {"fields": ("first_name", "last_name", "phone")}),
        ("Access", {"fields": ("role", "is_active", "is_staff", "is_superuser")}),
        ("Audit", {"fields": ("last_login", "created_at", "updated_at")}),
    )

    add_fieldsets = (
        (None, {"classes": ("wide",), "fields": ("email", "role", "password1", "password2")}),
    )


@admin.register(UserLedgerEntry)
class UserLedgerEntryAdmin(admin.ModelAdmin):
    list_display = ("user", "date", "description", "debit", "credit", "incentive_amount", "invoice_number")
    list_filter = ("date",)
    search_fields = ("user__email", "description", "invoice_number")
    readonly_fields = ("created_at", "updated_at")
