# investors/admin.py

from django.contrib import admin

from investors.models import (
    Investor,
    InvestorInvestment,
    InvestorLedgerEntry,
    InvestorProfitRecord,
)


class InvestorInvestmentInline(admin.TabularInline):
    model = InvestorInvestment
    extra = 0
    readonly_fields = ("amount", "date", "created_at")
    can_delete = False


@admin.register(Investor)
class InvestorAdmin(admin.ModelAdmin):
    list_display = ("name", "type", "status", "join_date", "shares", "profit_percentage", "credit", "debit")
    list_filter = ("type", "status", "is_house")
    search_fields = ("name", "mobile_number", "cnic_number")
    readonly_fields = ("shares", "credit", "debit", "is_house", "created_at", "updated_at")
    inlines = [InvestorInvestmentInline]


@admin.register(InvestorLedgerEntry)
class InvestorLedgerEntryAdmin(admin.ModelAdmin):
    list_display = ("investor", "entry_type", "amount", "date", "note")
    list_filter = ("entry_type",)


@admin.register(InvestorProfitRecord)
class InvestorProfitRecordAdmin(admin.ModelAdmin):
    list_display = ("investor", "month", "invoice_number", "net_profit", "investor_share", "owner_share", "is_reversal")
    list_filter = ("month", "is_reversal")
    search_fields = ("invoice_number", "investor__name")

    def has_change_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return False
