# parties/admin.py

from django.contrib import admin

from parties.models import Counterparty


@admin.register(Counterparty)
class CounterpartyAdmin(admin.ModelAdmin):
    list_display = ("name", "role", "status", "pay", "receive", "credit_limit")
    list_filter = ("role", "status")
    search_fields = ("name", "phone", "email")
    readonly_fields = ("pay", "receive", "created_at", "updated_at")
