# orders/api/filters.py

import django_filters

from orders.models import Order


class OrderFilter(django_filters.FilterSet):
    counterparty = django_filters.UUIDFilter(field_name="counterparty_id")
    invoice_number = django_filters.CharFilter(field_name="invoice_number", lookup_expr="icontains")
    created_from = django_filters.DateFilter(field_name="created_at", lookup_expr="date__gte")
    created_to = django_filters.DateFilter(field_name="created_at", lookup_expr="date__lte")
    open_only = django_filters.BooleanFilter(method="filter_open_only")

    class Meta:
        model = Order
        fields = ["type", "status", "counterparty", "invoice_number"]

    def filter_open_only(self, queryset, name, value):
        if value:
            return queryset.filter(due_amount__gt=0)
        return queryset
