# parties/api/urls.py

from django.urls import path

from parties.api.views import (
    CounterpartyBalanceEntryView,
    CounterpartyDetailView,
    CounterpartyListCreateView,
)

app_name = "parties"

urlpatterns = [
    path("", CounterpartyListCreateView.as_view(), name="counterparty-list"),
    path("<uuid:counterparty_id>/", CounterpartyDetailView.as_view(), name="counterparty-detail"),
    path(
        "<uuid:counterparty_id>/balance/",
        CounterpartyBalanceEntryView.as_view(),
        name="counterparty-balance",
    ),
]
