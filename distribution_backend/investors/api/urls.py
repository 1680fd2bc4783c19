# investors/api/urls.py

from django.urls import path

from investors.api.views import (
    InvestmentCreateView,
    InvestorDetailView,
    InvestorListCreateView,
    LedgerEntryCreateView,
    LedgerEntryDetailView,
)

app_name = "investors"

urlpatterns = [
    path("", InvestorListCreateView.as_view(), name="investor-list"),
    path("<uuid:investor_id>/", InvestorDetailView.as_view(), name="investor-detail"),
    path("<uuid:investor_id>/investments/", InvestmentCreateView.as_view(), name="investor-investments"),
    path("<uuid:investor_id>/ledger/", LedgerEntryCreateView.as_view(), name="investor-ledger"),
    path(
        "<uuid:investor_id>/ledger/<uuid:entry_id>/",
        LedgerEntryDetailView.as_view(),
        name="investor-ledger-entry",
    ),
]
