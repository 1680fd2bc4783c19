# users/urls.py

from django.urls import path

from .views import MeView, UserLedgerEntryView, UserLedgerView

app_name = "users"

urlpatterns = [
    path("me/", MeView.as_view(), name="me"),
    path("users/<uuid:user_id>/ledger/", UserLedgerView.as_view(), name="user-ledger"),
    path("ledger/<uuid:entry_id>/", UserLedgerEntryView.as_view(), name="user-ledger-entry"),
]
