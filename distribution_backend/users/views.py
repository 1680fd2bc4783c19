# users/views.py
"""
USER VIEWS

Token issue/refresh lives in backend/urls.py (SimpleJWT).
"""

from __future__ import annotations

from drf_spectacular.utils import extend_schema
from rest_framework import status
from rest_framework.exceptions import PermissionDenied
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from .permissions import CanManageLedgers
from .serializers import UserLedgerEntryInputSerializer, UserLedgerEntrySerializer, UserSerializer
from .services.ledger_service import add_ledger_entry, edit_ledger_entry, user_ledger


# ---------------- ME ----------------
class MeView(APIView):
    permission_classes = [IsAuthenticated]

    @extend_schema(tags=["auth"], responses=UserSerializer)
    def get(self, request):
        return Response(UserSerializer(request.user).data, status=status.HTTP_200_OK)


# ---------------- LEDGER ----------------
class UserLedgerView(APIView):
    """
    GET  /api/auth/users/<uuid>/ledger/   own ledger, or any with ledger rights
    POST /api/auth/users/<uuid>/ledger/   ledger rights only
    """

    permission_classes = [IsAuthenticated]

    @extend_schema(tags=["auth"], responses=UserLedgerEntrySerializer(many=True))
    def get(self, request, user_id):
        if request.user.pk != user_id and not CanManageLedgers().has_permission(request, self):
            raise PermissionDenied()

        ledger = user_ledger(user_id=user_id)
        return Response(
            {
                "user": str(ledger["user"].id),
                "entries": UserLedgerEntrySerializer(ledger["entries"], many=True).data,
                "total_credit": str(ledger["total_credit"]),
                "total_debit": str(ledger["total_debit"]),
                "total_incentive": str(ledger["total_incentive"]),
                "balance": ledger["balance_display"],
            },
            status=status.HTTP_200_OK,
        )

    @extend_schema(tags=["auth"], request=UserLedgerEntryInputSerializer, responses={201: UserLedgerEntrySerializer})
    def post(self, request, user_id):
        if not CanManageLedgers().has_permission(request, self):
            raise PermissionDenied()

        s = UserLedgerEntryInputSerializer(data=request.data)
        s.is_valid(raise_exception=True)
        entry = add_ledger_entry(user_id=user_id, data=s.validated_data)
        return Response(UserLedgerEntrySerializer(entry).data, status=status.HTTP_201_CREATED)


class UserLedgerEntryView(APIView):
    permission_classes = [CanManageLedgers]

    @extend_schema(tags=["auth"], request=UserLedgerEntryInputSerializer, responses=UserLedgerEntrySerializer)
    def patch(self, request, entry_id):
        s = UserLedgerEntryInputSerializer(data=request.data)
        s.is_valid(raise_exception=True)
        entry = edit_ledger_entry(entry_id=entry_id, changes=s.validated_data)
        return Response(UserLedgerEntrySerializer(entry).data, status=status.HTTP_200_OK)
