# users/permissions.py

"""
Role gates for the business endpoints. Superusers pass every gate.
"""

from rest_framework.permissions import BasePermission

ADMIN = "admin"
MANAGER = "manager"
BOOKER = "booker"
ACCOUNTANT = "accountant"


class RolePermission(BasePermission):
    roles: frozenset = frozenset()

    def has_permission(self, request, view):
        user = request.user
        if not (user and user.is_authenticated):
            return False
        return user.has_role(*self.roles)


class CanBookOrders(RolePermission):
    """Sales, purchases, estimates, returns, deletions, free sales."""

    roles = frozenset({ADMIN, MANAGER, BOOKER})


class CanManageLedgers(RolePermission):
    """Recoveries and counterparty balance entries."""

    roles = frozenset({ADMIN, MANAGER, ACCOUNTANT})


class CanManageInvestors(RolePermission):
    roles = frozenset({ADMIN, MANAGER})
