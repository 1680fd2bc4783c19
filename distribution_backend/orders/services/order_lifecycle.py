# orders/services/order_lifecycle.py

"""
ORDER STATUS MACHINE

    pending   -> completed | cancelled | recovered | returned
    completed -> cancelled | recovered | returned
    recovered -> returned

cancelled and returned are terminal. Pure rules, no writes.
"""

from core.exceptions import InvariantViolationError
from orders.models import Order

# ============================================================
# DOMAIN ERRORS
# ============================================================


class InvalidOrderTransitionError(InvariantViolationError):
    pass


# ============================================================
# STATE DEFINITIONS
# ============================================================

TERMINAL_STATES = {
    Order.STATUS_CANCELLED,
    Order.STATUS_RETURNED,
}

ALLOWED_TRANSITIONS = {
    Order.STATUS_PENDING: {
        Order.STATUS_COMPLETED,
        Order.STATUS_CANCELLED,
        Order.STATUS_RECOVERED,
        Order.STATUS_RETURNED,
    },
    Order.STATUS_COMPLETED: {
        Order.STATUS_CANCELLED,
        Order.STATUS_RECOVERED,
        Order.STATUS_RETURNED,
    },
    Order.STATUS_RECOVERED: {
        Order.STATUS_RETURNED,
    },
}

# Orders that can still be deleted by a compensating transaction.
DELETABLE_STATES = {
    Order.STATUS_PENDING,
    Order.STATUS_COMPLETED,
}

# Statuses a new sale / purchase may be created in.
INITIAL_STATES = {
    Order.STATUS_PENDING,
    Order.STATUS_COMPLETED,
}


# ============================================================
# DOMAIN RULES
# ============================================================


def can_transition(*, from_status: str, to_status: str) -> bool:
    if from_status in TERMINAL_STATES:
        return False

    return to_status in ALLOWED_TRANSITIONS.get(from_status, set())


def validate_transition(*, order: Order, target_status: str):
    if not can_transition(
        from_status=order.status,
        to_status=target_status,
    ):
        raise InvalidOrderTransitionError(
            f"Order {order.invoice_number} cannot transition from "
            f"'{order.status}' to '{target_status}'"
        )


def is_deletable(order: Order) -> bool:
    return order.status in DELETABLE_STATES
