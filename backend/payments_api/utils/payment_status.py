"""
Payment Status — Closed set of statuses and the transitions allowed between them.
"""
from enum import Enum
from typing import Optional


class PaymentStatus(str, Enum):
    PENDING = "pending"
    APPROVED = "approved"
    COMPLETED = "completed"
    CANCELED = "canceled"
    FAILED = "failed"
    REFUNDED = "refunded"

    @classmethod
    def parse(cls, value: str) -> Optional["PaymentStatus"]:
        """Case-insensitive lookup; None for anything outside the set."""
        try:
            return cls(value.strip().lower())
        except ValueError:
            return None


ALLOWED_TRANSITIONS: dict[PaymentStatus, frozenset[PaymentStatus]] = {
    PaymentStatus.PENDING: frozenset({
        PaymentStatus.APPROVED,
        PaymentStatus.COMPLETED,
        PaymentStatus.CANCELED,
        PaymentStatus.FAILED,
    }),
    PaymentStatus.APPROVED: frozenset({
        PaymentStatus.COMPLETED,
        PaymentStatus.CANCELED,
        PaymentStatus.FAILED,
    }),
    PaymentStatus.COMPLETED: frozenset({PaymentStatus.REFUNDED}),
    PaymentStatus.CANCELED: frozenset(),
    PaymentStatus.FAILED: frozenset(),
    PaymentStatus.REFUNDED: frozenset(),
}


def can_transition(current: str, target: PaymentStatus) -> bool:
    """Whether a record currently in `current` may move to `target`.

    Re-applying the same status is always allowed. Stored values outside the
    known set (rows written before statuses were enforced) accept any target.
    """
    current_status = PaymentStatus.parse(current or "")
    if current_status is None or current_status == target:
        return True
    return target in ALLOWED_TRANSITIONS[current_status]
