from payments_api.utils.money import to_major_units, parse_minor_amount
from payments_api.utils.payment_status import PaymentStatus, can_transition

__all__ = [
    "to_major_units", "parse_minor_amount",
    "PaymentStatus", "can_transition",
]
