from payments_api.services.square_gateway import SquareClient, ChargeOutcome, ChargeOutcomeKind, GatewayPayment
from payments_api.services.payment_store import PaymentStore
from payments_api.services.payment_service import PaymentIntakeService

__all__ = [
    "SquareClient", "ChargeOutcome", "ChargeOutcomeKind", "GatewayPayment",
    "PaymentStore", "PaymentIntakeService",
]
