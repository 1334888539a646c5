from payments_api.schemas.schemas import (
    PaymentSubmitRequest, PaymentSubmitResponse,
    PaymentStatusUpdateRequest, PaymentStatusUpdateResponse,
    PaymentRecordOut, HealthResponse, ErrorResponse,
)

__all__ = [
    "PaymentSubmitRequest", "PaymentSubmitResponse",
    "PaymentStatusUpdateRequest", "PaymentStatusUpdateResponse",
    "PaymentRecordOut", "HealthResponse", "ErrorResponse",
]
