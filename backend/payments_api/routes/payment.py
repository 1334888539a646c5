"""
Payment Routes — Square card payments for tournament entry fees.
Handles: new payments (POST) and payment status updates (PUT).
"""
import logging

from fastapi import APIRouter, Depends

from payments_api.exceptions import PaymentError, UnexpectedFailure
from payments_api.schemas.schemas import (
    PaymentSubmitRequest, PaymentSubmitResponse,
    PaymentStatusUpdateRequest, PaymentStatusUpdateResponse,
    PaymentRecordOut, ErrorResponse,
)
from payments_api.services.payment_service import PaymentIntakeService, get_payment_service

logger = logging.getLogger("payments_api.routes.payment")

router = APIRouter(prefix="/api/payments", tags=["Payments"])

ERROR_RESPONSES = {400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}}


@router.post(
    "/square",
    response_model=PaymentSubmitResponse,
    response_model_exclude_none=True,
    responses=ERROR_RESPONSES,
)
def create_payment(
    payload: PaymentSubmitRequest,
    service: PaymentIntakeService = Depends(get_payment_service),
):
    """Charge a Square payment token and record the payment."""
    try:
        return service.submit(payload)
    except PaymentError:
        raise
    except Exception as exc:
        logger.exception("Payment processing error: %s", exc)
        raise UnexpectedFailure("Payment processing failed") from exc


@router.put(
    "/square",
    response_model=PaymentStatusUpdateResponse,
    responses=ERROR_RESPONSES,
)
def update_payment_status(
    payload: PaymentStatusUpdateRequest,
    service: PaymentIntakeService = Depends(get_payment_service),
):
    """Update a payment's status (e.g. from a Square notification)."""
    try:
        record = service.update_status(payload.payment_id, payload.status)
    except PaymentError:
        raise
    except Exception as exc:
        logger.exception("Payment update error: %s", exc)
        raise UnexpectedFailure("Payment update failed") from exc

    return PaymentStatusUpdateResponse(payment=PaymentRecordOut.from_record(record))
