"""
Pydantic Schemas — Request & Response models for API validation.

Request bodies are deliberately lenient (every field optional) so the payment
service, not the framework, decides which message a bad request gets.
"""
from datetime import datetime
from typing import Any, Optional, Dict
from pydantic import BaseModel, Field, field_validator


# ──────────────── Payment ────────────────

class PaymentSubmitRequest(BaseModel):
    source_id: Optional[str] = Field(None, alias="sourceId", description="Square payment-method token")
    amount: Any = Field(None, description="Amount in minor units (pence)")
    description: Optional[str] = None
    idempotency_key: Optional[str] = Field(None, alias="idempotencyKey")
    user_id: Optional[str] = Field(None, alias="userId")
    tournament_id: Optional[str] = Field(None, alias="tournamentId")

    class Config:
        populate_by_name = True

    @field_validator("user_id", "tournament_id", mode="before")
    @classmethod
    def numeric_id_to_str(cls, value):
        """Numeric ids become strings; a numeric 0 counts as absent."""
        if isinstance(value, int) and not isinstance(value, bool):
            return str(value) if value else None
        return value


class PaymentSubmitResponse(BaseModel):
    success: bool = True
    payment_id: str = Field(..., alias="paymentId")
    amount: Optional[int] = None           # Minor units, as charged by Square
    status: Optional[str] = None           # Square's status, e.g. COMPLETED
    record_id: Optional[int] = Field(None, alias="recordId")
    warning: Optional[str] = None          # Set when the charge succeeded but the record was not stored

    class Config:
        populate_by_name = True


class PaymentStatusUpdateRequest(BaseModel):
    payment_id: Optional[str] = Field(None, alias="paymentId", description="Square payment ID")
    status: Optional[str] = None

    class Config:
        populate_by_name = True


class PaymentRecordOut(BaseModel):
    id: int
    user_id: Optional[str] = None
    tournament_id: Optional[str] = None
    square_payment_id: str
    amount: float
    currency: str
    status: str
    payment_type: str
    description: Optional[str] = None
    metadata: Dict = {}
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @classmethod
    def from_record(cls, record) -> "PaymentRecordOut":
        return cls(
            id=record.id,
            user_id=record.user_id,
            tournament_id=record.tournament_id,
            square_payment_id=record.square_payment_id,
            amount=float(record.amount),
            currency=record.currency,
            status=record.status,
            payment_type=record.payment_type,
            description=record.description,
            metadata=record.payment_metadata or {},
            created_at=record.created_at,
            updated_at=record.updated_at,
        )


class PaymentStatusUpdateResponse(BaseModel):
    success: bool = True
    payment: PaymentRecordOut


# ──────────────── Generic ────────────────

class HealthResponse(BaseModel):
    status: str
    database: str
    gateway: str
    version: str
    uptime_seconds: float


class ErrorResponse(BaseModel):
    success: bool = False
    error: str
