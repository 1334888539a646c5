"""
Fixtures for payment service and router tests.
"""
import os
import tempfile

# Settings are read once at import time; point them at throwaway resources first.
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["LOG_DIR"] = tempfile.mkdtemp(prefix="payments-logs-")
os.environ["SQUARE_ACCESS_TOKEN"] = "test-token"

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from payments_api.database import Base, get_db
from payments_api.main import app
from payments_api.models import PaymentRecord, TournamentRegistration  # noqa: F401
from payments_api.services.payment_store import PaymentStore, get_payment_store
from payments_api.services.square_gateway import ChargeOutcome, GatewayPayment, get_gateway

engine = create_engine(
    "sqlite://",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


class FakeGateway:
    """Records create_payment calls and replays a canned outcome (or raises it)."""

    def __init__(self, outcome=None):
        self.calls = []
        self.outcome = outcome or ChargeOutcome.charged(square_payment())

    def create_payment(self, **kwargs):
        self.calls.append(kwargs)
        if isinstance(self.outcome, Exception):
            raise self.outcome
        return self.outcome


def square_payment(payment_id="sq_pay_123", amount=2500, currency="GBP", status="COMPLETED"):
    return GatewayPayment(
        id=payment_id,
        amount=amount,
        currency=currency,
        status=status,
        raw={
            "id": payment_id,
            "amount_money": {"amount": amount, "currency": currency},
            "status": status,
        },
    )


@pytest.fixture
def db_session():
    Base.metadata.create_all(bind=engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def gateway():
    return FakeGateway()


@pytest.fixture
def client(db_session, gateway):
    def override_db():
        yield db_session

    app.dependency_overrides[get_db] = override_db
    app.dependency_overrides[get_gateway] = lambda: gateway
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


@pytest.fixture
def use_store(client, db_session):
    """Swap in a PaymentStore subclass for the request under test."""

    def _use(store_cls=PaymentStore):
        app.dependency_overrides[get_payment_store] = lambda: store_cls(db_session)

    return _use


@pytest.fixture
def valid_payload():
    return {
        "sourceId": "cnon:card-nonce-ok",
        "amount": 2500,
        "description": "Spring Open entry fee",
        "idempotencyKey": "idem-key-1",
        "userId": "user-1",
        "tournamentId": "t-42",
    }
