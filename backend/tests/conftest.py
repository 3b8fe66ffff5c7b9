"""
Shared fixtures: an in-memory SQLite store per test, wired exactly like
the production engine (foreign keys on, BEGIN IMMEDIATE, savepoints).
"""
import os

os.environ.setdefault("DATABASE_URL", "sqlite://")

import pytest
from datetime import date
from fastapi.testclient import TestClient
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from ledgerbook.core.database import Base, build_engine, get_db, init_db
from ledgerbook.main import app
from ledgerbook.schemas import (
    AccountInput, ContactInput, BillInput, InvoiceInput, PayoutInput, TransactionInput
)
from ledgerbook.services import (
    AccountService, ContactService, BillService, InvoiceService, PayoutService, TransactionService
)


@pytest.fixture
def engine():
    engine = build_engine("sqlite://", poolclass=StaticPool)
    init_db(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def client(session_factory):
    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


# ==================== SERVICE-LEVEL BUILDERS ====================

@pytest.fixture
def make_account(db):
    def _make(name="HDFC Current", type="bank", opening_balance=0):
        return AccountService(db).create(
            AccountInput(name=name, type=type, opening_balance=opening_balance)
        )
    return _make


@pytest.fixture
def make_contact(db):
    def _make(name="Fresh Farms", type="vendor", email=None, phone=None):
        return ContactService(db).create(
            ContactInput(name=name, type=type, email=email, phone=phone)
        )
    return _make


@pytest.fixture
def make_bill(db):
    def _make(amount=10000, contact_id=None, bill_number="B-1", status="", issue_date=None):
        return BillService(db).create(BillInput(
            amount=amount, contact_id=contact_id, bill_number=bill_number,
            status=status, issue_date=issue_date
        ))
    return _make


@pytest.fixture
def make_invoice(db):
    def _make(amount=10000, contact_id=None, invoice_number="INV-1", status=""):
        return InvoiceService(db).create(InvoiceInput(
            amount=amount, contact_id=contact_id, invoice_number=invoice_number, status=status
        ))
    return _make


@pytest.fixture
def make_payout(db):
    def _make(final_payout_amt=50000, platform="swiggy", outlet_name="Koramangala",
              settlement_date=date(2024, 3, 15)):
        return PayoutService(db).create(PayoutInput(
            outlet_name=outlet_name, platform=platform,
            settlement_date=settlement_date, final_payout_amt=final_payout_amt
        ))
    return _make


@pytest.fixture
def make_transaction(db):
    def _make(account_id, amount=10000, type="expense", transfer_account_id=None,
              contact_id=None, reference=None, transaction_date=date(2024, 3, 1)):
        return TransactionService(db).create(TransactionInput(
            account_id=account_id, type=type, amount=amount,
            transfer_account_id=transfer_account_id, contact_id=contact_id,
            reference=reference, transaction_date=transaction_date
        ))
    return _make
