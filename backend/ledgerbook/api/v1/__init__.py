# API v1 Routes
from fastapi import APIRouter

from ledgerbook.api.v1 import (
    accounts, contacts, bills, invoices, payouts, transactions, dashboard
)

api_router = APIRouter()

api_router.include_router(accounts.router)
api_router.include_router(contacts.router)
api_router.include_router(bills.router)
api_router.include_router(invoices.router)
api_router.include_router(payouts.router)
api_router.include_router(transactions.router)
api_router.include_router(dashboard.router)
