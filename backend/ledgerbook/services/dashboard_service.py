"""
Dashboard Service - Totals and recent activity
"""
from typing import Dict
from sqlalchemy.orm import Session
from sqlalchemy import func

from ledgerbook.models import (
    Account, Contact, Bill, Invoice, Payout, Transaction,
    BillStatus, InvoiceStatus, DocumentType
)
from ledgerbook.services.ledger_service import document_allocated
from ledgerbook.services.payout_service import PayoutService
from ledgerbook.services.transaction_service import TransactionService


class DashboardService:
    def __init__(self, db: Session):
        self.db = db

    def _count(self, model) -> int:
        return self.db.query(func.count(model.id)).scalar() or 0

    def _outstanding(self, model, document_type: str, closed_statuses) -> int:
        """Sum of unallocated amounts over documents that are still open"""
        allocated = document_allocated(self.db, document_type)
        return self.db.query(
            func.coalesce(func.sum(model.amount - allocated), 0)
        ).filter(
            model.status.notin_(closed_statuses)
        ).scalar()

    def get_stats(self) -> Dict:
        recent = TransactionService(self.db).get_all(limit=5)

        return {
            "total_accounts": self._count(Account),
            "total_contacts": self._count(Contact),
            "total_bills": self._count(Bill),
            "total_invoices": self._count(Invoice),
            "total_payouts": self._count(Payout),
            "total_transactions": self._count(Transaction),
            "bills_payable": self._outstanding(
                Bill, DocumentType.BILL.value,
                [BillStatus.PAID.value, BillStatus.CANCELLED.value]
            ),
            "invoices_receivable": self._outstanding(
                Invoice, DocumentType.INVOICE.value,
                [InvoiceStatus.PAID.value, InvoiceStatus.RECEIVED.value, InvoiceStatus.CANCELLED.value]
            ),
            "payouts_received": PayoutService(self.db).total_received(),
            "overdue_bills": self.db.query(func.count(Bill.id)).filter(
                Bill.status == BillStatus.OVERDUE.value
            ).scalar() or 0,
            "overdue_invoices": self.db.query(func.count(Invoice.id)).filter(
                Invoice.status == InvoiceStatus.OVERDUE.value
            ).scalar() or 0,
            "recent_transactions": [
                {
                    "id": t.id,
                    "type": t.type,
                    "amount": t.amount,
                    "transaction_date": t.transaction_date,
                    "description": t.description,
                    "account_name": t.account_name,
                }
                for t in recent
            ],
        }
