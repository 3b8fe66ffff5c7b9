"""
Status Reconciliation - document status as a function of its allocations
"""
from typing import Optional
from sqlalchemy.orm import Session
from sqlalchemy import func
import logging

from ledgerbook.models import AllocationLink, Bill, Invoice, BillStatus, InvoiceStatus, DocumentType

logger = logging.getLogger(__name__)


# Payouts carry no status and are deliberately absent
SETTLED_STATUS = {
    DocumentType.BILL.value: BillStatus.PAID.value,
    DocumentType.INVOICE.value: InvoiceStatus.RECEIVED.value,
}

STATUS_MODELS = {
    DocumentType.BILL.value: Bill,
    DocumentType.INVOICE.value: Invoice,
}


def derive_status(document_amount: int, allocated: int, settled_status: str) -> str:
    if document_amount <= 0:
        return "draft"
    if allocated <= 0:
        return "draft"
    if allocated < document_amount:
        return "partial"
    return settled_status


class StatusReconciler:
    """
    Rewrites a bill's or invoice's status from its allocation total.

    The derived status replaces whatever was there, including a status a
    user set by hand (sent, overdue, cancelled). That matches the
    behaviour clients already depend on; changing it needs a product
    decision.
    """

    def __init__(self, db: Session):
        self.db = db

    def reconcile(self, document_type: str, document_id: int) -> Optional[str]:
        """Persist and return the new status, or None when there is nothing to reconcile"""
        model = STATUS_MODELS.get(document_type)
        if model is None:
            return None

        document = self.db.query(model).filter(model.id == document_id).first()
        if not document:
            return None

        allocated = self.db.query(
            func.coalesce(func.sum(AllocationLink.amount), 0)
        ).filter(
            AllocationLink.document_type == document_type,
            AllocationLink.document_id == document_id
        ).scalar()

        new_status = derive_status(document.amount, allocated, SETTLED_STATUS[document_type])
        if document.status != new_status:
            logger.debug(f"{document_type} {document_id}: status {document.status} -> {new_status}")
            document.status = new_status
        self.db.flush()
        return new_status
