"""
Allocation Ledger - links between bank transactions and bills, invoices, payouts
"""
from typing import List, Dict, Tuple
from sqlalchemy.orm import Session
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy import func
import logging

from ledgerbook.core.exceptions import InvalidInput, NotFound, CapacityExceeded
from ledgerbook.core.money import is_positive_amount
from ledgerbook.models import (
    AllocationLink, Transaction, Account, DocumentType, DOCUMENT_MODELS
)
from ledgerbook.services.reconciliation_service import StatusReconciler

logger = logging.getLogger(__name__)


DOCUMENT_TYPES = tuple(t.value for t in DocumentType)


def transaction_allocated(db: Session):
    """Correlated SUM of link amounts for the enclosing Transaction row"""
    return db.query(
        func.coalesce(func.sum(AllocationLink.amount), 0)
    ).filter(
        AllocationLink.transaction_id == Transaction.id
    ).correlate(Transaction).scalar_subquery()


def document_allocated(db: Session, document_type: str):
    """Correlated SUM of link amounts for the enclosing bill/invoice/payout row"""
    model, _ = DOCUMENT_MODELS[document_type]
    return db.query(
        func.coalesce(func.sum(AllocationLink.amount), 0)
    ).filter(
        AllocationLink.document_type == document_type,
        AllocationLink.document_id == model.id
    ).correlate(model).scalar_subquery()


def with_allocation(entity, total: int, allocated: int):
    """Attach the read-time allocation figures the response schemas expect"""
    entity.allocated = allocated
    entity.unallocated = total - allocated
    return entity


class LedgerService:
    """
    Owns the AllocationLink set.

    Both capacity ceilings (the transaction's funds and the document's
    dues) are checked at write time while the two rows are locked, inside
    the caller's unit of work. The caller commits.
    """

    def __init__(self, db: Session, reconciler: StatusReconciler = None):
        self.db = db
        self.reconciler = reconciler or StatusReconciler(db)

    # ==================== READS ====================

    def allocated_for_transaction(self, transaction_id: int) -> int:
        return self.db.query(
            func.coalesce(func.sum(AllocationLink.amount), 0)
        ).filter(
            AllocationLink.transaction_id == transaction_id
        ).scalar()

    def allocated_for_document(self, document_type: str, document_id: int) -> int:
        return self.db.query(
            func.coalesce(func.sum(AllocationLink.amount), 0)
        ).filter(
            AllocationLink.document_type == document_type,
            AllocationLink.document_id == document_id
        ).scalar()

    def list_links(self, transaction_id: int) -> List[AllocationLink]:
        return self.db.query(AllocationLink).filter(
            AllocationLink.transaction_id == transaction_id
        ).order_by(AllocationLink.created_at, AllocationLink.id).all()

    def links_for_document(self, document_type: str, document_id: int) -> List[Dict]:
        """Links funding one document, with the paying transaction's display fields"""
        rows = self.db.query(
            AllocationLink, Transaction.transaction_date, Transaction.description,
            Transaction.reference, Account.name
        ).join(
            Transaction, AllocationLink.transaction_id == Transaction.id
        ).join(
            Account, Transaction.account_id == Account.id
        ).filter(
            AllocationLink.document_type == document_type,
            AllocationLink.document_id == document_id
        ).order_by(AllocationLink.created_at, AllocationLink.id).all()

        return [
            {
                "id": link.id,
                "transaction_id": link.transaction_id,
                "document_type": link.document_type,
                "document_id": link.document_id,
                "amount": link.amount,
                "created_at": link.created_at,
                "transaction_date": transaction_date,
                "description": description or "",
                "reference": reference or "",
                "account_name": account_name,
            }
            for link, transaction_date, description, reference, account_name in rows
        ]

    # ==================== WRITES ====================

    def link(self, transaction_id: int, document_type: str, document_id: int, amount: int) -> AllocationLink:
        """Apply ``amount`` of a transaction to a document"""
        if not is_positive_amount(amount):
            raise InvalidInput("amount must be positive")
        if document_type not in DOCUMENT_TYPES:
            raise InvalidInput(f"document_type must be one of: {', '.join(DOCUMENT_TYPES)}")
        if not isinstance(document_id, int) or document_id <= 0:
            raise InvalidInput("document_id is required")

        transaction = self.db.query(Transaction).filter(
            Transaction.id == transaction_id
        ).with_for_update().first()
        if not transaction:
            raise NotFound("transaction")

        txn_unallocated = transaction.amount - self.allocated_for_transaction(transaction_id)
        if amount > txn_unallocated:
            raise CapacityExceeded("transaction", "transaction", txn_unallocated, amount)

        model, amount_column = DOCUMENT_MODELS[document_type]
        document = self.db.query(model).filter(
            model.id == document_id
        ).with_for_update().first()
        if not document:
            raise NotFound("document", f"{document_type} not found")

        doc_total = getattr(document, amount_column.key)
        doc_unallocated = doc_total - self.allocated_for_document(document_type, document_id)
        if amount > doc_unallocated:
            raise CapacityExceeded("document", document_type, doc_unallocated, amount)

        link = AllocationLink(
            transaction_id=transaction_id,
            document_type=document_type,
            document_id=document_id,
            amount=amount
        )
        self.db.add(link)
        self.db.flush()
        logger.info(
            f"Linked {amount} from transaction {transaction_id} to {document_type} {document_id} (link {link.id})"
        )

        self._reconcile_best_effort(document_type, document_id)
        return link

    def unlink(self, link_id: int, transaction_id: int) -> None:
        """Remove a link; only the transaction that owns it may remove it"""
        target = self.db.query(
            AllocationLink.document_type, AllocationLink.document_id
        ).filter(
            AllocationLink.id == link_id,
            AllocationLink.transaction_id == transaction_id
        ).first()

        deleted = self.db.query(AllocationLink).filter(
            AllocationLink.id == link_id,
            AllocationLink.transaction_id == transaction_id
        ).delete(synchronize_session="fetch")
        if deleted == 0:
            raise NotFound("link")

        logger.info(f"Unlinked link {link_id} from transaction {transaction_id}")
        if target:
            self._reconcile_best_effort(target.document_type, target.document_id)

    def release_transaction(self, transaction_id: int) -> List[Tuple[str, int]]:
        """Drop every link of a transaction; returns the documents they pointed at"""
        targets = self.db.query(
            AllocationLink.document_type, AllocationLink.document_id
        ).filter(
            AllocationLink.transaction_id == transaction_id
        ).distinct().all()

        self.db.query(AllocationLink).filter(
            AllocationLink.transaction_id == transaction_id
        ).delete(synchronize_session="fetch")
        return [(t.document_type, t.document_id) for t in targets]

    def release_document(self, document_type: str, document_id: int) -> int:
        """Drop every link pointing at a document; returns how many went"""
        return self.db.query(AllocationLink).filter(
            AllocationLink.document_type == document_type,
            AllocationLink.document_id == document_id
        ).delete(synchronize_session="fetch")

    def _reconcile_best_effort(self, document_type: str, document_id: int) -> None:
        # The link is the source of truth; a failed status projection
        # is logged and rolled back on its own savepoint.
        try:
            with self.db.begin_nested():
                self.reconciler.reconcile(document_type, document_id)
        except SQLAlchemyError:
            logger.error(
                f"Status reconciliation failed for {document_type} {document_id}",
                exc_info=True
            )
