"""
Transaction Service - income, expense and transfer entries on accounts
"""
from typing import Optional, List
from datetime import date
from sqlalchemy.orm import Session, joinedload
import logging

from ledgerbook.core.exceptions import NotFound, CapacityExceeded
from ledgerbook.models import Transaction, Account, Contact, AllocationLink, TransactionType
from ledgerbook.schemas import TransactionInput
from ledgerbook.services.ledger_service import LedgerService, transaction_allocated, with_allocation
from ledgerbook.services.transfer_service import TransferService

logger = logging.getLogger(__name__)


class TransactionService:
    def __init__(self, db: Session, ledger: LedgerService = None):
        self.db = db
        self.ledger = ledger or LedgerService(db)

    def _query(self):
        return self.db.query(
            Transaction, transaction_allocated(self.db).label("allocated")
        ).options(
            joinedload(Transaction.account),
            joinedload(Transaction.transfer_account),
            joinedload(Transaction.contact)
        )

    @staticmethod
    def _attach(row) -> Transaction:
        transaction, allocated = row
        return with_allocation(transaction, transaction.amount, allocated)

    def get_all(self, transaction_type: str = None, account_id: int = None, contact_id: int = None,
                date_from: date = None, date_to: date = None, limit: int = None) -> List[Transaction]:
        query = self._query()
        if transaction_type:
            query = query.filter(Transaction.type == transaction_type)
        if account_id:
            query = query.filter(Transaction.account_id == account_id)
        if contact_id:
            query = query.filter(Transaction.contact_id == contact_id)
        if date_from:
            query = query.filter(Transaction.transaction_date >= date_from)
        if date_to:
            query = query.filter(Transaction.transaction_date <= date_to)

        query = query.order_by(Transaction.created_at.desc(), Transaction.id.desc())
        if limit:
            query = query.limit(limit)
        return [self._attach(row) for row in query.all()]

    def get_by_id(self, transaction_id: int) -> Optional[Transaction]:
        row = self._query().filter(Transaction.id == transaction_id).first()
        return self._attach(row) if row else None

    def get(self, transaction_id: int) -> Transaction:
        transaction = self.get_by_id(transaction_id)
        if not transaction:
            raise NotFound("transaction")
        return transaction

    def _check_references(self, transaction_data: TransactionInput) -> None:
        if not self.db.query(Account.id).filter(Account.id == transaction_data.account_id).first():
            raise NotFound("account")
        if transaction_data.transfer_account_id and not self.db.query(Account.id).filter(
            Account.id == transaction_data.transfer_account_id
        ).first():
            raise NotFound("account", "transfer account not found")
        if transaction_data.contact_id and not self.db.query(Contact.id).filter(
            Contact.id == transaction_data.contact_id
        ).first():
            raise NotFound("contact")

    def create(self, transaction_data: TransactionInput) -> Transaction:
        self._check_references(transaction_data)

        if transaction_data.type == TransactionType.TRANSFER.value:
            expense = TransferService(self.db).create(transaction_data)
            return self.get(expense.id)

        transaction = Transaction(**transaction_data.model_dump())
        self.db.add(transaction)
        self.db.flush()
        return self.get(transaction.id)

    def update(self, transaction_id: int, transaction_data: TransactionInput) -> Transaction:
        """Full replace of one row; a transfer's other leg is left as it is"""
        transaction = self.db.query(Transaction).filter(
            Transaction.id == transaction_id
        ).with_for_update().first()
        if not transaction:
            raise NotFound("transaction")
        self._check_references(transaction_data)

        allocated = self.ledger.allocated_for_transaction(transaction_id)
        if transaction_data.amount < allocated:
            raise CapacityExceeded(
                "transaction", "transaction", allocated, transaction_data.amount,
                message=f"transaction amount {transaction_data.amount} is below "
                        f"the {allocated} paise already allocated"
            )

        for key, value in transaction_data.model_dump().items():
            setattr(transaction, key, value)
        self.db.flush()
        self.db.expire(transaction)
        return self.get(transaction_id)

    def delete(self, transaction_id: int) -> None:
        """Delete one row, release its links and re-derive the statuses they held up"""
        affected = self.ledger.release_transaction(transaction_id)

        deleted = self.db.query(Transaction).filter(Transaction.id == transaction_id).delete(
            synchronize_session="fetch"
        )
        if deleted == 0:
            raise NotFound("transaction")

        for document_type, document_id in affected:
            self.ledger.reconciler.reconcile(document_type, document_id)
        if affected:
            logger.info(f"Transaction {transaction_id} deleted, reconciled {len(affected)} document(s)")

    def get_links(self, transaction_id: int) -> List[AllocationLink]:
        return self.ledger.list_links(transaction_id)

    def link(self, transaction_id: int, document_type: str, document_id: int, amount: int) -> AllocationLink:
        return self.ledger.link(transaction_id, document_type, document_id, amount)

    def unlink(self, transaction_id: int, link_id: int) -> None:
        self.ledger.unlink(link_id, transaction_id)
