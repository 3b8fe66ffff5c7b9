"""
Account Service - Bank, Cash and Credit Card Accounts
"""
from typing import Optional, List
from sqlalchemy.orm import Session
from sqlalchemy.exc import IntegrityError
from sqlalchemy import func
import logging

from ledgerbook.core.exceptions import NotFound, StoreFailure
from ledgerbook.models import Account, Transaction, TransactionType
from ledgerbook.schemas import AccountInput

logger = logging.getLogger(__name__)


class AccountService:
    def __init__(self, db: Session):
        self.db = db

    def _balance(self):
        """opening_balance + income - expense, computed per row at read time"""
        income = self.db.query(
            func.coalesce(func.sum(Transaction.amount), 0)
        ).filter(
            Transaction.account_id == Account.id,
            Transaction.type == TransactionType.INCOME.value
        ).correlate(Account).scalar_subquery()

        expense = self.db.query(
            func.coalesce(func.sum(Transaction.amount), 0)
        ).filter(
            Transaction.account_id == Account.id,
            Transaction.type == TransactionType.EXPENSE.value
        ).correlate(Account).scalar_subquery()

        return (Account.opening_balance + income - expense).label("balance")

    def _query(self):
        return self.db.query(Account, self._balance())

    @staticmethod
    def _attach(row) -> Account:
        account, balance = row
        account.balance = balance
        return account

    def get_all(self, search: str = None) -> List[Account]:
        query = self._query()
        if search:
            query = query.filter(Account.name.like(f"%{search}%"))
        return [self._attach(row) for row in query.order_by(Account.name, Account.id).all()]

    def get_by_id(self, account_id: int) -> Optional[Account]:
        row = self._query().filter(Account.id == account_id).first()
        return self._attach(row) if row else None

    def get(self, account_id: int) -> Account:
        account = self.get_by_id(account_id)
        if not account:
            raise NotFound("account")
        return account

    def create(self, account_data: AccountInput) -> Account:
        account = Account(
            name=account_data.name,
            type=account_data.type,
            opening_balance=account_data.opening_balance
        )
        self.db.add(account)
        self.db.flush()
        return self.get(account.id)

    def update(self, account_id: int, account_data: AccountInput) -> Account:
        account = self.db.query(Account).filter(Account.id == account_id).first()
        if not account:
            raise NotFound("account")

        for key, value in account_data.model_dump().items():
            setattr(account, key, value)
        self.db.flush()
        return self.get(account_id)

    def delete(self, account_id: int) -> None:
        try:
            deleted = self.db.query(Account).filter(Account.id == account_id).delete(
                synchronize_session="fetch"
            )
        except IntegrityError as e:
            logger.error(f"Account {account_id} could not be deleted: {e}")
            raise StoreFailure("account is referenced by transactions and cannot be deleted") from e
        if deleted == 0:
            raise NotFound("account")
