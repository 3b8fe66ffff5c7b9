"""
Transfer Service - moving funds between two owned accounts
"""
from sqlalchemy.orm import Session
import logging

from ledgerbook.core.exceptions import InvalidInput
from ledgerbook.models import Transaction, TransactionType
from ledgerbook.schemas import TransactionInput

logger = logging.getLogger(__name__)


TRANSFER_REFERENCE_PREFIX = "TRF-"


class TransferService:
    """
    Writes a transfer as two correlated rows: an expense on the source
    account and an income on the destination, with equal amounts and one
    shared reference.
    """

    def __init__(self, db: Session):
        self.db = db

    def create(self, transfer_data: TransactionInput) -> Transaction:
        """Insert both legs and return the expense leg"""
        source_id = transfer_data.account_id
        destination_id = transfer_data.transfer_account_id

        if transfer_data.amount <= 0:
            raise InvalidInput("amount must be positive")
        if destination_id is None or destination_id <= 0:
            raise InvalidInput("transfer_account_id is required for transfers")
        if destination_id == source_id:
            raise InvalidInput("transfer_account_id must differ from account_id")

        # Both legs live or die together
        with self.db.begin_nested():
            expense = Transaction(
                account_id=source_id,
                type=TransactionType.EXPENSE.value,
                amount=transfer_data.amount,
                transaction_date=transfer_data.transaction_date,
                description=transfer_data.description,
                reference=transfer_data.reference,
                transfer_account_id=destination_id,
                contact_id=transfer_data.contact_id
            )
            self.db.add(expense)
            self.db.flush()

            # No caller reference: derive one from the expense leg's id, so it
            # can only be written once that id exists
            if transfer_data.reference is None:
                expense.reference = f"{TRANSFER_REFERENCE_PREFIX}{expense.id}"
                self.db.flush()

            income = Transaction(
                account_id=destination_id,
                type=TransactionType.INCOME.value,
                amount=transfer_data.amount,
                transaction_date=transfer_data.transaction_date,
                description=transfer_data.description,
                reference=expense.reference,
                transfer_account_id=source_id,
                contact_id=transfer_data.contact_id
            )
            self.db.add(income)
            self.db.flush()

        logger.info(
            f"Transfer {expense.reference}: {transfer_data.amount} from account {source_id} "
            f"to account {destination_id} (transactions {expense.id}, {income.id})"
        )
        return expense
