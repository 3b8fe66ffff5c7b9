"""
Allocation links: validation order, both capacity ceilings and status
reconciliation on link / unlink.
"""
import pytest
from sqlalchemy.exc import SQLAlchemyError

from ledgerbook.core.exceptions import InvalidInput, NotFound, CapacityExceeded
from ledgerbook.models import AllocationLink
from ledgerbook.services import LedgerService, BillService, PayoutService, TransactionService


class FailingReconciler:
    def reconcile(self, document_type, document_id):
        raise SQLAlchemyError("status update failed")


@pytest.fixture
def ledger(db):
    return LedgerService(db)


@pytest.fixture
def funded(make_account, make_transaction):
    """An expense of 10000 paise out of a bank account"""
    account = make_account()
    return make_transaction(account.id, amount=10000, type="expense")


class TestLinkValidation:
    """Checks run in a fixed order, so the first failing one is reported"""

    def test_amount_checked_first(self, ledger):
        with pytest.raises(InvalidInput, match="amount must be positive"):
            ledger.link(9999, "receipt", 0, 0)

    def test_boolean_amount_rejected(self, ledger):
        with pytest.raises(InvalidInput, match="amount must be positive"):
            ledger.link(1, "bill", 1, True)

    def test_document_type_checked_before_id(self, ledger):
        with pytest.raises(InvalidInput, match="document_type must be one of: bill, invoice, payout"):
            ledger.link(9999, "receipt", 0, 100)

    def test_document_id_required(self, ledger):
        with pytest.raises(InvalidInput, match="document_id is required"):
            ledger.link(9999, "bill", 0, 100)

    def test_missing_transaction(self, ledger, make_bill):
        bill = make_bill()
        with pytest.raises(NotFound) as exc_info:
            ledger.link(9999, "bill", bill.id, 100)
        assert exc_info.value.target == "transaction"

    def test_transaction_capacity_checked_before_document_exists(self, ledger, funded):
        with pytest.raises(CapacityExceeded) as exc_info:
            ledger.link(funded.id, "bill", 9999, 10001)
        assert exc_info.value.side == "transaction"
        assert exc_info.value.available == 10000

    def test_missing_document(self, ledger, funded):
        with pytest.raises(NotFound, match="bill not found"):
            ledger.link(funded.id, "bill", 9999, 100)


class TestCapacity:
    def test_transaction_ceiling(self, db, ledger, funded, make_bill):
        """A transaction cannot fund more than its own amount across documents"""
        first = make_bill(amount=8000, bill_number="B-1")
        second = make_bill(amount=8000, bill_number="B-2", status="overdue")

        ledger.link(funded.id, "bill", first.id, 8000)
        with pytest.raises(CapacityExceeded) as exc_info:
            ledger.link(funded.id, "bill", second.id, 2001)

        assert exc_info.value.side == "transaction"
        assert exc_info.value.available == 2000
        assert exc_info.value.requested == 2001
        assert ledger.allocated_for_transaction(funded.id) == 8000
        assert db.query(AllocationLink).count() == 1
        assert second.status == "overdue"

    def test_document_ceiling(self, db, ledger, make_account, make_transaction, make_bill):
        """A bill cannot be paid beyond its amount, even from several transactions"""
        account = make_account()
        one = make_transaction(account.id, amount=6000)
        two = make_transaction(account.id, amount=6000)
        bill = make_bill(amount=10000)

        ledger.link(one.id, "bill", bill.id, 6000)
        with pytest.raises(CapacityExceeded) as exc_info:
            ledger.link(two.id, "bill", bill.id, 4001)

        assert exc_info.value.side == "document"
        assert exc_info.value.entity == "bill"
        assert exc_info.value.available == 4000
        assert ledger.allocated_for_document("bill", bill.id) == 6000
        assert db.query(AllocationLink).count() == 1
        assert bill.status == "partial"

    def test_rejected_link_keeps_manual_status(self, db, ledger, funded, make_bill):
        """A refused over-allocation does not reconcile the document"""
        bill = make_bill(amount=5000, status="overdue")

        with pytest.raises(CapacityExceeded):
            ledger.link(funded.id, "bill", bill.id, 5001)

        assert db.query(AllocationLink).count() == 0
        assert BillService(db).get(bill.id).status == "overdue"

    def test_exact_fill_allowed(self, ledger, funded, make_bill):
        bill = make_bill(amount=10000)
        ledger.link(funded.id, "bill", bill.id, 10000)
        assert ledger.allocated_for_transaction(funded.id) == 10000

    def test_zero_amount_document_cannot_be_funded(self, ledger, funded, make_bill):
        bill = make_bill(amount=0)
        with pytest.raises(CapacityExceeded):
            ledger.link(funded.id, "bill", bill.id, 1)


class TestLinkStatus:
    def test_partial_then_paid(self, ledger, make_account, make_transaction, make_bill):
        account = make_account()
        one = make_transaction(account.id, amount=4000)
        two = make_transaction(account.id, amount=6000)
        bill = make_bill(amount=10000)

        ledger.link(one.id, "bill", bill.id, 4000)
        assert bill.status == "partial"

        ledger.link(two.id, "bill", bill.id, 6000)
        assert bill.status == "paid"

    def test_invoice_settles_as_received(self, ledger, make_account, make_transaction, make_invoice):
        account = make_account()
        txn = make_transaction(account.id, amount=5000, type="income")
        invoice = make_invoice(amount=5000)

        ledger.link(txn.id, "invoice", invoice.id, 5000)
        assert invoice.status == "received"

    def test_payout_link_tracks_unallocated(self, db, ledger, make_account, make_transaction, make_payout):
        account = make_account()
        txn = make_transaction(account.id, amount=30000, type="income")
        payout = make_payout(final_payout_amt=50000)

        ledger.link(txn.id, "payout", payout.id, 30000)

        refreshed = PayoutService(db).get(payout.id)
        assert refreshed.allocated == 30000
        assert refreshed.unallocated == 20000

    def test_failed_reconciliation_keeps_link(self, db, funded, make_bill):
        """The link is committed to the unit of work even when the status update fails"""
        bill = make_bill(amount=10000)
        ledger = LedgerService(db, reconciler=FailingReconciler())

        link = ledger.link(funded.id, "bill", bill.id, 2500)

        assert db.query(AllocationLink).filter(AllocationLink.id == link.id).count() == 1
        assert bill.status == "draft"


class TestUnlink:
    def test_unlink_restores_capacity_and_status(self, db, ledger, funded, make_bill):
        bill = make_bill(amount=10000)
        link = ledger.link(funded.id, "bill", bill.id, 10000)
        assert bill.status == "paid"

        ledger.unlink(link.id, funded.id)

        assert bill.status == "draft"
        assert ledger.allocated_for_transaction(funded.id) == 0
        assert BillService(db).get(bill.id).unallocated == 10000

    def test_unlink_through_other_transaction_is_not_found(self, ledger, make_account,
                                                           make_transaction, make_bill):
        account = make_account()
        owner = make_transaction(account.id, amount=5000)
        other = make_transaction(account.id, amount=5000)
        bill = make_bill(amount=5000)
        link = ledger.link(owner.id, "bill", bill.id, 5000)

        with pytest.raises(NotFound) as exc_info:
            ledger.unlink(link.id, other.id)

        assert exc_info.value.target == "link"
        assert ledger.allocated_for_document("bill", bill.id) == 5000

    def test_unlink_missing(self, ledger, funded):
        with pytest.raises(NotFound):
            ledger.unlink(9999, funded.id)


class TestLinkListings:
    def test_links_listed_oldest_first(self, db, ledger, funded, make_bill, make_payout):
        bill = make_bill(amount=3000)
        payout = make_payout(final_payout_amt=3000)
        first = ledger.link(funded.id, "bill", bill.id, 3000)
        second = ledger.link(funded.id, "payout", payout.id, 2000)

        links = TransactionService(db).get_links(funded.id)
        assert [link.id for link in links] == [first.id, second.id]

    def test_document_side_carries_transaction_details(self, db, ledger, make_account,
                                                       make_transaction, make_bill):
        account = make_account(name="ICICI Savings")
        txn = make_transaction(account.id, amount=2000, reference="CHQ-42")
        bill = make_bill(amount=2000)
        ledger.link(txn.id, "bill", bill.id, 2000)

        links = BillService(db).get_links(bill.id)

        assert len(links) == 1
        assert links[0]["account_name"] == "ICICI Savings"
        assert links[0]["reference"] == "CHQ-42"
        assert links[0]["description"] == ""
        assert links[0]["amount"] == 2000
