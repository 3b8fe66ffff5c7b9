"""
Input validation: money stays integral and the messages clients see
stay stable.
"""
import pytest
from pydantic import ValidationError

from ledgerbook.core.money import MONEY_MAX, MONEY_MIN, is_positive_amount
from ledgerbook.schemas import (
    AccountInput, ContactInput, BillInput, InvoiceInput, PayoutInput,
    TransactionInput, AllocationLinkInput
)


class TestMoney:
    """Amounts are integer paise, never floats"""

    def test_float_amount_rejected(self):
        """A fractional amount is refused outright"""
        with pytest.raises(ValidationError):
            BillInput(amount=100.5)

    def test_integral_float_rejected(self):
        """Even 100.0 is refused; the type itself is wrong"""
        with pytest.raises(ValidationError):
            AccountInput(name="Cash", type="cash", opening_balance=100.0)

    def test_numeric_string_rejected(self):
        with pytest.raises(ValidationError):
            AllocationLinkInput(document_type="bill", document_id=1, amount="500")

    def test_amount_beyond_64_bits_rejected(self):
        """Amounts must fit the BigInteger columns"""
        with pytest.raises(ValidationError):
            TransactionInput(account_id=1, type="income", amount=2 ** 70)
        with pytest.raises(ValidationError):
            AccountInput(name="Cash", type="cash", opening_balance=MONEY_MIN - 1)

    def test_64_bit_limits_accepted(self):
        assert BillInput(amount=MONEY_MAX).amount == MONEY_MAX
        assert AccountInput(name="Cash", type="cash", opening_balance=MONEY_MIN).opening_balance == MONEY_MIN

    def test_is_positive_amount(self):
        assert is_positive_amount(1)
        assert not is_positive_amount(0)
        assert not is_positive_amount(-5)
        assert not is_positive_amount(True)
        assert not is_positive_amount(2.5)


class TestAccountInput:
    def test_name_required(self):
        with pytest.raises(ValidationError, match="name is required"):
            AccountInput(type="bank")

    def test_type_must_be_known(self):
        with pytest.raises(ValidationError, match="type must be one of: bank, cash, credit_card"):
            AccountInput(name="Wallet", type="wallet")

    def test_opening_balance_defaults_to_zero(self):
        assert AccountInput(name="Petty Cash", type="cash").opening_balance == 0


class TestContactInput:
    def test_type_must_be_vendor_or_customer(self):
        with pytest.raises(ValidationError, match="type must be one of: vendor, customer"):
            ContactInput(name="Acme", type="supplier")


class TestDocumentInputs:
    def test_bill_status_defaults_to_draft(self):
        assert BillInput(amount=500).status == "draft"

    def test_bill_negative_amount_rejected(self):
        with pytest.raises(ValidationError, match="amount must be non-negative"):
            BillInput(amount=-1)

    def test_bill_unknown_status_rejected(self):
        with pytest.raises(ValidationError, match="status must be one of"):
            BillInput(amount=100, status="sent")

    def test_invoice_accepts_sent_and_received(self):
        assert InvoiceInput(amount=100, status="sent").status == "sent"
        assert InvoiceInput(amount=100, status="received").status == "received"


class TestPayoutInput:
    def test_platform_is_lowercased(self):
        payout = PayoutInput(outlet_name="Indiranagar", platform="Zomato")
        assert payout.platform == "zomato"

    def test_unknown_platform_rejected(self):
        with pytest.raises(ValidationError, match="platform must be swiggy or zomato"):
            PayoutInput(outlet_name="Indiranagar", platform="ubereats")

    def test_outlet_name_required(self):
        with pytest.raises(ValidationError, match="outlet_name is required"):
            PayoutInput(platform="swiggy")


class TestTransactionInput:
    def test_account_checked_before_amount(self):
        with pytest.raises(ValidationError, match="account_id is required"):
            TransactionInput(type="income", amount=0)

    def test_amount_must_be_positive(self):
        with pytest.raises(ValidationError, match="amount must be positive"):
            TransactionInput(account_id=1, type="income", amount=0)

    def test_transfer_needs_destination(self):
        with pytest.raises(ValidationError, match="transfer_account_id is required for transfers"):
            TransactionInput(account_id=1, type="transfer", amount=100)

    def test_transfer_to_same_account_rejected(self):
        with pytest.raises(ValidationError, match="transfer_account_id must differ from account_id"):
            TransactionInput(account_id=1, type="transfer", amount=100, transfer_account_id=1)
