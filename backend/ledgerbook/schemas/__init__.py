"""
Pydantic Schemas for API Validation
"""
from pydantic import BaseModel, ConfigDict, model_validator
from typing import List, Optional
from datetime import datetime, date

from ledgerbook.core.money import Money
from ledgerbook.models import (
    AccountType, ContactType, BillStatus, InvoiceStatus, Platform, TransactionType
)


def _one_of(enum_cls) -> str:
    return ", ".join(member.value for member in enum_cls)


# ==================== ACCOUNT SCHEMAS ====================

class AccountInput(BaseModel):
    name: str = ""
    type: str = ""
    opening_balance: Money = 0

    @model_validator(mode="after")
    def validate_account(self):
        if self.name == "":
            raise ValueError("name is required")
        if self.type not in {t.value for t in AccountType}:
            raise ValueError(f"type must be one of: {_one_of(AccountType)}")
        return self


class AccountResponse(BaseModel):
    id: int
    name: str
    type: str
    opening_balance: int
    balance: int
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


# ==================== CONTACT SCHEMAS ====================

class ContactInput(BaseModel):
    name: str = ""
    type: str = ""
    email: Optional[str] = None
    phone: Optional[str] = None

    @model_validator(mode="after")
    def validate_contact(self):
        if self.name == "":
            raise ValueError("name is required")
        if self.type not in {t.value for t in ContactType}:
            raise ValueError(f"type must be one of: {_one_of(ContactType)}")
        return self


class ContactResponse(BaseModel):
    id: int
    name: str
    type: str
    email: Optional[str] = None
    phone: Optional[str] = None
    total_amount: int
    allocated_amount: int
    balance: int
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


# ==================== BILL / INVOICE SCHEMAS ====================

class BillInput(BaseModel):
    contact_id: Optional[int] = None
    bill_number: Optional[str] = None
    issue_date: Optional[date] = None
    due_date: Optional[date] = None
    amount: Money = 0
    status: str = ""
    file_url: Optional[str] = None
    notes: Optional[str] = None

    @model_validator(mode="after")
    def validate_bill(self):
        if self.amount < 0:
            raise ValueError("amount must be non-negative")
        if self.status not in {"", *(s.value for s in BillStatus)}:
            raise ValueError(f"status must be one of: {_one_of(BillStatus)}")
        if self.status == "":
            self.status = BillStatus.DRAFT.value
        return self


class BillResponse(BaseModel):
    id: int
    contact_id: Optional[int] = None
    bill_number: Optional[str] = None
    issue_date: Optional[date] = None
    due_date: Optional[date] = None
    amount: int
    status: str
    file_url: Optional[str] = None
    notes: Optional[str] = None
    created_at: datetime
    updated_at: datetime
    contact_name: Optional[str] = None
    allocated: int
    unallocated: int

    model_config = ConfigDict(from_attributes=True)


class InvoiceInput(BaseModel):
    contact_id: Optional[int] = None
    invoice_number: Optional[str] = None
    issue_date: Optional[date] = None
    due_date: Optional[date] = None
    amount: Money = 0
    status: str = ""
    file_url: Optional[str] = None
    notes: Optional[str] = None

    @model_validator(mode="after")
    def validate_invoice(self):
        if self.amount < 0:
            raise ValueError("amount must be non-negative")
        if self.status not in {"", *(s.value for s in InvoiceStatus)}:
            raise ValueError(f"status must be one of: {_one_of(InvoiceStatus)}")
        if self.status == "":
            self.status = InvoiceStatus.DRAFT.value
        return self


class InvoiceResponse(BaseModel):
    id: int
    contact_id: Optional[int] = None
    invoice_number: Optional[str] = None
    issue_date: Optional[date] = None
    due_date: Optional[date] = None
    amount: int
    status: str
    file_url: Optional[str] = None
    notes: Optional[str] = None
    created_at: datetime
    updated_at: datetime
    contact_name: Optional[str] = None
    allocated: int
    unallocated: int

    model_config = ConfigDict(from_attributes=True)


# ==================== PAYOUT SCHEMAS ====================

class PayoutInput(BaseModel):
    outlet_name: str = ""
    platform: str = ""
    period_start: Optional[date] = None
    period_end: Optional[date] = None
    settlement_date: Optional[date] = None
    total_orders: int = 0
    gross_sales_amt: Money = 0
    restaurant_discount_amt: Money = 0
    platform_commission_amt: Money = 0
    taxes_tcs_tds_amt: Money = 0
    marketing_ads_amt: Money = 0
    final_payout_amt: Money = 0
    utr_number: Optional[str] = None

    @model_validator(mode="after")
    def validate_payout(self):
        if self.outlet_name == "":
            raise ValueError("outlet_name is required")
        platform = self.platform.lower()
        if platform not in {p.value for p in Platform}:
            raise ValueError("platform must be swiggy or zomato")
        self.platform = platform
        return self


class PayoutResponse(BaseModel):
    id: int
    outlet_name: str
    platform: str
    period_start: Optional[date] = None
    period_end: Optional[date] = None
    settlement_date: Optional[date] = None
    total_orders: int
    gross_sales_amt: int
    restaurant_discount_amt: int
    platform_commission_amt: int
    taxes_tcs_tds_amt: int
    marketing_ads_amt: int
    final_payout_amt: int
    utr_number: Optional[str] = None
    created_at: datetime
    allocated: int
    unallocated: int

    model_config = ConfigDict(from_attributes=True)


# ==================== TRANSACTION SCHEMAS ====================

class TransactionInput(BaseModel):
    account_id: int = 0
    type: str = ""
    amount: Money = 0
    transaction_date: Optional[date] = None
    description: Optional[str] = None
    reference: Optional[str] = None
    transfer_account_id: Optional[int] = None
    contact_id: Optional[int] = None

    @model_validator(mode="after")
    def validate_transaction(self):
        if self.account_id <= 0:
            raise ValueError("account_id is required")
        if self.amount <= 0:
            raise ValueError("amount must be positive")
        if self.type not in {t.value for t in TransactionType}:
            raise ValueError(f"type must be one of: {_one_of(TransactionType)}")
        if self.type == TransactionType.TRANSFER.value:
            if self.transfer_account_id is None or self.transfer_account_id <= 0:
                raise ValueError("transfer_account_id is required for transfers")
            if self.transfer_account_id == self.account_id:
                raise ValueError("transfer_account_id must differ from account_id")
        return self


class TransactionResponse(BaseModel):
    id: int
    account_id: int
    type: str
    amount: int
    transaction_date: Optional[date] = None
    description: Optional[str] = None
    reference: Optional[str] = None
    transfer_account_id: Optional[int] = None
    contact_id: Optional[int] = None
    created_at: datetime
    updated_at: datetime
    account_name: Optional[str] = None
    transfer_account_name: Optional[str] = None
    contact_name: Optional[str] = None
    allocated: int
    unallocated: int

    model_config = ConfigDict(from_attributes=True)


# ==================== ALLOCATION LINK SCHEMAS ====================

class AllocationLinkInput(BaseModel):
    """Shape only; the ledger checks the values in its own order."""
    document_type: str = ""
    document_id: int = 0
    amount: Money = 0


class AllocationLinkResponse(BaseModel):
    id: int
    transaction_id: int
    document_type: str
    document_id: int
    amount: int
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class DocumentLinkResponse(AllocationLinkResponse):
    """A link seen from the document side, with the paying transaction's details"""
    transaction_date: Optional[date] = None
    description: str = ""
    reference: str = ""
    account_name: Optional[str] = None


# ==================== DASHBOARD SCHEMAS ====================

class RecentTransaction(BaseModel):
    id: int
    type: str
    amount: int
    transaction_date: Optional[date] = None
    description: Optional[str] = None
    account_name: Optional[str] = None


class DashboardResponse(BaseModel):
    total_accounts: int
    total_contacts: int
    total_bills: int
    total_invoices: int
    total_payouts: int
    total_transactions: int
    bills_payable: int
    invoices_receivable: int
    payouts_received: int
    overdue_bills: int
    overdue_invoices: int
    recent_transactions: List[RecentTransaction] = []


class MessageResponse(BaseModel):
    message: str
