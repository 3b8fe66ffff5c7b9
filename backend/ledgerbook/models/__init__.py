"""
SQLAlchemy Models for the accounting backend
"""
from datetime import datetime
from sqlalchemy import (
    Column, Integer, BigInteger, String, Text, DateTime, Date,
    ForeignKey, Index, CheckConstraint
)
from sqlalchemy.orm import relationship
import enum

from ledgerbook.core.database import Base


# ==================== ENUMS ====================

class AccountType(enum.Enum):
    BANK = "bank"
    CASH = "cash"
    CREDIT_CARD = "credit_card"


class ContactType(enum.Enum):
    VENDOR = "vendor"
    CUSTOMER = "customer"


class BillStatus(enum.Enum):
    DRAFT = "draft"
    PARTIAL = "partial"
    RECEIVED = "received"
    PAID = "paid"
    OVERDUE = "overdue"
    CANCELLED = "cancelled"


class InvoiceStatus(enum.Enum):
    DRAFT = "draft"
    PARTIAL = "partial"
    SENT = "sent"
    PAID = "paid"
    RECEIVED = "received"
    OVERDUE = "overdue"
    CANCELLED = "cancelled"


class Platform(enum.Enum):
    SWIGGY = "swiggy"
    ZOMATO = "zomato"


class TransactionType(enum.Enum):
    INCOME = "income"
    EXPENSE = "expense"
    TRANSFER = "transfer"


class DocumentType(enum.Enum):
    BILL = "bill"
    INVOICE = "invoice"
    PAYOUT = "payout"


def _values(enum_cls) -> str:
    return ", ".join(f"'{member.value}'" for member in enum_cls)


# ==================== ACCOUNTS & CONTACTS ====================

class Account(Base):
    """Bank account, cash box or credit card"""
    __tablename__ = 'accounts'

    id = Column(Integer, primary_key=True)
    name = Column(String(255), nullable=False)
    type = Column(String(20), nullable=False)
    opening_balance = Column(BigInteger, nullable=False, default=0)
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)
    updated_at = Column(DateTime, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow)

    __table_args__ = (
        CheckConstraint(f"type IN ({_values(AccountType)})", name='ck_accounts_type'),
    )


class Contact(Base):
    """Vendor or customer"""
    __tablename__ = 'contacts'

    id = Column(Integer, primary_key=True)
    name = Column(String(255), nullable=False)
    type = Column(String(20), nullable=False)
    email = Column(String(255), nullable=True)
    phone = Column(String(50), nullable=True)
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)
    updated_at = Column(DateTime, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow)

    __table_args__ = (
        CheckConstraint(f"type IN ({_values(ContactType)})", name='ck_contacts_type'),
    )


# ==================== DOCUMENTS ====================

class Bill(Base):
    """Payable bill from a vendor"""
    __tablename__ = 'bills'

    id = Column(Integer, primary_key=True)
    contact_id = Column(Integer, ForeignKey('contacts.id', ondelete='SET NULL'), nullable=True)
    bill_number = Column(String(100), nullable=True)
    issue_date = Column(Date, nullable=True)
    due_date = Column(Date, nullable=True)
    amount = Column(BigInteger, nullable=False, default=0)
    status = Column(String(20), nullable=False, default=BillStatus.DRAFT.value)
    file_url = Column(String(500), nullable=True)
    notes = Column(Text, nullable=True)
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)
    updated_at = Column(DateTime, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Relationships
    contact = relationship("Contact")

    __table_args__ = (
        CheckConstraint(f"status IN ({_values(BillStatus)})", name='ck_bills_status'),
        Index('idx_bills_contact', 'contact_id'),
        Index('idx_bills_status', 'status'),
    )

    @property
    def contact_name(self):
        return self.contact.name if self.contact else None


class Invoice(Base):
    """Receivable invoice to a customer"""
    __tablename__ = 'invoices'

    id = Column(Integer, primary_key=True)
    contact_id = Column(Integer, ForeignKey('contacts.id', ondelete='SET NULL'), nullable=True)
    invoice_number = Column(String(100), nullable=True)
    issue_date = Column(Date, nullable=True)
    due_date = Column(Date, nullable=True)
    amount = Column(BigInteger, nullable=False, default=0)
    status = Column(String(20), nullable=False, default=InvoiceStatus.DRAFT.value)
    file_url = Column(String(500), nullable=True)
    notes = Column(Text, nullable=True)
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)
    updated_at = Column(DateTime, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Relationships
    contact = relationship("Contact")

    __table_args__ = (
        CheckConstraint(f"status IN ({_values(InvoiceStatus)})", name='ck_invoices_status'),
        Index('idx_invoices_contact', 'contact_id'),
        Index('idx_invoices_status', 'status'),
    )

    @property
    def contact_name(self):
        return self.contact.name if self.contact else None


class Payout(Base):
    """Delivery platform settlement (Swiggy / Zomato)"""
    __tablename__ = 'payouts'

    id = Column(Integer, primary_key=True)
    outlet_name = Column(String(255), nullable=False)
    platform = Column(String(20), nullable=False)
    period_start = Column(Date, nullable=True)
    period_end = Column(Date, nullable=True)
    settlement_date = Column(Date, nullable=True)
    total_orders = Column(Integer, nullable=False, default=0)
    gross_sales_amt = Column(BigInteger, nullable=False, default=0)
    restaurant_discount_amt = Column(BigInteger, nullable=False, default=0)
    platform_commission_amt = Column(BigInteger, nullable=False, default=0)
    taxes_tcs_tds_amt = Column(BigInteger, nullable=False, default=0)
    marketing_ads_amt = Column(BigInteger, nullable=False, default=0)
    final_payout_amt = Column(BigInteger, nullable=False, default=0)  # Allocatable amount
    utr_number = Column(String(100), nullable=True)
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)

    __table_args__ = (
        CheckConstraint(f"platform IN ({_values(Platform)})", name='ck_payouts_platform'),
        Index('idx_payouts_platform', 'platform'),
        Index('idx_payouts_outlet', 'outlet_name'),
    )


# ==================== BANK TRANSACTIONS ====================

class Transaction(Base):
    """Money in or out of an account. A transfer is stored as an expense/income pair."""
    __tablename__ = 'transactions'

    id = Column(Integer, primary_key=True)
    account_id = Column(Integer, ForeignKey('accounts.id', ondelete='RESTRICT'), nullable=False)
    type = Column(String(20), nullable=False)
    amount = Column(BigInteger, nullable=False, default=0)
    transaction_date = Column(Date, nullable=True)
    description = Column(Text, nullable=True)
    reference = Column(String(100), nullable=True)
    transfer_account_id = Column(Integer, ForeignKey('accounts.id', ondelete='RESTRICT'), nullable=True)
    contact_id = Column(Integer, ForeignKey('contacts.id', ondelete='SET NULL'), nullable=True)
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)
    updated_at = Column(DateTime, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Relationships
    account = relationship("Account", foreign_keys=[account_id])
    transfer_account = relationship("Account", foreign_keys=[transfer_account_id])
    contact = relationship("Contact")

    __table_args__ = (
        CheckConstraint(f"type IN ({_values(TransactionType)})", name='ck_transactions_type'),
        Index('idx_transactions_account', 'account_id'),
        Index('idx_transactions_type', 'type'),
    )

    @property
    def account_name(self):
        return self.account.name if self.account else None

    @property
    def transfer_account_name(self):
        return self.transfer_account.name if self.transfer_account else None

    @property
    def contact_name(self):
        return self.contact.name if self.contact else None


class AllocationLink(Base):
    """Part of a transaction's amount applied to one bill, invoice or payout"""
    __tablename__ = 'allocation_links'

    id = Column(Integer, primary_key=True)
    transaction_id = Column(Integer, ForeignKey('transactions.id', ondelete='CASCADE'), nullable=False)
    document_type = Column(String(20), nullable=False)
    document_id = Column(Integer, nullable=False)
    amount = Column(BigInteger, nullable=False)
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)

    __table_args__ = (
        CheckConstraint(f"document_type IN ({_values(DocumentType)})", name='ck_allocation_links_document_type'),
        CheckConstraint("amount > 0", name='ck_allocation_links_amount_positive'),
        Index('idx_allocation_links_txn', 'transaction_id'),
        Index('idx_allocation_links_doc', 'document_type', 'document_id'),
    )


# Document type -> (model, column holding the allocatable amount)
DOCUMENT_MODELS = {
    DocumentType.BILL.value: (Bill, Bill.amount),
    DocumentType.INVOICE.value: (Invoice, Invoice.amount),
    DocumentType.PAYOUT.value: (Payout, Payout.final_payout_amt),
}
