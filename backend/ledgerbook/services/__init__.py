# Services Package
from ledgerbook.services.reconciliation_service import StatusReconciler, derive_status
from ledgerbook.services.ledger_service import LedgerService
from ledgerbook.services.account_service import AccountService
from ledgerbook.services.contact_service import ContactService
from ledgerbook.services.document_service import BillService, InvoiceService
from ledgerbook.services.payout_service import PayoutService
from ledgerbook.services.transfer_service import TransferService
from ledgerbook.services.transaction_service import TransactionService
from ledgerbook.services.dashboard_service import DashboardService

__all__ = [
    'StatusReconciler',
    'derive_status',
    'LedgerService',
    'AccountService',
    'ContactService',
    'BillService',
    'InvoiceService',
    'PayoutService',
    'TransferService',
    'TransactionService',
    'DashboardService',
]
