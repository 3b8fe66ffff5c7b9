"""
Documents Service - Payable Bills and Receivable Invoices
"""
from typing import List, Dict
from datetime import date
from sqlalchemy.orm import Session, contains_eager
from sqlalchemy import or_

from ledgerbook.core.exceptions import NotFound, CapacityExceeded
from ledgerbook.models import Bill, Invoice, Contact, DocumentType
from ledgerbook.services.ledger_service import LedgerService, document_allocated, with_allocation


class _DocumentService:
    """Shared CRUD for the two status-carrying document tables"""

    model = None
    document_type = None
    number_field = None

    def __init__(self, db: Session, ledger: LedgerService = None):
        self.db = db
        self.ledger = ledger or LedgerService(db)

    def _query(self):
        model = self.model
        return self.db.query(
            model, document_allocated(self.db, self.document_type).label("allocated")
        ).outerjoin(model.contact).options(contains_eager(model.contact))

    @staticmethod
    def _attach(row):
        document, allocated = row
        return with_allocation(document, document.amount, allocated)

    def get_all(self, status: str = None, contact_id: int = None, date_from: date = None,
                date_to: date = None, search: str = None) -> List:
        model = self.model
        query = self._query()

        if status:
            query = query.filter(model.status == status)
        if contact_id:
            query = query.filter(model.contact_id == contact_id)
        if date_from:
            query = query.filter(model.issue_date >= date_from)
        if date_to:
            query = query.filter(model.issue_date <= date_to)
        if search:
            pattern = f"%{search}%"
            query = query.filter(or_(
                getattr(model, self.number_field).like(pattern),
                model.notes.like(pattern),
                Contact.name.like(pattern)
            ))

        rows = query.order_by(model.created_at.desc(), model.id.desc()).all()
        return [self._attach(row) for row in rows]

    def get_by_id(self, document_id: int):
        row = self._query().filter(self.model.id == document_id).first()
        return self._attach(row) if row else None

    def get(self, document_id: int):
        document = self.get_by_id(document_id)
        if not document:
            raise NotFound(self.document_type)
        return document

    def _check_contact(self, document_data) -> None:
        if document_data.contact_id and not self.db.query(Contact.id).filter(
            Contact.id == document_data.contact_id
        ).first():
            raise NotFound("contact")

    def create(self, document_data):
        self._check_contact(document_data)
        document = self.model(**document_data.model_dump())
        self.db.add(document)
        self.db.flush()
        return self.get(document.id)

    def update(self, document_id: int, document_data):
        """Full replace; the amount may not drop below what is already allocated"""
        model = self.model
        document = self.db.query(model).filter(model.id == document_id).with_for_update().first()
        if not document:
            raise NotFound(self.document_type)
        self._check_contact(document_data)

        allocated = self.ledger.allocated_for_document(self.document_type, document_id)
        if document_data.amount < allocated:
            raise CapacityExceeded(
                "document", self.document_type, allocated, document_data.amount,
                message=f"{self.document_type} amount {document_data.amount} is below "
                        f"the {allocated} paise already allocated"
            )

        for key, value in document_data.model_dump().items():
            setattr(document, key, value)
        self.db.flush()
        self.db.expire(document)
        return self.get(document_id)

    def delete(self, document_id: int) -> None:
        model = self.model
        deleted = self.db.query(model).filter(model.id == document_id).delete(
            synchronize_session="fetch"
        )
        if deleted == 0:
            raise NotFound(self.document_type)
        self.ledger.release_document(self.document_type, document_id)

    def get_links(self, document_id: int) -> List[Dict]:
        return self.ledger.links_for_document(self.document_type, document_id)


class BillService(_DocumentService):
    model = Bill
    document_type = DocumentType.BILL.value
    number_field = "bill_number"


class InvoiceService(_DocumentService):
    model = Invoice
    document_type = DocumentType.INVOICE.value
    number_field = "invoice_number"
