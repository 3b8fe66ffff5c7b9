"""
Contact Service - Vendors and Customers
"""
from typing import Optional, List
from sqlalchemy.orm import Session
from sqlalchemy import func, case, and_, or_

from ledgerbook.core.exceptions import NotFound
from ledgerbook.models import Contact, Bill, Invoice, AllocationLink, ContactType, DocumentType
from ledgerbook.schemas import ContactInput


class ContactService:
    def __init__(self, db: Session):
        self.db = db

    def _documents_total(self, model):
        return self.db.query(
            func.coalesce(func.sum(model.amount), 0)
        ).filter(
            model.contact_id == Contact.id
        ).correlate(Contact).scalar_subquery()

    def _documents_allocated(self, model, document_type: str):
        return self.db.query(
            func.coalesce(func.sum(AllocationLink.amount), 0)
        ).select_from(AllocationLink).join(
            model, and_(
                AllocationLink.document_type == document_type,
                AllocationLink.document_id == model.id
            )
        ).filter(
            model.contact_id == Contact.id
        ).correlate(Contact).scalar_subquery()

    def _query(self):
        # Vendors are measured against their bills, customers against their invoices
        is_vendor = Contact.type == ContactType.VENDOR.value
        total = case(
            (is_vendor, self._documents_total(Bill)),
            else_=self._documents_total(Invoice)
        )
        allocated = case(
            (is_vendor, self._documents_allocated(Bill, DocumentType.BILL.value)),
            else_=self._documents_allocated(Invoice, DocumentType.INVOICE.value)
        )
        return self.db.query(Contact, total.label("total_amount"), allocated.label("allocated_amount"))

    @staticmethod
    def _attach(row) -> Contact:
        contact, total, allocated = row
        contact.total_amount = total
        contact.allocated_amount = allocated
        contact.balance = total - allocated
        return contact

    def get_all(self, contact_type: str = None, search: str = None) -> List[Contact]:
        query = self._query()
        if contact_type:
            query = query.filter(Contact.type == contact_type)
        if search:
            pattern = f"%{search}%"
            query = query.filter(or_(
                Contact.name.like(pattern),
                Contact.email.like(pattern),
                Contact.phone.like(pattern)
            ))
        return [self._attach(row) for row in query.order_by(Contact.name, Contact.id).all()]

    def get_by_id(self, contact_id: int) -> Optional[Contact]:
        row = self._query().filter(Contact.id == contact_id).first()
        return self._attach(row) if row else None

    def get(self, contact_id: int) -> Contact:
        contact = self.get_by_id(contact_id)
        if not contact:
            raise NotFound("contact")
        return contact

    def create(self, contact_data: ContactInput) -> Contact:
        contact = Contact(
            name=contact_data.name,
            type=contact_data.type,
            email=contact_data.email,
            phone=contact_data.phone
        )
        self.db.add(contact)
        self.db.flush()
        return self.get(contact.id)

    def update(self, contact_id: int, contact_data: ContactInput) -> Contact:
        contact = self.db.query(Contact).filter(Contact.id == contact_id).first()
        if not contact:
            raise NotFound("contact")

        for key, value in contact_data.model_dump().items():
            setattr(contact, key, value)
        self.db.flush()
        return self.get(contact_id)

    def delete(self, contact_id: int) -> None:
        # Bills, invoices and transactions keep their rows; the store nulls contact_id
        deleted = self.db.query(Contact).filter(Contact.id == contact_id).delete(
            synchronize_session="fetch"
        )
        if deleted == 0:
            raise NotFound("contact")
        self.db.expire_all()
