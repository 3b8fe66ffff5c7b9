"""
Contacts API Routes - Vendors and Customers
"""
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from typing import Optional

from ledgerbook.core.database import get_db
from ledgerbook.schemas import ContactInput, ContactResponse, MessageResponse
from ledgerbook.services.contact_service import ContactService

router = APIRouter(prefix="/contacts", tags=["Contacts"])


@router.get("")
def list_contacts(
    type: Optional[str] = None,
    search: Optional[str] = None,
    db: Session = Depends(get_db)
):
    """List contacts with billed/invoiced totals and what has been settled"""
    contacts = ContactService(db).get_all(type, search)
    return {"data": [ContactResponse.model_validate(c) for c in contacts]}


@router.post("", status_code=201)
def create_contact(
    contact_data: ContactInput,
    db: Session = Depends(get_db)
):
    contact = ContactService(db).create(contact_data)
    db.commit()
    return {"data": ContactResponse.model_validate(contact)}


@router.get("/{contact_id}")
def get_contact(
    contact_id: int,
    db: Session = Depends(get_db)
):
    contact = ContactService(db).get(contact_id)
    return {"data": ContactResponse.model_validate(contact)}


@router.put("/{contact_id}")
def update_contact(
    contact_id: int,
    contact_data: ContactInput,
    db: Session = Depends(get_db)
):
    contact = ContactService(db).update(contact_id, contact_data)
    db.commit()
    return {"data": ContactResponse.model_validate(contact)}


@router.delete("/{contact_id}")
def delete_contact(
    contact_id: int,
    db: Session = Depends(get_db)
):
    ContactService(db).delete(contact_id)
    db.commit()
    return {"data": MessageResponse(message="deleted")}
