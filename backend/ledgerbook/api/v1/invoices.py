"""
Invoices API Routes - Receivables
"""
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session
from typing import Optional
from datetime import date

from ledgerbook.core.database import get_db
from ledgerbook.schemas import InvoiceInput, InvoiceResponse, DocumentLinkResponse, MessageResponse
from ledgerbook.services.document_service import InvoiceService

router = APIRouter(prefix="/invoices", tags=["Invoices"])


@router.get("")
def list_invoices(
    status: Optional[str] = None,
    contact_id: Optional[int] = None,
    date_from: Optional[date] = Query(None, alias="from"),
    date_to: Optional[date] = Query(None, alias="to"),
    search: Optional[str] = None,
    db: Session = Depends(get_db)
):
    """List invoices with allocated / unallocated amounts"""
    invoices = InvoiceService(db).get_all(status, contact_id, date_from, date_to, search)
    return {"data": [InvoiceResponse.model_validate(d) for d in invoices]}


@router.post("", status_code=201)
def create_invoice(
    invoice_data: InvoiceInput,
    db: Session = Depends(get_db)
):
    invoice = InvoiceService(db).create(invoice_data)
    db.commit()
    return {"data": InvoiceResponse.model_validate(invoice)}


@router.get("/{invoice_id}")
def get_invoice(
    invoice_id: int,
    db: Session = Depends(get_db)
):
    invoice = InvoiceService(db).get(invoice_id)
    return {"data": InvoiceResponse.model_validate(invoice)}


@router.put("/{invoice_id}")
def update_invoice(
    invoice_id: int,
    invoice_data: InvoiceInput,
    db: Session = Depends(get_db)
):
    invoice = InvoiceService(db).update(invoice_id, invoice_data)
    db.commit()
    return {"data": InvoiceResponse.model_validate(invoice)}


@router.delete("/{invoice_id}")
def delete_invoice(
    invoice_id: int,
    db: Session = Depends(get_db)
):
    InvoiceService(db).delete(invoice_id)
    db.commit()
    return {"data": MessageResponse(message="deleted")}


@router.get("/{invoice_id}/links")
def get_invoice_links(
    invoice_id: int,
    db: Session = Depends(get_db)
):
    """Payments applied to this invoice"""
    links = InvoiceService(db).get_links(invoice_id)
    return {"data": [DocumentLinkResponse.model_validate(link) for link in links]}
