"""
Bills API Routes - Payables
"""
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session
from typing import Optional
from datetime import date

from ledgerbook.core.database import get_db
from ledgerbook.schemas import BillInput, BillResponse, DocumentLinkResponse, MessageResponse
from ledgerbook.services.document_service import BillService

router = APIRouter(prefix="/bills", tags=["Bills"])


@router.get("")
def list_bills(
    status: Optional[str] = None,
    contact_id: Optional[int] = None,
    date_from: Optional[date] = Query(None, alias="from"),
    date_to: Optional[date] = Query(None, alias="to"),
    search: Optional[str] = None,
    db: Session = Depends(get_db)
):
    """List bills with allocated / unallocated amounts"""
    bills = BillService(db).get_all(status, contact_id, date_from, date_to, search)
    return {"data": [BillResponse.model_validate(d) for d in bills]}


@router.post("", status_code=201)
def create_bill(
    bill_data: BillInput,
    db: Session = Depends(get_db)
):
    bill = BillService(db).create(bill_data)
    db.commit()
    return {"data": BillResponse.model_validate(bill)}


@router.get("/{bill_id}")
def get_bill(
    bill_id: int,
    db: Session = Depends(get_db)
):
    bill = BillService(db).get(bill_id)
    return {"data": BillResponse.model_validate(bill)}


@router.put("/{bill_id}")
def update_bill(
    bill_id: int,
    bill_data: BillInput,
    db: Session = Depends(get_db)
):
    bill = BillService(db).update(bill_id, bill_data)
    db.commit()
    return {"data": BillResponse.model_validate(bill)}


@router.delete("/{bill_id}")
def delete_bill(
    bill_id: int,
    db: Session = Depends(get_db)
):
    BillService(db).delete(bill_id)
    db.commit()
    return {"data": MessageResponse(message="deleted")}


@router.get("/{bill_id}/links")
def get_bill_links(
    bill_id: int,
    db: Session = Depends(get_db)
):
    """Payments applied to this bill"""
    links = BillService(db).get_links(bill_id)
    return {"data": [DocumentLinkResponse.model_validate(link) for link in links]}
