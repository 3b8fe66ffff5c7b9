"""
Transactions API Routes - account entries and their allocation links
"""
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session
from typing import Optional
from datetime import date

from ledgerbook.core.database import get_db
from ledgerbook.schemas import (
    TransactionInput, TransactionResponse, AllocationLinkInput, AllocationLinkResponse,
    MessageResponse
)
from ledgerbook.services.transaction_service import TransactionService

router = APIRouter(prefix="/transactions", tags=["Transactions"])


@router.get("")
def list_transactions(
    type: Optional[str] = None,
    account_id: Optional[int] = None,
    contact_id: Optional[int] = None,
    date_from: Optional[date] = Query(None, alias="from"),
    date_to: Optional[date] = Query(None, alias="to"),
    limit: Optional[int] = Query(None, ge=1),
    db: Session = Depends(get_db)
):
    """List transactions, newest first"""
    transactions = TransactionService(db).get_all(
        type, account_id, contact_id, date_from, date_to, limit
    )
    return {"data": [TransactionResponse.model_validate(t) for t in transactions]}


@router.post("", status_code=201)
def create_transaction(
    transaction_data: TransactionInput,
    db: Session = Depends(get_db)
):
    """Record income or expense; a transfer writes both legs and returns the expense leg"""
    transaction = TransactionService(db).create(transaction_data)
    db.commit()
    return {"data": TransactionResponse.model_validate(transaction)}


@router.get("/{transaction_id}")
def get_transaction(
    transaction_id: int,
    db: Session = Depends(get_db)
):
    transaction = TransactionService(db).get(transaction_id)
    return {"data": TransactionResponse.model_validate(transaction)}


@router.put("/{transaction_id}")
def update_transaction(
    transaction_id: int,
    transaction_data: TransactionInput,
    db: Session = Depends(get_db)
):
    transaction = TransactionService(db).update(transaction_id, transaction_data)
    db.commit()
    return {"data": TransactionResponse.model_validate(transaction)}


@router.delete("/{transaction_id}")
def delete_transaction(
    transaction_id: int,
    db: Session = Depends(get_db)
):
    TransactionService(db).delete(transaction_id)
    db.commit()
    return {"data": MessageResponse(message="deleted")}


# ==================== ALLOCATION LINKS ====================

@router.get("/{transaction_id}/links")
def list_transaction_links(
    transaction_id: int,
    db: Session = Depends(get_db)
):
    links = TransactionService(db).get_links(transaction_id)
    return {"data": [AllocationLinkResponse.model_validate(link) for link in links]}


@router.post("/{transaction_id}/links", status_code=201)
def create_transaction_link(
    transaction_id: int,
    link_data: AllocationLinkInput,
    db: Session = Depends(get_db)
):
    """Apply part of this transaction to a bill, invoice or payout"""
    link = TransactionService(db).link(
        transaction_id, link_data.document_type, link_data.document_id, link_data.amount
    )
    db.commit()
    return {"data": AllocationLinkResponse.model_validate(link)}


@router.delete("/{transaction_id}/links/{link_id}")
def delete_transaction_link(
    transaction_id: int,
    link_id: int,
    db: Session = Depends(get_db)
):
    TransactionService(db).unlink(transaction_id, link_id)
    db.commit()
    return {"data": MessageResponse(message="deleted")}
