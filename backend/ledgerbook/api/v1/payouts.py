"""
Payouts API Routes - Swiggy / Zomato settlements
"""
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session
from typing import Optional
from datetime import date

from ledgerbook.core.database import get_db
from ledgerbook.schemas import PayoutInput, PayoutResponse, DocumentLinkResponse, MessageResponse
from ledgerbook.services.payout_service import PayoutService

router = APIRouter(prefix="/payouts", tags=["Payouts"])


@router.get("")
def list_payouts(
    platform: Optional[str] = None,
    outlet_name: Optional[str] = None,
    date_from: Optional[date] = Query(None, alias="from"),
    date_to: Optional[date] = Query(None, alias="to"),
    db: Session = Depends(get_db)
):
    """List payouts, latest settlement first"""
    payouts = PayoutService(db).get_all(platform, outlet_name, date_from, date_to)
    return {"data": [PayoutResponse.model_validate(p) for p in payouts]}


@router.post("", status_code=201)
def create_payout(
    payout_data: PayoutInput,
    db: Session = Depends(get_db)
):
    payout = PayoutService(db).create(payout_data)
    db.commit()
    return {"data": PayoutResponse.model_validate(payout)}


@router.get("/{payout_id}")
def get_payout(
    payout_id: int,
    db: Session = Depends(get_db)
):
    payout = PayoutService(db).get(payout_id)
    return {"data": PayoutResponse.model_validate(payout)}


@router.put("/{payout_id}")
def update_payout(
    payout_id: int,
    payout_data: PayoutInput,
    db: Session = Depends(get_db)
):
    payout = PayoutService(db).update(payout_id, payout_data)
    db.commit()
    return {"data": PayoutResponse.model_validate(payout)}


@router.delete("/{payout_id}")
def delete_payout(
    payout_id: int,
    db: Session = Depends(get_db)
):
    PayoutService(db).delete(payout_id)
    db.commit()
    return {"data": MessageResponse(message="deleted")}


@router.get("/{payout_id}/links")
def get_payout_links(
    payout_id: int,
    db: Session = Depends(get_db)
):
    links = PayoutService(db).get_links(payout_id)
    return {"data": [DocumentLinkResponse.model_validate(link) for link in links]}
