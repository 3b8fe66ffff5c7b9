"""
Accounts API Routes
"""
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from typing import Optional

from ledgerbook.core.database import get_db
from ledgerbook.schemas import AccountInput, AccountResponse, MessageResponse
from ledgerbook.services.account_service import AccountService

router = APIRouter(prefix="/accounts", tags=["Accounts"])


@router.get("")
def list_accounts(
    search: Optional[str] = None,
    db: Session = Depends(get_db)
):
    """List accounts with their current balances"""
    accounts = AccountService(db).get_all(search)
    return {"data": [AccountResponse.model_validate(a) for a in accounts]}


@router.post("", status_code=201)
def create_account(
    account_data: AccountInput,
    db: Session = Depends(get_db)
):
    """Create a bank, cash or credit card account"""
    account = AccountService(db).create(account_data)
    db.commit()
    return {"data": AccountResponse.model_validate(account)}


@router.get("/{account_id}")
def get_account(
    account_id: int,
    db: Session = Depends(get_db)
):
    account = AccountService(db).get(account_id)
    return {"data": AccountResponse.model_validate(account)}


@router.put("/{account_id}")
def update_account(
    account_id: int,
    account_data: AccountInput,
    db: Session = Depends(get_db)
):
    account = AccountService(db).update(account_id, account_data)
    db.commit()
    return {"data": AccountResponse.model_validate(account)}


@router.delete("/{account_id}")
def delete_account(
    account_id: int,
    db: Session = Depends(get_db)
):
    """Delete an account; fails while transactions still reference it"""
    AccountService(db).delete(account_id)
    db.commit()
    return {"data": MessageResponse(message="deleted")}
