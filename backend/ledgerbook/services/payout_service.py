"""
Payout Service - Swiggy / Zomato settlements
"""
from typing import Optional, List, Dict
from datetime import date
from sqlalchemy.orm import Session
from sqlalchemy import func

from ledgerbook.core.exceptions import NotFound, CapacityExceeded
from ledgerbook.models import Payout, DocumentType
from ledgerbook.schemas import PayoutInput
from ledgerbook.services.ledger_service import LedgerService, document_allocated, with_allocation


class PayoutService:
    """
    Payouts are allocatable up to final_payout_amt but have no status,
    so nothing here ever reconciles.
    """

    document_type = DocumentType.PAYOUT.value

    def __init__(self, db: Session, ledger: LedgerService = None):
        self.db = db
        self.ledger = ledger or LedgerService(db)

    def _query(self):
        return self.db.query(Payout, document_allocated(self.db, self.document_type).label("allocated"))

    @staticmethod
    def _attach(row) -> Payout:
        payout, allocated = row
        return with_allocation(payout, payout.final_payout_amt, allocated)

    def get_all(self, platform: str = None, outlet_name: str = None,
                date_from: date = None, date_to: date = None) -> List[Payout]:
        query = self._query()
        if platform:
            query = query.filter(Payout.platform == platform.lower())
        if outlet_name:
            query = query.filter(Payout.outlet_name.like(f"%{outlet_name}%"))
        if date_from:
            query = query.filter(Payout.settlement_date >= date_from)
        if date_to:
            query = query.filter(Payout.settlement_date <= date_to)

        rows = query.order_by(
            Payout.settlement_date.desc(), Payout.created_at.desc(), Payout.id.desc()
        ).all()
        return [self._attach(row) for row in rows]

    def get_by_id(self, payout_id: int) -> Optional[Payout]:
        row = self._query().filter(Payout.id == payout_id).first()
        return self._attach(row) if row else None

    def get(self, payout_id: int) -> Payout:
        payout = self.get_by_id(payout_id)
        if not payout:
            raise NotFound("payout")
        return payout

    def create(self, payout_data: PayoutInput) -> Payout:
        payout = Payout(**payout_data.model_dump())
        self.db.add(payout)
        self.db.flush()
        return self.get(payout.id)

    def update(self, payout_id: int, payout_data: PayoutInput) -> Payout:
        payout = self.db.query(Payout).filter(Payout.id == payout_id).with_for_update().first()
        if not payout:
            raise NotFound("payout")

        allocated = self.ledger.allocated_for_document(self.document_type, payout_id)
        if payout_data.final_payout_amt < allocated:
            raise CapacityExceeded(
                "document", self.document_type, allocated, payout_data.final_payout_amt,
                message=f"payout final_payout_amt {payout_data.final_payout_amt} is below "
                        f"the {allocated} paise already allocated"
            )

        for key, value in payout_data.model_dump().items():
            setattr(payout, key, value)
        self.db.flush()
        return self.get(payout_id)

    def delete(self, payout_id: int) -> None:
        deleted = self.db.query(Payout).filter(Payout.id == payout_id).delete(
            synchronize_session="fetch"
        )
        if deleted == 0:
            raise NotFound("payout")
        self.ledger.release_document(self.document_type, payout_id)

    def get_links(self, payout_id: int) -> List[Dict]:
        return self.ledger.links_for_document(self.document_type, payout_id)

    def total_received(self) -> int:
        return self.db.query(func.coalesce(func.sum(Payout.final_payout_amt), 0)).scalar()
