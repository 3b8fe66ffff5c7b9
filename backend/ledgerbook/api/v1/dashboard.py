"""
Dashboard API Routes
"""
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ledgerbook.core.database import get_db
from ledgerbook.schemas import DashboardResponse
from ledgerbook.services.dashboard_service import DashboardService

router = APIRouter(prefix="/dashboard", tags=["Dashboard"])


@router.get("")
def get_dashboard(db: Session = Depends(get_db)):
    """Headline counts, outstanding amounts and the latest transactions"""
    stats = DashboardService(db).get_stats()
    return {"data": DashboardResponse.model_validate(stats)}
