"""
Points ledger HTTP routes.
"""
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session
from typing import List, Optional

from focusboard.auth import get_current_user_id, get_timezone_override
from focusboard.constants import LEDGER_HISTORY_DEFAULT_LIMIT
from focusboard.database import get_db
from focusboard.schemas import (
    LedgerAwardCreate, LedgerEntryResponse, LedgerHistoryItem, LedgerSummaryResponse
)
from focusboard.services.ledger_service import LedgerService
from focusboard.services.settings_service import SettingsService

router = APIRouter(prefix="/api/points", tags=["points"])


@router.get("")
@router.get("/current")
def get_current_points(
    db: Session = Depends(get_db),
    user_id: str = Depends(get_current_user_id)
):
    """Get the user's total points (sum of the ledger)."""
    return {"points": LedgerService(db).get_balance(user_id)}


@router.get("/summary", response_model=LedgerSummaryResponse)
def get_points_summary(
    db: Session = Depends(get_db),
    user_id: str = Depends(get_current_user_id),
    tz_override: Optional[str] = Depends(get_timezone_override)
):
    """Daily and weekly totals with a 7-day breakdown."""
    tz_name = SettingsService(db).get_timezone(user_id, tz_override)
    return LedgerService(db).get_summary(user_id, tz_name)


@router.get("/history", response_model=List[LedgerHistoryItem])
def get_points_history(
    limit: int = Query(LEDGER_HISTORY_DEFAULT_LIMIT, ge=1, le=1000),
    db: Session = Depends(get_db),
    user_id: str = Depends(get_current_user_id)
):
    """Ledger entries, newest first."""
    return LedgerService(db).get_history(user_id, limit)


@router.post("", response_model=LedgerEntryResponse, status_code=status.HTTP_201_CREATED)
def award_points(
    award: LedgerAwardCreate,
    db: Session = Depends(get_db),
    user_id: str = Depends(get_current_user_id)
):
    """Record a manual award attributed to a task."""
    return LedgerService(db).award_manual(user_id, award)
