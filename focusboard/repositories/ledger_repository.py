"""
Ledger repository - Data access layer for the points ledger.
Exposes append and read operations only; entries are never updated or deleted.
"""
from datetime import datetime
from typing import List, Optional
from sqlalchemy import func
from sqlalchemy.orm import Session

from focusboard.models import LedgerEntry


class LedgerRepository:
    """Repository for LedgerEntry data access"""

    @staticmethod
    def append(db: Session, entry: LedgerEntry, commit: bool = True) -> LedgerEntry:
        """
        Append an entry to the ledger.

        Args:
            db: Database session
            entry: Entry to append
            commit: False to leave the entry in the caller's transaction
        """
        db.add(entry)
        if commit:
            db.commit()
            db.refresh(entry)
        return entry

    @staticmethod
    def _scoped(
        query,
        user_id: str,
        goal_id: Optional[int] = None,
        task_id: Optional[int] = None,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None
    ):
        query = query.filter(LedgerEntry.user_id == user_id)
        if goal_id is not None:
            query = query.filter(LedgerEntry.goal_id == goal_id)
        if task_id is not None:
            query = query.filter(LedgerEntry.task_id == task_id)
        if start is not None:
            query = query.filter(LedgerEntry.created_at >= start)
        if end is not None:
            query = query.filter(LedgerEntry.created_at < end)
        return query

    @staticmethod
    def sum_points(
        db: Session,
        user_id: str,
        goal_id: Optional[int] = None,
        task_id: Optional[int] = None,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None
    ) -> int:
        """Sum of points for a user, optionally narrowed to a goal/task and a time window"""
        query = db.query(func.coalesce(func.sum(LedgerEntry.points), 0))
        query = LedgerRepository._scoped(query, user_id, goal_id, task_id, start, end)
        return int(query.scalar() or 0)

    @staticmethod
    def get_entries(
        db: Session,
        user_id: str,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
        goal_id: Optional[int] = None,
        limit: Optional[int] = None
    ) -> List[LedgerEntry]:
        """Get entries newest first"""
        query = LedgerRepository._scoped(
            db.query(LedgerEntry), user_id, goal_id=goal_id, start=start, end=end
        )
        query = query.order_by(LedgerEntry.created_at.desc(), LedgerEntry.id.desc())
        if limit is not None:
            query = query.limit(limit)
        return query.all()
