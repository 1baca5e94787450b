"""
Priority repository - Data access layer for Priority model.
Every query is scoped by user_id.
"""
from datetime import datetime
from typing import List, Optional
from sqlalchemy.orm import Session

from focusboard.models import Priority


class PriorityRepository:
    """Repository for Priority data access"""

    @staticmethod
    def get_by_id(db: Session, priority_id: int, user_id: str) -> Optional[Priority]:
        """Get priority by ID scoped to its owner (deleted or not)"""
        return db.query(Priority).filter(
            Priority.id == priority_id,
            Priority.user_id == user_id
        ).first()

    @staticmethod
    def get_all(db: Session, user_id: str, include_deleted: bool = False) -> List[Priority]:
        """Get priorities ordered by manual order, score, then newest"""
        query = db.query(Priority).filter(Priority.user_id == user_id)
        if not include_deleted:
            query = query.filter(Priority.is_deleted == False)
        return query.order_by(
            Priority.order_index.asc(),
            Priority.priority_score.desc(),
            Priority.created_at.desc()
        ).all()

    @staticmethod
    def get_active_oldest_first(db: Session, user_id: str) -> List[Priority]:
        """Get non-deleted priorities, earliest created first (ties by id)"""
        return db.query(Priority).filter(
            Priority.user_id == user_id,
            Priority.is_deleted == False
        ).order_by(Priority.created_at.asc(), Priority.id.asc()).all()

    @staticmethod
    def get_deleted(db: Session, user_id: str) -> List[Priority]:
        """Get soft-deleted priorities, most recently deleted first"""
        return db.query(Priority).filter(
            Priority.user_id == user_id,
            Priority.is_deleted == True
        ).order_by(Priority.deleted_at.desc()).all()

    @staticmethod
    def get_deleted_before(db: Session, user_id: str, cutoff: datetime) -> List[Priority]:
        """Get soft-deleted priorities whose deleted_at is strictly before cutoff"""
        return db.query(Priority).filter(
            Priority.user_id == user_id,
            Priority.is_deleted == True,
            Priority.deleted_at < cutoff
        ).all()

    @staticmethod
    def get_user_ids_with_deleted(db: Session) -> List[str]:
        """Get every user that has at least one soft-deleted priority"""
        rows = db.query(Priority.user_id).filter(Priority.is_deleted == True).distinct().all()
        return [row[0] for row in rows]

    @staticmethod
    def create(db: Session, priority: Priority) -> Priority:
        db.add(priority)
        db.commit()
        db.refresh(priority)
        return priority

    @staticmethod
    def update(db: Session, priority: Priority) -> Priority:
        db.commit()
        db.refresh(priority)
        return priority

    @staticmethod
    def delete(db: Session, priority: Priority) -> None:
        db.delete(priority)
        db.commit()
