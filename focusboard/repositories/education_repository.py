"""
Education repository - Data access layer for education items and their completions.
"""
from typing import List, Optional
from sqlalchemy.orm import Session

from focusboard.models import EducationCompletion, EducationItem


class EducationRepository:
    """Repository for EducationItem and EducationCompletion data access"""

    @staticmethod
    def get_by_id(
        db: Session, item_id: int, user_id: str, active_only: bool = False
    ) -> Optional[EducationItem]:
        query = db.query(EducationItem).filter(
            EducationItem.id == item_id,
            EducationItem.user_id == user_id
        )
        if active_only:
            query = query.filter(EducationItem.is_active == True)
        return query.first()

    @staticmethod
    def get_all(db: Session, user_id: str) -> List[EducationItem]:
        """Active items, highest priority first, then newest"""
        return db.query(EducationItem).filter(
            EducationItem.user_id == user_id,
            EducationItem.is_active == True
        ).order_by(EducationItem.priority_level, EducationItem.created_at.desc()).all()

    @staticmethod
    def create(db: Session, item: EducationItem) -> EducationItem:
        db.add(item)
        db.commit()
        db.refresh(item)
        return item

    @staticmethod
    def update(db: Session, item: EducationItem) -> EducationItem:
        db.commit()
        db.refresh(item)
        return item

    @staticmethod
    def delete(db: Session, item: EducationItem) -> None:
        db.delete(item)
        db.commit()

    @staticmethod
    def add_completion(db: Session, completion: EducationCompletion) -> EducationCompletion:
        """Stage a completion in the caller's transaction"""
        db.add(completion)
        db.flush()
        return completion
