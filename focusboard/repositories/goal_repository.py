"""
Goal repository - Data access layer for goals and projects.
"""
from typing import List, Optional
from sqlalchemy.orm import Session

from focusboard.models import Goal


class GoalRepository:
    """Repository for Goal data access"""

    @staticmethod
    def get_all(db: Session, user_id: str, goal_type: Optional[str] = None) -> List[Goal]:
        """Get all goals of a user, newest first"""
        query = db.query(Goal).filter(Goal.user_id == user_id)
        if goal_type:
            query = query.filter(Goal.goal_type == goal_type)
        return query.order_by(Goal.created_at.desc()).all()

    @staticmethod
    def get_by_id(
        db: Session, goal_id: int, user_id: str, for_update: bool = False
    ) -> Optional[Goal]:
        """
        Get goal by ID scoped to its owner.

        Args:
            for_update: Lock the row until the transaction ends (ignored by SQLite)
        """
        query = db.query(Goal).filter(Goal.id == goal_id, Goal.user_id == user_id)
        if for_update:
            query = query.with_for_update()
        return query.first()

    @staticmethod
    def create(db: Session, goal: Goal, commit: bool = True) -> Goal:
        db.add(goal)
        if commit:
            db.commit()
            db.refresh(goal)
        else:
            db.flush()
        return goal

    @staticmethod
    def update(db: Session, goal: Goal) -> Goal:
        db.commit()
        db.refresh(goal)
        return goal

    @staticmethod
    def delete(db: Session, goal: Goal) -> None:
        db.delete(goal)
        db.commit()
