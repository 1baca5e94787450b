"""
Task repository - Data access layer for Task model.
"""
from typing import List, Optional
from sqlalchemy.orm import Session

from focusboard.models import Task


class TaskRepository:
    """Repository for Task data access"""

    @staticmethod
    def get_by_id(db: Session, task_id: int, user_id: str) -> Optional[Task]:
        """Get task by ID scoped to its owner"""
        return db.query(Task).filter(Task.id == task_id, Task.user_id == user_id).first()

    @staticmethod
    def get_all(db: Session, user_id: str, status: Optional[str] = None) -> List[Task]:
        query = db.query(Task).filter(Task.user_id == user_id)
        if status:
            query = query.filter(Task.status == status)
        return query.order_by(Task.created_at.desc()).all()

    @staticmethod
    def create(db: Session, task: Task) -> Task:
        db.add(task)
        db.commit()
        db.refresh(task)
        return task
