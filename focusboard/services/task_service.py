"""
Task service.
Completing a task awards its points through the ledger, attributed to the task.
"""
import logging
from typing import List, Optional
from sqlalchemy.orm import Session

from focusboard.constants import TASK_STATUS_COMPLETED
from focusboard.exceptions import InvalidStateException, NotFoundException
from focusboard.models import Task, utcnow
from focusboard.repositories.base import store_operation
from focusboard.repositories.task_repository import TaskRepository
from focusboard.schemas import TaskCreate
from focusboard.services.ledger_service import LedgerService

logger = logging.getLogger("focusboard.tasks")


class TaskService:
    """Service for task operations"""

    def __init__(self, db: Session):
        self.db = db
        self.task_repo = TaskRepository()
        self.ledger = LedgerService(db)

    def get_tasks(self, user_id: str, status: Optional[str] = None) -> List[Task]:
        return self.task_repo.get_all(self.db, user_id, status)

    def get_task(self, user_id: str, task_id: int) -> Task:
        task = self.task_repo.get_by_id(self.db, task_id, user_id)
        if not task:
            raise NotFoundException("Task", task_id)
        return task

    def create_task(self, user_id: str, task_data: TaskCreate) -> Task:
        task = Task(user_id=user_id, **task_data.model_dump())
        with store_operation(self.db, "task create"):
            return self.task_repo.create(self.db, task)

    def complete_task(self, user_id: str, task_id: int) -> Task:
        """Mark a task completed and append its points in the same commit"""
        task = self.get_task(user_id, task_id)
        if task.status == TASK_STATUS_COMPLETED:
            raise InvalidStateException("Task", task_id, "task is already completed")

        task.status = TASK_STATUS_COMPLETED
        task.completed_at = utcnow()

        with store_operation(self.db, "task complete"):
            if task.points:
                self.ledger.append(
                    user_id, task.points, f'Completed task "{task.title}"',
                    task_id=task.id, commit=False
                )
            self.db.commit()
            self.db.refresh(task)

        logger.info(f"Task {task_id} completed by user {user_id} (+{task.points})")
        return task
