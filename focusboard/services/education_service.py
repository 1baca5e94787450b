"""
Education service.
Completing an education item records a completion fact and awards the
item's points through the ledger in the same commit.
"""
import logging
from typing import List, Optional
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from focusboard.constants import EDUCATION_STATUS_COMPLETED
from focusboard.exceptions import InvalidStateException, NotFoundException
from focusboard.models import EducationCompletion, EducationItem
from focusboard.repositories.base import store_operation
from focusboard.repositories.education_repository import EducationRepository
from focusboard.schemas import (
    EducationCompletionResponse, EducationCompletionResult, EducationItemCreate,
    EducationItemResponse, EducationItemUpdate
)
from focusboard.services.ledger_service import LedgerService

logger = logging.getLogger("focusboard.education")


class EducationService:
    """Service for education items"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = EducationRepository()
        self.ledger = LedgerService(db)

    def get_items(self, user_id: str) -> List[EducationItem]:
        return self.repo.get_all(self.db, user_id)

    def get_item(self, user_id: str, item_id: int, active_only: bool = False) -> EducationItem:
        item = self.repo.get_by_id(self.db, item_id, user_id, active_only)
        if not item:
            raise NotFoundException("Education item", item_id)
        return item

    def create_item(self, user_id: str, item_data: EducationItemCreate) -> EducationItem:
        item = EducationItem(user_id=user_id, **item_data.model_dump())
        with store_operation(self.db, "education create"):
            return self.repo.create(self.db, item)

    def update_item(self, user_id: str, item_id: int, item_update: EducationItemUpdate) -> EducationItem:
        item = self.get_item(user_id, item_id)
        for key, value in item_update.model_dump(exclude_unset=True).items():
            setattr(item, key, value)
        with store_operation(self.db, "education update"):
            return self.repo.update(self.db, item)

    def delete_item(self, user_id: str, item_id: int) -> None:
        """Delete an item; points already awarded stay in the ledger"""
        item = self.get_item(user_id, item_id)
        with store_operation(self.db, "education delete"):
            self.repo.delete(self.db, item)
        logger.info(f"Deleted education item {item_id} for user {user_id}")

    def complete_item(
        self, user_id: str, item_id: int, notes: Optional[str] = None
    ) -> EducationCompletionResult:
        """
        Complete an active education item and award its points.

        Raises:
            NotFoundException: item absent, inactive or not owned
            InvalidStateException: item already completed
        """
        item = self.get_item(user_id, item_id, active_only=True)
        if item.status == EDUCATION_STATUS_COMPLETED:
            raise InvalidStateException("Education item", item_id, "education item is already completed")

        points = item.points_value or 0
        completion = EducationCompletion(
            user_id=user_id,
            education_item_id=item_id,
            points_awarded=points,
            notes=notes,
        )
        item.status = EDUCATION_STATUS_COMPLETED

        with store_operation(self.db, "education complete"):
            try:
                self.repo.add_completion(self.db, completion)
            except IntegrityError:
                # Another request completed the item first
                self.db.rollback()
                raise InvalidStateException("Education item", item_id, "education item is already completed")
            if points:
                self.ledger.append(user_id, points, f'Completed education "{item.title}"', commit=False)
            self.db.commit()
            self.db.refresh(completion)
            self.db.refresh(item)

        logger.info(f"Education item {item_id} completed by user {user_id} (+{points})")

        return EducationCompletionResult(
            completion=EducationCompletionResponse.model_validate(completion),
            item=EducationItemResponse.model_validate(item),
            message=f"Education item completed! +{points} points earned.",
        )
