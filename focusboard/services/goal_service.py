"""
Goal management service.
Handles goals and projects, and reconciles percentage progress into absolute
values backed by ledger entries.
"""
import logging
from decimal import Decimal, ROUND_HALF_UP
from typing import List, Optional
from sqlalchemy.orm import Session

from focusboard.constants import (
    GOAL_STATUS_ACTIVE, GOAL_STATUS_COMPLETED, GOAL_TYPE_PROJECT
)
from focusboard.exceptions import NotFoundException, ValidationException
from focusboard.models import Goal
from focusboard.repositories.base import store_operation
from focusboard.repositories.goal_repository import GoalRepository
from focusboard.schemas import GoalCreate, GoalUpdate, ProgressResult
from focusboard.services.ledger_service import LedgerService

logger = logging.getLogger("focusboard.goals")


class GoalService:
    """Service for managing goals and projects"""

    def __init__(self, db: Session):
        self.db = db
        self.goal_repo = GoalRepository()
        self.ledger = LedgerService(db)

    @staticmethod
    def reconcile_value(percentage: float, target_value: int) -> int:
        """
        Convert a percentage of the target into an absolute value.

        Rounds half up. A zero (or missing) target always yields 0.
        """
        if not target_value or target_value <= 0:
            return 0
        value = Decimal(str(percentage)) * Decimal(target_value) / Decimal(100)
        return int(value.quantize(Decimal("1"), rounding=ROUND_HALF_UP))

    @staticmethod
    def _entity_name(goal_type: Optional[str]) -> str:
        return "Project" if goal_type == GOAL_TYPE_PROJECT else "Goal"

    def get_goals(self, user_id: str, goal_type: Optional[str] = None) -> List[Goal]:
        return self.goal_repo.get_all(self.db, user_id, goal_type)

    def get_goal(
        self, user_id: str, goal_id: int, goal_type: Optional[str] = None, for_update: bool = False
    ) -> Goal:
        """Get an owned goal, raising NotFoundException otherwise"""
        goal = self.goal_repo.get_by_id(self.db, goal_id, user_id, for_update=for_update)
        if not goal or (goal_type and goal.goal_type != goal_type):
            raise NotFoundException(self._entity_name(goal_type), goal_id)
        return goal

    def create_goal(self, user_id: str, goal_data: GoalCreate) -> Goal:
        """
        Create a goal or project.

        A non-zero starting value is recorded as an opening ledger entry so
        that current_value equals the goal's ledger sum from the start.
        """
        goal = Goal(user_id=user_id, **goal_data.model_dump())
        goal.status = self._status_for(goal.current_value, goal.target_value)

        with store_operation(self.db, "goal create"):
            self.goal_repo.create(self.db, goal, commit=False)
            if goal.current_value:
                self.ledger.append(
                    user_id,
                    goal.current_value,
                    f'Starting progress on "{goal.title}"',
                    goal_id=goal.id,
                    commit=False,
                )
            self.db.commit()
            self.db.refresh(goal)

        logger.info(f"Created {goal.goal_type} {goal.id} for user {user_id}")
        return goal

    @staticmethod
    def _status_for(current_value: int, target_value: int) -> str:
        if target_value and current_value >= target_value:
            return GOAL_STATUS_COMPLETED
        return GOAL_STATUS_ACTIVE

    def update_goal(
        self, user_id: str, goal_id: int, goal_update: GoalUpdate, goal_type: Optional[str] = None
    ) -> Goal:
        """Update descriptive fields, target or status (paused/cancelled/active)"""
        goal = self.get_goal(user_id, goal_id, goal_type)

        update_data = goal_update.model_dump(exclude_unset=True)
        for key, value in update_data.items():
            setattr(goal, key, value)

        if "target_value" in update_data and "status" not in update_data:
            if goal.status in (GOAL_STATUS_ACTIVE, GOAL_STATUS_COMPLETED):
                goal.status = self._status_for(goal.current_value, goal.target_value)

        with store_operation(self.db, "goal update"):
            return self.goal_repo.update(self.db, goal)

    def delete_goal(self, user_id: str, goal_id: int, goal_type: Optional[str] = None) -> None:
        """
        Delete a goal.

        Its ledger entries are retained untouched for history; they keep the
        dangling goal_id and are shown as "other" entries afterwards.
        """
        goal = self.get_goal(user_id, goal_id, goal_type)
        with store_operation(self.db, "goal delete"):
            self.goal_repo.delete(self.db, goal)
        logger.info(f"Deleted goal {goal_id} for user {user_id}; ledger entries retained")

    def set_progress(
        self,
        user_id: str,
        goal_id: int,
        percentage: float,
        goal_type: Optional[str] = None
    ) -> ProgressResult:
        """
        Set progress as a percentage of the target.

        The new absolute value replaces the cached value; the difference is
        appended to the ledger (negative when progress goes down). The goal
        row and the ledger entry are committed together.

        Args:
            user_id: Owner of the goal
            goal_id: Goal or project ID
            percentage: New percentage complete, 0-100
            goal_type: Restrict lookup to "goal" or "project"

        Returns:
            ProgressResult with the delta written to the ledger

        Raises:
            ValidationException: percentage outside [0, 100]
            NotFoundException: goal absent or not owned
            StoreException: the write failed (nothing is persisted)
        """
        if percentage is None or percentage < 0 or percentage > 100:
            raise ValidationException("progress_percentage", "must be between 0 and 100")

        goal = self.get_goal(user_id, goal_id, goal_type, for_update=True)

        target_value = goal.target_value or 0
        previous_value = goal.current_value or 0
        new_value = self.reconcile_value(percentage, target_value)
        delta = new_value - previous_value

        goal.current_value = new_value
        goal.status = GOAL_STATUS_COMPLETED if percentage >= 100 else GOAL_STATUS_ACTIVE

        with store_operation(self.db, "goal progress"):
            if delta != 0:
                description = (
                    f'Progress on "{goal.title}"' if delta > 0
                    else f'Progress reduced on "{goal.title}"'
                )
                self.ledger.append(user_id, delta, description, goal_id=goal.id, commit=False)
            self.db.commit()
            self.db.refresh(goal)

        if delta > 0:
            message = f"Earned {delta} points!"
        elif delta < 0:
            message = f"Lost {abs(delta)} points."
        else:
            message = "No points change."

        logger.info(
            f"Progress {goal.goal_type} {goal_id}: {previous_value} -> {new_value} "
            f"({percentage}%) user={user_id}"
        )

        return ProgressResult(
            goal_id=goal.id,
            title=goal.title,
            previous_value=previous_value,
            current_value=new_value,
            target_value=target_value,
            progress_percentage=percentage,
            progress_change=delta,
            status=goal.status,
            message=message,
        )

    def rebuild_goal_value(self, user_id: str, goal_id: int) -> Goal:
        """Recompute the cached current_value from the goal's ledger entries"""
        goal = self.get_goal(user_id, goal_id, for_update=True)
        ledger_value = self.ledger.get_balance(user_id, goal_id=goal.id)
        if ledger_value != goal.current_value:
            logger.warning(
                f"Goal {goal_id} cache drift: cached={goal.current_value} ledger={ledger_value}"
            )
        goal.current_value = ledger_value
        with store_operation(self.db, "goal rebuild"):
            return self.goal_repo.update(self.db, goal)
