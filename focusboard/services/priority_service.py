"""
Priority lifecycle service.
Active -> SoftDeleted -> (Restored | Purged). Soft-deleted priorities stay
restorable until the cleanup purges them 24 hours after deletion.
"""
import logging
import re
from datetime import datetime, timedelta
from typing import Callable, List, Optional
from sqlalchemy.orm import Session

from focusboard.constants import PRIORITY_PURGE_AFTER_HOURS, SMART_DEDUPE_SIMILARITY
from focusboard.exceptions import (
    InvalidStateException, NotFoundException, PartialBatchFailureException, StoreException
)
from focusboard.models import Priority, utcnow
from focusboard.repositories.base import store_operation
from focusboard.repositories.priority_repository import PriorityRepository
from focusboard.schemas import (
    CleanupSweepResult, DeduplicateResult, PriorityCreate, PriorityReorderItem,
    PrioritySummary, PriorityUpdate
)

logger = logging.getLogger("focusboard.priorities")


def normalize_title(title: str) -> str:
    """Lowercase, drop punctuation and collapse whitespace"""
    lowered = (title or "").lower()
    lowered = re.sub(r"[^\w\s]", "", lowered)
    lowered = re.sub(r"\s+", " ", lowered)
    return lowered.strip()


def levenshtein_distance(left: str, right: str) -> int:
    """Edit distance with unit cost insert/delete/substitute"""
    if len(left) < len(right):
        left, right = right, left
    previous = list(range(len(right) + 1))
    for i, left_char in enumerate(left, start=1):
        current = [i]
        for j, right_char in enumerate(right, start=1):
            current.append(min(
                previous[j] + 1,
                current[j - 1] + 1,
                previous[j - 1] + (left_char != right_char),
            ))
        previous = current
    return previous[-1]


def title_similarity(left: str, right: str) -> float:
    """1.0 for identical strings, 0.0 for nothing in common"""
    longer, shorter = (left, right) if len(left) >= len(right) else (right, left)
    if not longer:
        return 1.0
    return (len(longer) - levenshtein_distance(longer, shorter)) / len(longer)


class PriorityService:
    """Service for the priority lifecycle"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = PriorityRepository()

    def _get(self, user_id: str, priority_id: int) -> Priority:
        priority = self.repo.get_by_id(self.db, priority_id, user_id)
        if not priority:
            raise NotFoundException("Priority", priority_id)
        return priority

    def _get_active(self, user_id: str, priority_id: int) -> Priority:
        priority = self._get(user_id, priority_id)
        if priority.is_deleted:
            raise InvalidStateException("Priority", priority_id, "priority is deleted")
        return priority

    def get_priority(self, user_id: str, priority_id: int) -> Priority:
        return self._get(user_id, priority_id)

    def list_priorities(self, user_id: str, include_deleted: bool = False) -> List[Priority]:
        return self.repo.get_all(self.db, user_id, include_deleted)

    def list_deleted(self, user_id: str) -> List[Priority]:
        return self.repo.get_deleted(self.db, user_id)

    def create_priority(self, user_id: str, priority_data: PriorityCreate) -> Priority:
        priority = Priority(user_id=user_id, **priority_data.model_dump())
        if priority.is_completed:
            priority.completed_at = utcnow()
        with store_operation(self.db, "priority create"):
            priority = self.repo.create(self.db, priority)
        logger.info(f"Created priority {priority.id} ({priority.priority_type}) for user {user_id}")
        return priority

    def update_priority(
        self, user_id: str, priority_id: int, priority_update: PriorityUpdate
    ) -> Priority:
        """Partial update; toggling is_completed sets or clears completed_at"""
        priority = self._get_active(user_id, priority_id)

        update_data = priority_update.model_dump(exclude_unset=True)
        if "is_completed" in update_data and update_data["is_completed"] != priority.is_completed:
            priority.completed_at = utcnow() if update_data["is_completed"] else None
        for key, value in update_data.items():
            setattr(priority, key, value)

        with store_operation(self.db, "priority update"):
            return self.repo.update(self.db, priority)

    def complete_priority(self, user_id: str, priority_id: int) -> Priority:
        priority = self._get_active(user_id, priority_id)
        if priority.is_completed:
            raise InvalidStateException("Priority", priority_id, "priority is already completed")

        priority.is_completed = True
        priority.completed_at = utcnow()
        with store_operation(self.db, "priority complete"):
            return self.repo.update(self.db, priority)

    def soft_delete_priority(self, user_id: str, priority_id: int) -> Priority:
        priority = self._get(user_id, priority_id)
        if priority.is_deleted:
            raise InvalidStateException("Priority", priority_id, "priority is already deleted")

        self._mark_deleted(priority, utcnow())
        with store_operation(self.db, "priority delete"):
            priority = self.repo.update(self.db, priority)
        logger.info(f"Soft-deleted priority {priority_id} for user {user_id}")
        return priority

    @staticmethod
    def _mark_deleted(priority: Priority, when: datetime) -> None:
        priority.is_deleted = True
        priority.deleted_at = when

    def restore_priority(self, user_id: str, priority_id: int) -> Priority:
        """Undo a soft delete; only soft-deleted priorities can be restored"""
        priority = self._get(user_id, priority_id)
        if not priority.is_deleted:
            raise InvalidStateException("Priority", priority_id, "priority is not deleted")

        priority.is_deleted = False
        priority.deleted_at = None
        with store_operation(self.db, "priority restore"):
            priority = self.repo.update(self.db, priority)
        logger.info(f"Restored priority {priority_id} for user {user_id}")
        return priority

    def purge_priority(self, user_id: str, priority_id: int) -> None:
        """Permanently remove a soft-deleted priority"""
        priority = self._get(user_id, priority_id)
        if not priority.is_deleted:
            raise InvalidStateException(
                "Priority", priority_id, "priority must be deleted before it can be purged"
            )
        with store_operation(self.db, "priority purge"):
            self.repo.delete(self.db, priority)
        logger.info(f"Purged priority {priority_id} for user {user_id}")

    def _apply_per_row(
        self, operation: str, rows: List[Priority], action: Callable[[Priority], None]
    ) -> int:
        """
        Apply action to each row and commit it on its own.

        Returns:
            Number of rows written

        Raises:
            PartialBatchFailureException: if any row failed (the others stay written)
        """
        succeeded = 0
        failures = []
        for row in rows:
            row_id = row.id
            try:
                with store_operation(self.db, operation):
                    action(row)
                    self.db.commit()
                succeeded += 1
            except StoreException as e:
                failures.append({"id": row_id, "error": e.message})

        if failures:
            logger.error(f"{operation}: {len(failures)} of {len(rows)} rows failed")
            raise PartialBatchFailureException(operation, succeeded, failures)
        return succeeded

    def _soft_delete_rows(self, operation: str, rows: List[Priority]) -> int:
        now = utcnow()
        return self._apply_per_row(operation, rows, lambda row: self._mark_deleted(row, now))

    def deduplicate(self, user_id: str) -> DeduplicateResult:
        """
        Soft-delete exact duplicates.

        Active priorities are grouped by (title, priority_type); the earliest
        created of each group is kept. Running it twice removes nothing the
        second time.
        """
        priorities = self.repo.get_active_oldest_first(self.db, user_id)

        seen = set()
        duplicates = []
        for priority in priorities:
            key = (priority.title, priority.priority_type)
            if key in seen:
                duplicates.append(priority)
            else:
                seen.add(key)

        return self._finish_dedupe("priority deduplicate", user_id, priorities, duplicates)

    def smart_deduplicate(self, user_id: str) -> DeduplicateResult:
        """
        Soft-delete near-duplicates across all types.

        Titles are normalized and compared by edit-distance similarity. Of each
        group of similar titles a completed priority is kept first, otherwise
        the oldest one.
        """
        priorities = self.repo.get_active_oldest_first(self.db, user_id)
        normalized = [normalize_title(p.title) for p in priorities]

        processed = set()
        duplicates = []
        for i, current in enumerate(priorities):
            if i in processed:
                continue
            group = [current]
            for j in range(i + 1, len(priorities)):
                if j in processed:
                    continue
                similarity = title_similarity(normalized[i], normalized[j])
                if similarity > SMART_DEDUPE_SIMILARITY:
                    group.append(priorities[j])
                    processed.add(j)
                    logger.debug(
                        f'Similar priorities "{current.title}" and "{priorities[j].title}" '
                        f"({similarity:.0%})"
                    )
            processed.add(i)

            if len(group) > 1:
                group.sort(key=lambda p: (not p.is_completed, p.created_at, p.id))
                duplicates.extend(group[1:])

        return self._finish_dedupe("priority smart deduplicate", user_id, priorities, duplicates)

    def _finish_dedupe(
        self, operation: str, user_id: str, priorities: List[Priority], duplicates: List[Priority]
    ) -> DeduplicateResult:
        if not duplicates:
            return DeduplicateResult(
                removed_count=0, kept_count=len(priorities), message="No duplicates found"
            )

        removed = [PrioritySummary.model_validate(p) for p in duplicates]
        count = self._soft_delete_rows(operation, duplicates)
        logger.info(f"{operation}: removed {count} duplicates for user {user_id}")
        return DeduplicateResult(
            removed_count=count,
            kept_count=len(priorities) - count,
            removed=removed,
            message=f"Removed {count} duplicate priorities",
        )

    def reorder(self, user_id: str, items: List[PriorityReorderItem]) -> int:
        """Set order_index on several priorities; returns how many were updated"""
        rows = []
        order = {}
        for item in items:
            rows.append(self._get_active(user_id, item.id))
            order[item.id] = item.order_index

        def set_order(row: Priority) -> None:
            row.order_index = order[row.id]

        return self._apply_per_row("priority reorder", rows, set_order)

    def cleanup_expired(self, user_id: str, now: Optional[datetime] = None) -> int:
        """
        Purge the user's priorities soft-deleted more than 24 hours ago.

        Args:
            user_id: Owner whose deleted priorities are scanned
            now: Naive UTC reference instant (defaults to the clock)

        Returns:
            Number of priorities purged
        """
        cutoff = (now or utcnow()) - timedelta(hours=PRIORITY_PURGE_AFTER_HOURS)
        expired = self.repo.get_deleted_before(self.db, user_id, cutoff)
        if not expired:
            return 0
        count = self._apply_per_row("priority cleanup", expired, self.db.delete)
        logger.info(f"Purged {count} expired priorities for user {user_id}")
        return count

    def run_scheduled_cleanup(self, now: Optional[datetime] = None) -> CleanupSweepResult:
        """Run cleanup_expired for every user that has soft-deleted priorities"""
        user_ids = self.repo.get_user_ids_with_deleted(self.db)
        purged = 0
        failed = 0
        for user_id in user_ids:
            try:
                purged += self.cleanup_expired(user_id, now)
            except PartialBatchFailureException as e:
                purged += e.succeeded
                failed += len(e.failures)
            except StoreException as e:
                logger.error(f"Cleanup failed for user {user_id}: {e.message}")
                failed += 1

        return CleanupSweepResult(users_scanned=len(user_ids), purged_count=purged, failed_count=failed)
