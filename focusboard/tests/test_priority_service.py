"""
Tests for PriorityService.

Tests cover:
1. Soft delete / restore / purge state rules
2. Exact and similarity-based deduplication
3. Scheduled cleanup window
4. Partial batch failures
"""
import pytest
from datetime import timedelta
from unittest.mock import patch
from sqlalchemy.exc import SQLAlchemyError

from focusboard.exceptions import (
    InvalidStateException, NotFoundException, PartialBatchFailureException
)
from focusboard.models import Priority, utcnow
from focusboard.schemas import PriorityCreate, PriorityReorderItem, PriorityUpdate
from focusboard.services.priority_service import (
    PriorityService, levenshtein_distance, normalize_title, title_similarity
)


def _create(db, user_id, title, priority_type="manual", **kwargs):
    return PriorityService(db).create_priority(
        user_id, PriorityCreate(title=title, priority_type=priority_type, **kwargs)
    )


def _deleted_at(db, user_id, title, deleted_at):
    priority = _create(db, user_id, title)
    priority.is_deleted = True
    priority.deleted_at = deleted_at
    db.commit()
    return priority


class TestListing:
    """Tests for list_priorities ordering and filtering"""

    def test_orders_by_index_then_score(self, db_session, user_id):
        _create(db_session, user_id, "Low", order_index=1, priority_score=90)
        _create(db_session, user_id, "High score", order_index=0, priority_score=80)
        _create(db_session, user_id, "Low score", order_index=0, priority_score=10)

        titles = [p.title for p in PriorityService(db_session).list_priorities(user_id)]

        assert titles == ["High score", "Low score", "Low"]

    def test_deleted_hidden_unless_requested(self, db_session, user_id):
        service = PriorityService(db_session)
        kept = _create(db_session, user_id, "Keep")
        gone = _create(db_session, user_id, "Gone")
        service.soft_delete_priority(user_id, gone.id)

        assert [p.id for p in service.list_priorities(user_id)] == [kept.id]
        assert len(service.list_priorities(user_id, include_deleted=True)) == 2
        assert [p.id for p in service.list_deleted(user_id)] == [gone.id]


class TestLifecycle:
    """Tests for state transitions"""

    def test_restore_never_deleted_is_invalid(self, db_session, user_id):
        priority = _create(db_session, user_id, "Active")

        with pytest.raises(InvalidStateException):
            PriorityService(db_session).restore_priority(user_id, priority.id)

    def test_restore_clears_deleted_state(self, db_session, user_id):
        service = PriorityService(db_session)
        priority = _create(db_session, user_id, "Oops")
        service.soft_delete_priority(user_id, priority.id)

        restored = service.restore_priority(user_id, priority.id)

        assert restored.is_deleted is False
        assert restored.deleted_at is None

    def test_delete_twice_is_invalid(self, db_session, user_id):
        service = PriorityService(db_session)
        priority = _create(db_session, user_id, "Once")
        service.soft_delete_priority(user_id, priority.id)

        with pytest.raises(InvalidStateException):
            service.soft_delete_priority(user_id, priority.id)

    def test_purge_requires_soft_delete(self, db_session, user_id):
        service = PriorityService(db_session)
        priority = _create(db_session, user_id, "Active")

        with pytest.raises(InvalidStateException):
            service.purge_priority(user_id, priority.id)

        service.soft_delete_priority(user_id, priority.id)
        service.purge_priority(user_id, priority.id)

        with pytest.raises(NotFoundException):
            service.get_priority(user_id, priority.id)

    def test_complete_twice_is_invalid(self, db_session, user_id):
        service = PriorityService(db_session)
        priority = _create(db_session, user_id, "Ship it")

        completed = service.complete_priority(user_id, priority.id)
        assert completed.completed_at is not None

        with pytest.raises(InvalidStateException):
            service.complete_priority(user_id, priority.id)

    def test_update_toggles_completed_at(self, db_session, user_id):
        service = PriorityService(db_session)
        priority = _create(db_session, user_id, "Toggle")

        done = service.update_priority(user_id, priority.id, PriorityUpdate(is_completed=True))
        assert done.completed_at is not None

        undone = service.update_priority(user_id, priority.id, PriorityUpdate(is_completed=False))
        assert undone.completed_at is None

    def test_cannot_touch_other_users_priority(self, db_session, user_id, other_user_id):
        priority = _create(db_session, other_user_id, "Theirs")

        with pytest.raises(NotFoundException):
            PriorityService(db_session).soft_delete_priority(user_id, priority.id)


class TestDeduplicate:
    """Tests for exact deduplication"""

    def test_keeps_earliest_of_each_title_and_type(self, db_session, user_id):
        first = _create(db_session, user_id, "Write report")
        _create(db_session, user_id, "Write report")
        _create(db_session, user_id, "Write report")
        other_type = _create(db_session, user_id, "Write report", priority_type="ai_recommended")

        result = PriorityService(db_session).deduplicate(user_id)

        assert result.removed_count == 2
        remaining = {p.id for p in PriorityService(db_session).list_priorities(user_id)}
        assert remaining == {first.id, other_type.id}

    def test_is_idempotent(self, db_session, user_id):
        service = PriorityService(db_session)
        _create(db_session, user_id, "Dup")
        _create(db_session, user_id, "Dup")

        assert service.deduplicate(user_id).removed_count == 1
        assert service.deduplicate(user_id).removed_count == 0

    def test_partial_failure_reports_succeeded(self, db_session, user_id):
        """A failed row should not stop the rest of the batch"""
        for _ in range(4):
            _create(db_session, user_id, "Same")

        real_commit = db_session.commit
        calls = {"count": 0}

        def flaky_commit():
            calls["count"] += 1
            if calls["count"] == 2:
                raise SQLAlchemyError("database is locked")
            real_commit()

        with patch.object(db_session, "commit", side_effect=flaky_commit):
            with pytest.raises(PartialBatchFailureException) as exc_info:
                PriorityService(db_session).deduplicate(user_id)

        assert exc_info.value.succeeded == 2
        assert len(exc_info.value.failures) == 1
        assert len(PriorityService(db_session).list_priorities(user_id)) == 2


class TestSmartDeduplicate:
    """Tests for similarity-based deduplication"""

    def test_normalize_title(self):
        assert normalize_title("  Write the REPORT!!  now ") == "write the report now"

    def test_similarity(self):
        assert levenshtein_distance("kitten", "sitting") == 3
        assert title_similarity("", "") == 1.0
        assert title_similarity("abcd", "abcd") == 1.0
        assert title_similarity("kitten", "sitting") == pytest.approx(4 / 7)

    def test_merges_near_duplicates_preferring_completed(self, db_session, user_id):
        _create(db_session, user_id, "Write the report!")
        completed = _create(db_session, user_id, "write the report", is_completed=True)
        _create(db_session, user_id, "Write the reports", priority_type="fire_auto")
        unrelated = _create(db_session, user_id, "Call mom")

        result = PriorityService(db_session).smart_deduplicate(user_id)

        assert result.removed_count == 2
        remaining = {p.id for p in PriorityService(db_session).list_priorities(user_id)}
        assert remaining == {completed.id, unrelated.id}

    def test_nothing_similar(self, db_session, user_id):
        _create(db_session, user_id, "Gym")
        _create(db_session, user_id, "Taxes")

        result = PriorityService(db_session).smart_deduplicate(user_id)

        assert result.removed_count == 0
        assert result.kept_count == 2


class TestCleanup:
    """Tests for the 24 hour purge window"""

    def test_purges_only_after_24_hours(self, db_session, user_id):
        now = utcnow()
        expired = _deleted_at(db_session, user_id, "Old", now - timedelta(hours=24, seconds=1))
        recent = _deleted_at(db_session, user_id, "Recent", now - timedelta(hours=24) + timedelta(seconds=1))

        result = PriorityService(db_session).run_scheduled_cleanup(now)

        assert result.purged_count == 1
        ids = {p.id for p in db_session.query(Priority).all()}
        assert expired.id not in ids
        assert recent.id in ids

    def test_scans_every_user(self, db_session, user_id, other_user_id):
        now = utcnow()
        _deleted_at(db_session, user_id, "Mine", now - timedelta(days=2))
        _deleted_at(db_session, other_user_id, "Theirs", now - timedelta(days=3))
        _create(db_session, user_id, "Active")

        result = PriorityService(db_session).run_scheduled_cleanup(now)

        assert result.users_scanned == 2
        assert result.purged_count == 2
        assert db_session.query(Priority).count() == 1

    def test_cleanup_for_one_user(self, db_session, user_id, other_user_id):
        now = utcnow()
        _deleted_at(db_session, user_id, "Mine", now - timedelta(days=2))
        _deleted_at(db_session, other_user_id, "Theirs", now - timedelta(days=2))

        assert PriorityService(db_session).cleanup_expired(user_id, now) == 1
        assert db_session.query(Priority).count() == 1


class TestReorder:
    """Tests for bulk reorder"""

    def test_sets_order_index(self, db_session, user_id):
        service = PriorityService(db_session)
        a = _create(db_session, user_id, "A")
        b = _create(db_session, user_id, "B")

        count = service.reorder(user_id, [
            PriorityReorderItem(id=a.id, order_index=2),
            PriorityReorderItem(id=b.id, order_index=1),
        ])

        assert count == 2
        assert [p.title for p in service.list_priorities(user_id)] == ["B", "A"]
