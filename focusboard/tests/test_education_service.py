"""
Tests for the education completion flow.
"""
import pytest
from unittest.mock import patch
from sqlalchemy.exc import OperationalError

from focusboard.exceptions import InvalidStateException, NotFoundException, StoreException
from focusboard.models import EducationCompletion, EducationItem
from focusboard.repositories.ledger_repository import LedgerRepository
from focusboard.schemas import EducationItemCreate, EducationItemUpdate
from focusboard.services.education_service import EducationService
from focusboard.services.ledger_service import LedgerService


class TestCompleteItem:
    """Tests for complete_item"""

    def test_records_completion_and_awards_points(self, db_session, user_id):
        """Should write the completion fact and a ledger entry for the item's points"""
        service = EducationService(db_session)
        item = service.create_item(user_id, EducationItemCreate(title="SQL course", points_value=250))

        result = service.complete_item(user_id, item.id, notes="Finished module 4")

        assert result.completion.points_awarded == 250
        assert result.completion.notes == "Finished module 4"
        assert result.item.status == "completed"
        assert result.message == "Education item completed! +250 points earned."
        assert LedgerService(db_session).get_balance(user_id) == 250
        assert LedgerService(db_session).get_history(user_id)[0].type == "other"

    def test_complete_twice_is_invalid(self, db_session, user_id):
        service = EducationService(db_session)
        item = service.create_item(user_id, EducationItemCreate(title="SQL course"))
        service.complete_item(user_id, item.id)

        with pytest.raises(InvalidStateException):
            service.complete_item(user_id, item.id)

        assert db_session.query(EducationCompletion).count() == 1
        assert LedgerService(db_session).get_balance(user_id) == 100

    def test_concurrent_completion_is_invalid(self, db_session, user_id):
        """Should reject a completion that raced past the status check"""
        service = EducationService(db_session)
        item = service.create_item(user_id, EducationItemCreate(title="SQL course"))
        service.complete_item(user_id, item.id)
        db_session.query(EducationItem).filter_by(id=item.id).update({"status": "in_progress"})
        db_session.commit()

        with pytest.raises(InvalidStateException):
            service.complete_item(user_id, item.id)

        assert db_session.query(EducationCompletion).count() == 1
        assert LedgerService(db_session).get_balance(user_id) == 100

    def test_inactive_item_not_found(self, db_session, user_id):
        service = EducationService(db_session)
        item = service.create_item(user_id, EducationItemCreate(title="SQL course"))
        service.update_item(user_id, item.id, EducationItemUpdate(is_active=False))

        with pytest.raises(NotFoundException):
            service.complete_item(user_id, item.id)

    def test_other_users_item_not_found(self, db_session, user_id, other_user_id):
        service = EducationService(db_session)
        item = service.create_item(other_user_id, EducationItemCreate(title="Theirs"))

        with pytest.raises(NotFoundException):
            service.complete_item(user_id, item.id)

    def test_store_failure_persists_nothing(self, db_session, user_id):
        """Should roll back the completion when the ledger write fails"""
        service = EducationService(db_session)
        item = service.create_item(user_id, EducationItemCreate(title="SQL course"))

        with patch.object(
            LedgerRepository, "append",
            side_effect=OperationalError("INSERT", {}, Exception("disk I/O error"))
        ):
            with pytest.raises(StoreException):
                service.complete_item(user_id, item.id)

        assert db_session.query(EducationCompletion).count() == 0
        assert service.get_item(user_id, item.id).status == "pending"


class TestItems:
    """Tests for listing, updating and deleting items"""

    def test_lists_active_by_priority(self, db_session, user_id):
        service = EducationService(db_session)
        service.create_item(user_id, EducationItemCreate(title="Later", priority_level=4))
        service.create_item(user_id, EducationItemCreate(title="First", priority_level=1))
        hidden = service.create_item(user_id, EducationItemCreate(title="Hidden"))
        service.update_item(user_id, hidden.id, EducationItemUpdate(is_active=False))

        assert [i.title for i in service.get_items(user_id)] == ["First", "Later"]

    def test_delete_keeps_awarded_points(self, db_session, user_id):
        service = EducationService(db_session)
        item = service.create_item(user_id, EducationItemCreate(title="SQL course", points_value=40))
        service.complete_item(user_id, item.id)

        service.delete_item(user_id, item.id)

        with pytest.raises(NotFoundException):
            service.get_item(user_id, item.id)
        assert LedgerService(db_session).get_balance(user_id) == 40
