"""
Trophy repository - Data access for the trophy families.
Methods take the family's reference model and award model as arguments so a
single implementation serves discipline, total-habit and sign-in trophies.
"""
from typing import List, Optional, Set
from sqlalchemy.orm import Session


class TrophyRepository:
    """Repository for trophy reference data and user awards"""

    @staticmethod
    def get_all(db: Session, trophy_model) -> list:
        return db.query(trophy_model).order_by(trophy_model.threshold.asc()).all()

    @staticmethod
    def get_by_threshold(db: Session, trophy_model, threshold: int):
        return db.query(trophy_model).filter(trophy_model.threshold == threshold).first()

    @staticmethod
    def get_eligible(db: Session, trophy_model, count: int) -> list:
        """Trophies with threshold <= count, ascending by threshold"""
        return db.query(trophy_model).filter(
            trophy_model.threshold <= count
        ).order_by(trophy_model.threshold.asc()).all()

    @staticmethod
    def get_awarded_ids(
        db: Session,
        award_model,
        user_id: str,
        scope_column: Optional[str] = None,
        scope_id: Optional[int] = None
    ) -> Set[int]:
        """IDs of trophies already awarded to the user (optionally within a scope)"""
        query = db.query(award_model.trophy_id).filter(award_model.user_id == user_id)
        if scope_column is not None:
            query = query.filter(getattr(award_model, scope_column) == scope_id)
        return {row[0] for row in query.all()}

    @staticmethod
    def get_awards(
        db: Session,
        award_model,
        user_id: str,
        scope_column: Optional[str] = None,
        scope_id: Optional[int] = None
    ) -> List:
        query = db.query(award_model).filter(award_model.user_id == user_id)
        if scope_column is not None and scope_id is not None:
            query = query.filter(getattr(award_model, scope_column) == scope_id)
        return query.order_by(award_model.awarded_at.asc()).all()
