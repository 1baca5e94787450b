"""
Education item HTTP routes.
"""
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from typing import List, Optional

from focusboard.auth import get_current_user_id
from focusboard.database import get_db
from focusboard.schemas import (
    EducationComplete, EducationCompletionResult, EducationItemCreate,
    EducationItemResponse, EducationItemUpdate
)
from focusboard.services.education_service import EducationService

router = APIRouter(prefix="/api/education", tags=["education"])


@router.get("", response_model=List[EducationItemResponse])
def get_education_items(db: Session = Depends(get_db), user_id: str = Depends(get_current_user_id)):
    return EducationService(db).get_items(user_id)


@router.post("", response_model=EducationItemResponse, status_code=status.HTTP_201_CREATED)
def create_education_item(
    item: EducationItemCreate,
    db: Session = Depends(get_db),
    user_id: str = Depends(get_current_user_id)
):
    return EducationService(db).create_item(user_id, item)


@router.patch("/{item_id}", response_model=EducationItemResponse)
def update_education_item(
    item_id: int,
    item_update: EducationItemUpdate,
    db: Session = Depends(get_db),
    user_id: str = Depends(get_current_user_id)
):
    return EducationService(db).update_item(user_id, item_id, item_update)


@router.delete("/{item_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_education_item(item_id: int, db: Session = Depends(get_db), user_id: str = Depends(get_current_user_id)):
    EducationService(db).delete_item(user_id, item_id)


@router.post("/{item_id}/complete", response_model=EducationCompletionResult)
def complete_education_item(
    item_id: int,
    body: Optional[EducationComplete] = None,
    db: Session = Depends(get_db),
    user_id: str = Depends(get_current_user_id)
):
    """Complete an education item and award its points."""
    notes = body.notes if body else None
    return EducationService(db).complete_item(user_id, item_id, notes)
