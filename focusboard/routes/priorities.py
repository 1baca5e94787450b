"""
Priority HTTP routes.
"""
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session
from typing import List

from focusboard.auth import get_current_user_id
from focusboard.database import get_db
from focusboard.schemas import (
    BatchResult, DeduplicateResult, PriorityCreate, PriorityReorderItem,
    PriorityResponse, PriorityUpdate
)
from focusboard.services.priority_service import PriorityService

router = APIRouter(prefix="/api/priorities", tags=["priorities"])


@router.get("", response_model=List[PriorityResponse])
def list_priorities(
    include_deleted: bool = Query(False),
    db: Session = Depends(get_db),
    user_id: str = Depends(get_current_user_id)
):
    return PriorityService(db).list_priorities(user_id, include_deleted)


@router.get("/deleted", response_model=List[PriorityResponse])
def list_deleted_priorities(db: Session = Depends(get_db), user_id: str = Depends(get_current_user_id)):
    """Soft-deleted priorities that can still be restored."""
    return PriorityService(db).list_deleted(user_id)


@router.post("", response_model=PriorityResponse, status_code=status.HTTP_201_CREATED)
def create_priority(
    priority: PriorityCreate,
    db: Session = Depends(get_db),
    user_id: str = Depends(get_current_user_id)
):
    return PriorityService(db).create_priority(user_id, priority)


@router.post("/deduplicate", response_model=DeduplicateResult)
def deduplicate_priorities(db: Session = Depends(get_db), user_id: str = Depends(get_current_user_id)):
    return PriorityService(db).deduplicate(user_id)


@router.post("/smart-deduplicate", response_model=DeduplicateResult)
def smart_deduplicate_priorities(db: Session = Depends(get_db), user_id: str = Depends(get_current_user_id)):
    return PriorityService(db).smart_deduplicate(user_id)


@router.post("/cleanup", response_model=BatchResult)
def cleanup_priorities(db: Session = Depends(get_db), user_id: str = Depends(get_current_user_id)):
    """Purge this user's priorities deleted more than 24 hours ago."""
    count = PriorityService(db).cleanup_expired(user_id)
    return BatchResult(processed_count=count, message=f"Purged {count} expired priorities")


@router.put("/reorder", response_model=BatchResult)
def reorder_priorities(
    items: List[PriorityReorderItem],
    db: Session = Depends(get_db),
    user_id: str = Depends(get_current_user_id)
):
    count = PriorityService(db).reorder(user_id, items)
    return BatchResult(processed_count=count, message=f"Reordered {count} priorities")


@router.get("/{priority_id}", response_model=PriorityResponse)
def get_priority(priority_id: int, db: Session = Depends(get_db), user_id: str = Depends(get_current_user_id)):
    return PriorityService(db).get_priority(user_id, priority_id)


@router.patch("/{priority_id}", response_model=PriorityResponse)
def update_priority(
    priority_id: int,
    priority_update: PriorityUpdate,
    db: Session = Depends(get_db),
    user_id: str = Depends(get_current_user_id)
):
    return PriorityService(db).update_priority(user_id, priority_id, priority_update)


@router.post("/{priority_id}/complete", response_model=PriorityResponse)
def complete_priority(priority_id: int, db: Session = Depends(get_db), user_id: str = Depends(get_current_user_id)):
    return PriorityService(db).complete_priority(user_id, priority_id)


@router.delete("/{priority_id}", response_model=PriorityResponse)
def soft_delete_priority(priority_id: int, db: Session = Depends(get_db), user_id: str = Depends(get_current_user_id)):
    """Soft delete; restorable for 24 hours."""
    return PriorityService(db).soft_delete_priority(user_id, priority_id)


@router.post("/{priority_id}/restore", response_model=PriorityResponse)
def restore_priority(priority_id: int, db: Session = Depends(get_db), user_id: str = Depends(get_current_user_id)):
    return PriorityService(db).restore_priority(user_id, priority_id)


@router.delete("/{priority_id}/permanent", status_code=status.HTTP_204_NO_CONTENT)
def purge_priority(priority_id: int, db: Session = Depends(get_db), user_id: str = Depends(get_current_user_id)):
    PriorityService(db).purge_priority(user_id, priority_id)
