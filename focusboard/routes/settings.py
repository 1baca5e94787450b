"""
Settings and maintenance HTTP routes.
"""
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from focusboard.auth import get_current_user_id, verify_cron_secret
from focusboard.database import get_db
from focusboard.schemas import MaintenanceResult, SettingsResponse, SettingsUpdate
from focusboard.services.maintenance_service import MaintenanceService
from focusboard.services.settings_service import SettingsService

router = APIRouter(prefix="/api/settings", tags=["settings"])
cron_router = APIRouter(prefix="/api/cron", tags=["cron"])


def _settings_response(service: SettingsService, user_id: str, timezone: str) -> SettingsResponse:
    return SettingsResponse(
        user_id=user_id,
        timezone=timezone,
        reference_date=service.get_reference_date(user_id, timezone),
    )


@router.get("", response_model=SettingsResponse)
def get_settings(db: Session = Depends(get_db), user_id: str = Depends(get_current_user_id)):
    service = SettingsService(db)
    return _settings_response(service, user_id, service.get_settings(user_id).timezone)


@router.put("", response_model=SettingsResponse)
def update_settings(
    settings_update: SettingsUpdate,
    db: Session = Depends(get_db),
    user_id: str = Depends(get_current_user_id)
):
    service = SettingsService(db)
    settings = service.update_settings(user_id, settings_update)
    return _settings_response(service, user_id, settings.timezone)


@cron_router.post("/nightly-maintenance", response_model=MaintenanceResult)
def nightly_maintenance(db: Session = Depends(get_db), _: str = Depends(verify_cron_secret)):
    """Externally triggered nightly sweep (same job the scheduler runs)."""
    return MaintenanceService(db).run_nightly()


@cron_router.post("/priority-cleanup")
def priority_cleanup(db: Session = Depends(get_db), _: str = Depends(verify_cron_secret)):
    return MaintenanceService(db).run_priority_cleanup()
