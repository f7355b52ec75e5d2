from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from typing import List

from ...core.database import get_db
from ...api.deps import get_current_patient
from ...models.patient import Patient
from ...schemas.common import Envelope, success
from ...schemas.reminder import ReminderCreate, ReminderResponse, ReminderUpdate
from ...services.reminder_service import ReminderService

router = APIRouter(prefix="/reminders", tags=["Medicine Reminders"])

@router.post("", response_model=Envelope[List[ReminderResponse]], status_code=status.HTTP_201_CREATED)
async def create_reminder(
    reminder: ReminderCreate,
    db: Session = Depends(get_db),
    patient: Patient = Depends(get_current_patient)
):
    """Create a medicine reminder due ``frequency`` hours from now."""
    reminder_service = ReminderService(db, patient)
    return success(reminder_service.create_reminder(reminder))

@router.get("", response_model=Envelope[List[ReminderResponse]])
async def list_reminders(
    db: Session = Depends(get_db),
    patient: Patient = Depends(get_current_patient)
):
    """List the current patient's medicine reminders."""
    reminder_service = ReminderService(db, patient)
    return success(reminder_service.list_reminders())

@router.patch("/{reminder_id}", response_model=Envelope[ReminderResponse])
async def update_reminder(
    reminder_id: int,
    changes: ReminderUpdate,
    db: Session = Depends(get_db),
    patient: Patient = Depends(get_current_patient)
):
    """Update the supplied fields of a reminder."""
    reminder_service = ReminderService(db, patient)
    return success(reminder_service.update_reminder(reminder_id, changes))

@router.patch("/{reminder_id}/deactivate", response_model=Envelope[List[ReminderResponse]])
async def deactivate_reminder(
    reminder_id: int,
    db: Session = Depends(get_db),
    patient: Patient = Depends(get_current_patient)
):
    reminder_service = ReminderService(db, patient)
    return success(reminder_service.set_active(reminder_id, False))

@router.patch("/{reminder_id}/activate", response_model=Envelope[List[ReminderResponse]])
async def activate_reminder(
    reminder_id: int,
    db: Session = Depends(get_db),
    patient: Patient = Depends(get_current_patient)
):
    reminder_service = ReminderService(db, patient)
    return success(reminder_service.set_active(reminder_id, True))

@router.delete("/{reminder_id}", response_model=Envelope[List[ReminderResponse]])
async def delete_reminder(
    reminder_id: int,
    db: Session = Depends(get_db),
    patient: Patient = Depends(get_current_patient)
):
    reminder_service = ReminderService(db, patient)
    return success(reminder_service.delete_reminder(reminder_id))
