from datetime import datetime, timedelta
from typing import List

from sqlalchemy.orm import Session

from ..core.exceptions import NotFoundError
from ..models.patient import Patient
from ..models.reminder import MedicineReminder
from ..schemas.reminder import ReminderCreate, ReminderUpdate

def next_trigger(frequency: int) -> datetime:
    return datetime.utcnow() + timedelta(hours=frequency)

class ReminderService:
    """
    Medicine reminders of the acting patient.

    Every query is filtered by the owning patient, so another patient's
    reminder id behaves exactly like a missing one. Mutations are targeted
    row updates.
    """
    
    def __init__(self, db: Session, patient: Patient):
        self.db = db
        self.patient = patient
    
    def _owned(self):
        return self.db.query(MedicineReminder).filter(
            MedicineReminder.patient_id == self.patient.id
        )
    
    def _get(self, reminder_id: int) -> MedicineReminder:
        reminder = self._owned().filter(MedicineReminder.id == reminder_id).first()
        if not reminder:
            raise NotFoundError("No reminder with that ID!")
        return reminder
    
    def list_reminders(self) -> List[MedicineReminder]:
        return self._owned().order_by(MedicineReminder.id).all()
    
    def create_reminder(self, data: ReminderCreate) -> List[MedicineReminder]:
        reminder = MedicineReminder(
            patient_id=self.patient.id,
            name=data.name,
            type=data.type,
            frequency=data.frequency,
            next_reminder=next_trigger(data.frequency),
            active=True,
        )
        self.db.add(reminder)
        self.db.commit()
        return self.list_reminders()
    
    def update_reminder(self, reminder_id: int, data: ReminderUpdate) -> MedicineReminder:
        """Change only the supplied fields; the next trigger moves only when the frequency does."""
        reminder = self._get(reminder_id)
        changes = data.model_dump(exclude_unset=True, exclude_none=True)
        
        if "frequency" in changes and changes["frequency"] != reminder.frequency:
            changes["next_reminder"] = next_trigger(changes["frequency"])
        
        if changes:
            self._owned().filter(
                MedicineReminder.id == reminder_id
            ).update(changes, synchronize_session=False)
            self.db.commit()
            self.db.refresh(reminder)
        return reminder
    
    def set_active(self, reminder_id: int, active: bool) -> List[MedicineReminder]:
        updated = self._owned().filter(
            MedicineReminder.id == reminder_id
        ).update({"active": active}, synchronize_session=False)
        if not updated:
            raise NotFoundError("No reminder with that ID!")
        self.db.commit()
        return self.list_reminders()
    
    def delete_reminder(self, reminder_id: int) -> List[MedicineReminder]:
        deleted = self._owned().filter(
            MedicineReminder.id == reminder_id
        ).delete(synchronize_session=False)
        if not deleted:
            raise NotFoundError("No reminder with that ID!")
        self.db.commit()
        return self.list_reminders()
