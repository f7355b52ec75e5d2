from typing import List

from sqlalchemy.orm import Session, joinedload

from ..core.exceptions import AuthorizationError, NotFoundError
from ..models.appointment import Appointment
from ..models.emr import EMR
from ..models.patient import Patient

class PatientService:
    """Read-side operations scoped to the acting patient."""
    
    def __init__(self, db: Session, patient: Patient):
        self.db = db
        self.patient = patient
    
    def list_appointments(self) -> List[Appointment]:
        appointments = self.db.query(Appointment).options(
            joinedload(Appointment.doctor)
        ).filter(
            Appointment.patient_id == self.patient.id
        ).order_by(Appointment.date.desc(), Appointment.time.desc()).all()
        
        if not appointments:
            raise NotFoundError("No upcoming appointments yet!")
        return appointments
    
    def get_appointment_emr(self, appointment_id: int) -> EMR:
        appointment = self.db.query(Appointment).filter(
            Appointment.id == appointment_id
        ).first()
        if not appointment:
            raise NotFoundError("No appointment found with that ID!")
        if appointment.patient_id != self.patient.id:
            raise AuthorizationError("You can only view the records of your own appointments!")
        
        emr = self.db.query(EMR).filter(EMR.appointment_id == appointment.id).first()
        if not emr:
            raise NotFoundError("No EMR related to this appointment!")
        return emr
    
    def list_emrs(self) -> List[EMR]:
        emrs = self.db.query(EMR).filter(
            EMR.patient_id == self.patient.id
        ).order_by(EMR.id.desc()).all()
        
        if not emrs:
            raise NotFoundError("No EMRs have been created yet!")
        return emrs
    
    def calculate_bmi(self, weight: float, height: float) -> Patient:
        """Store weight (kg), height (cm) and the derived BMI."""
        self.patient.weight = weight
        self.patient.height = height
        self.patient.bmi = round(weight / (height / 100) ** 2, 2)
        self.db.commit()
        self.db.refresh(self.patient)
        return self.patient
