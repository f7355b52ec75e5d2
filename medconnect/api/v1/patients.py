from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from typing import List

from ...core.database import get_db
from ...api.deps import get_current_patient
from ...models.patient import Patient
from ...schemas.common import Envelope, success
from ...schemas.patient import BMIRequest, EMRResponse, PatientResponse
from ...services.patient_service import PatientService

router = APIRouter(prefix="/patients/me", tags=["Patients"])

@router.get("", response_model=Envelope[PatientResponse])
async def get_my_profile(
    patient: Patient = Depends(get_current_patient)
):
    """Get the current patient's profile."""
    return success(patient)

@router.get("/emrs", response_model=Envelope[List[EMRResponse]])
async def list_my_emrs(
    db: Session = Depends(get_db),
    patient: Patient = Depends(get_current_patient)
):
    """List every EMR of the current patient."""
    patient_service = PatientService(db, patient)
    return success(patient_service.list_emrs())

@router.patch("/bmi", response_model=Envelope[PatientResponse])
async def calculate_bmi(
    measurements: BMIRequest,
    db: Session = Depends(get_db),
    patient: Patient = Depends(get_current_patient)
):
    """Store weight (kg) and height (cm) and compute the BMI."""
    patient_service = PatientService(db, patient)
    return success(patient_service.calculate_bmi(measurements.weight, measurements.height))
