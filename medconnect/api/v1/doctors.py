from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from typing import List, Optional

from ...core.database import get_db
from ...api.deps import get_current_user
from ...models.user import User
from ...schemas.common import Envelope, success
from ...schemas.doctor import DoctorDetail, DoctorProfile, DoctorSummary
from ...services.doctor_service import DoctorService

router = APIRouter(prefix="/doctors", tags=["Doctors"])

@router.get("/search", response_model=Envelope[List[DoctorSummary]])
async def search_doctors(
    name: Optional[str] = None,
    speciality: Optional[str] = None,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Search doctors by name and/or speciality around the user's location."""
    doctor_service = DoctorService(db)
    return success(doctor_service.search(current_user, name=name, speciality=speciality))

@router.get("/search/{speciality}/{coordinates}", response_model=Envelope[List[DoctorSummary]])
async def search_doctors_by_speciality(
    speciality: str,
    coordinates: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Search doctors of a speciality near ``latitude,longitude``."""
    doctor_service = DoctorService(db)
    return success(doctor_service.search_by_speciality(speciality, coordinates))

@router.get("/user/{user_id}", response_model=Envelope[DoctorDetail])
async def get_doctor_by_user_id(
    user_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Get the doctor profile owned by a user account."""
    doctor_service = DoctorService(db)
    return success(doctor_service.get_by_user_id(user_id))

@router.get("/{doctor_id}", response_model=Envelope[DoctorProfile])
async def get_doctor(
    doctor_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Get a doctor with its ratings."""
    doctor_service = DoctorService(db)
    return success(doctor_service.get_by_id(doctor_id))
