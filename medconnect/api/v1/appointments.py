from fastapi import APIRouter, Depends, Request
from sqlalchemy.orm import Session
from typing import List, Optional, Union

from ...core.database import get_db
from ...api.deps import get_current_patient, get_patient_user, get_payment_gateway
from ...models.patient import Patient
from ...models.user import User
from ...schemas.appointment import AppointmentResponse, BookingRequest, CardBookingResponse
from ...schemas.common import Envelope, success
from ...schemas.patient import EMRResponse
from ...services.booking_service import BookingService
from ...services.patient_service import PatientService
from ...services.payments import PaymentGateway

router = APIRouter(prefix="/appointments", tags=["Appointments"])

@router.post("", response_model=Envelope[Union[CardBookingResponse, AppointmentResponse]])
async def schedule_appointment(
    booking: BookingRequest,
    request: Request,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_patient_user),
    gateway: Optional[PaymentGateway] = Depends(get_payment_gateway)
):
    """Book a slot with a doctor, paying cash at the clinic or by card."""
    booking_service = BookingService(db, gateway)
    appointment, session = await booking_service.schedule_appointment(
        current_user,
        doctor_id=booking.doctor_id,
        day=booking.date,
        time=booking.time,
        payment_method=booking.payment_method,
        base_url=str(request.base_url),
    )
    
    data = AppointmentResponse.model_validate(appointment)
    if session is None:
        return success(data)
    return success(CardBookingResponse(session=session.url, booking=data))

@router.get("", response_model=Envelope[List[AppointmentResponse]])
async def list_my_appointments(
    db: Session = Depends(get_db),
    patient: Patient = Depends(get_current_patient)
):
    """List the current patient's appointments."""
    patient_service = PatientService(db, patient)
    return success(patient_service.list_appointments())

@router.get("/{appointment_id}/emr", response_model=Envelope[EMRResponse])
async def get_appointment_emr(
    appointment_id: int,
    db: Session = Depends(get_db),
    patient: Patient = Depends(get_current_patient)
):
    """Get the EMR written for one of the current patient's appointments."""
    patient_service = PatientService(db, patient)
    return success(patient_service.get_appointment_emr(appointment_id))
