from pydantic import BaseModel
from typing import Optional
from datetime import date as date_type, datetime

from ..models.appointment import AppointmentStatus, PaymentMethod

class BookingRequest(BaseModel):
    # Presence is checked by the booking workflow so the error is uniform
    doctor_id: Optional[int] = None
    date: Optional[str] = None
    time: Optional[str] = None
    payment_method: Optional[str] = None

class DoctorRef(BaseModel):
    id: int
    name: str

    class Config:
        from_attributes = True

class AppointmentResponse(BaseModel):
    id: int
    patient_id: int
    doctor_id: int
    date: date_type
    time: str
    payment_method: PaymentMethod
    payment_session_id: Optional[str] = None
    status: AppointmentStatus
    doctor: Optional[DoctorRef] = None
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True

class CardBookingResponse(BaseModel):
    session: str  # checkout redirect URL
    booking: AppointmentResponse
