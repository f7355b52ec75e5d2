import logging
import re
from datetime import date, datetime
from typing import Optional, Tuple

from sqlalchemy.orm import Session

from ..core.exceptions import ConflictError, NotFoundError, UpstreamError, ValidationError
from ..core.upstream import call_upstream
from ..models.appointment import Appointment, AppointmentStatus, PaymentMethod
from ..models.doctor import Doctor
from ..models.patient import Patient
from ..models.user import User
from .payments import CheckoutSession, PaymentGateway

logger = logging.getLogger(__name__)

TIME_PATTERN = re.compile(r"^([01]\d|2[0-3]):[0-5]\d$")

def parse_slot(day: str, time: str) -> Tuple[date, str]:
    """Validate a ``YYYY-MM-DD`` date and ``HH:MM`` time."""
    try:
        parsed_day = datetime.strptime(day, "%Y-%m-%d").date()
    except ValueError:
        raise ValidationError("Please provide the date as YYYY-MM-DD!")
    if not TIME_PATTERN.match(time):
        raise ValidationError("Please provide the time as HH:MM!")
    return parsed_day, time

class BookingService:
    def __init__(self, db: Session, gateway: Optional[PaymentGateway] = None):
        self.db = db
        self.gateway = gateway

    async def schedule_appointment(
        self,
        user: User,
        doctor_id: Optional[int],
        day: Optional[str],
        time: Optional[str],
        payment_method: Optional[str],
        base_url: str = "",
    ) -> Tuple[Appointment, Optional[CheckoutSession]]:
        """
        Book a slot with a doctor for the acting patient.

        Both parties are checked before anything is written. Cash bookings are
        stored in a single commit; card bookings open a checkout session first
        and are stored once the gateway returns it. Returns the appointment and,
        for card bookings, the checkout session.
        """
        if not doctor_id or not day or not time or not payment_method:
            raise ValidationError("Please provide doctor ID, date, time and payment method!")

        slot_day, slot_time = parse_slot(day, time)
        try:
            method = PaymentMethod(payment_method.lower())
        except ValueError:
            raise ValidationError("Payment method must be 'cash' or 'card'!")

        doctor, patient = self._lock_parties(doctor_id, Patient.user_id == user.id)
        self._check_slot(doctor, patient, slot_day, slot_time)

        if method is PaymentMethod.CASH:
            appointment = self._create_appointment(
                patient_id=patient.id,
                doctor_id=doctor.id,
                day=slot_day,
                time=slot_time,
                payment_method=PaymentMethod.CASH,
            )
            return appointment, None

        if self.gateway is None:
            self.db.rollback()
            raise UpstreamError("Card payments are not configured")

        # No row lock or open transaction may be held while waiting on the
        # gateway; the loaded rows stay readable once detached.
        self.db.expunge(doctor)
        self.db.expunge(patient)
        self.db.rollback()

        session = await call_upstream(
            self.gateway.create_checkout_session(
                doctor=doctor,
                patient=patient,
                day=slot_day,
                time=slot_time,
                base_url=base_url,
            ),
            "Checkout session",
        )
        appointment = self.materialize_booking(session, slot_day, slot_time)
        return appointment, session

    def materialize_booking(self, session: CheckoutSession, day: date, time: str) -> Appointment:
        """
        Create the card-paid appointment described by a checkout session.

        The slot is locked and checked again, since it was released while
        the checkout session was being created.
        """
        try:
            patient_id = int(session.metadata["patient_id"])
            doctor_id = int(session.metadata["doctor_id"])
        except (KeyError, ValueError):
            logger.error(f"Checkout session {session.id} is missing booking metadata")
            raise UpstreamError()

        doctor, patient = self._lock_parties(doctor_id, Patient.id == patient_id)
        try:
            self._check_slot(doctor, patient, day, time)
        except ConflictError:
            logger.error(f"Slot {day.isoformat()} {time} was taken during checkout session {session.id}")
            raise

        return self._create_appointment(
            patient_id=patient_id,
            doctor_id=doctor_id,
            day=day,
            time=time,
            payment_method=PaymentMethod.CARD,
            payment_session_id=session.id,
        )

    def _create_appointment(
        self,
        patient_id: int,
        doctor_id: int,
        day: date,
        time: str,
        payment_method: PaymentMethod,
        payment_session_id: Optional[str] = None,
    ) -> Appointment:
        # Patient and doctor lists are derived from these foreign keys,
        # so this single commit both creates and links the appointment.
        appointment = Appointment(
            patient_id=patient_id,
            doctor_id=doctor_id,
            date=day,
            time=time,
            payment_method=payment_method,
            payment_session_id=payment_session_id,
            status=AppointmentStatus.PENDING,
        )
        self.db.add(appointment)
        self.db.commit()
        self.db.refresh(appointment)

        logger.info(
            f"Booked appointment {appointment.id} - doctor {doctor_id} - "
            f"patient {patient_id} - {day.isoformat()} {time} ({payment_method.value})"
        )
        return appointment

    def _lock_parties(self, doctor_id: int, patient_filter) -> Tuple[Doctor, Patient]:
        """Load doctor and patient with row locks (PostgreSQL) for the rest of the transaction."""
        doctor = self.db.query(Doctor).filter(
            Doctor.id == doctor_id
        ).with_for_update().first()
        if not doctor:
            self.db.rollback()
            raise NotFoundError("No doctor found with that ID")

        patient = self.db.query(Patient).filter(
            patient_filter
        ).with_for_update().first()
        if not patient:
            self.db.rollback()
            raise NotFoundError("No patient profile found for this user")

        return doctor, patient

    def _check_slot(self, doctor: Doctor, patient: Patient, day: date, time: str):
        if not patient.is_available(day, time):
            self.db.rollback()
            raise ConflictError("You already have an appointment at this date and time!")

        if not doctor.is_available(day, time):
            self.db.rollback()
            raise ConflictError("The doctor is not available at this date and time!")
