import logging

from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ..core.exceptions import AuthorizationError, ConflictError, NotFoundError
from ..models.appointment import Appointment, AppointmentStatus
from ..models.doctor import Doctor
from ..models.patient import Patient
from ..models.rating import Rating
from ..models.user import User

logger = logging.getLogger(__name__)

class RatingService:
    def __init__(self, db: Session, user: User, patient: Patient):
        self.db = db
        self.user = user
        self.patient = patient
    
    def rate_doctor(self, doctor_id: int, value: int) -> Rating:
        """Rate a doctor the patient has completed an appointment with."""
        doctor = self.db.query(Doctor).filter(Doctor.id == doctor_id).first()
        if not doctor:
            raise NotFoundError("No doctor found with that ID")
        
        completed = self.db.query(Appointment).filter(
            Appointment.patient_id == self.patient.id,
            Appointment.doctor_id == doctor.id,
            Appointment.status == AppointmentStatus.COMPLETED,
        ).first()
        if not completed:
            raise AuthorizationError("You can't rate this doctor!")
        
        rating = Rating(user_id=self.user.id, doctor_id=doctor.id, rating=value)
        self.db.add(rating)
        try:
            self.db.flush()
        except IntegrityError:
            self.db.rollback()
            raise ConflictError("You have already rated this doctor!")
        
        self._refresh_doctor_stats(doctor)
        self.db.commit()
        self.db.refresh(rating)
        
        logger.info(f"User {self.user.id} rated doctor {doctor.id}: {value}")
        return rating
    
    def review_doctor(self, doctor_id: int, review: str) -> Rating:
        rating = self.db.query(Rating).filter(
            Rating.user_id == self.user.id,
            Rating.doctor_id == doctor_id,
        ).first()
        if not rating:
            raise AuthorizationError("You can't review this doctor, please rate the doctor first!")
        if rating.review:
            raise ConflictError("You've already reviewed this doctor!")
        
        rating.review = review
        self.db.commit()
        self.db.refresh(rating)
        return rating
    
    def edit_review(self, rating_id: int, review: str) -> Rating:
        rating = self._owned_rating(rating_id, "You can only edit your own reviews!")
        rating.review = review
        self.db.commit()
        self.db.refresh(rating)
        return rating
    
    def delete_review(self, rating_id: int) -> Rating:
        """Clear the review text; the rating itself stays."""
        rating = self._owned_rating(rating_id, "You can only delete your own reviews!")
        rating.review = None
        self.db.commit()
        self.db.refresh(rating)
        return rating
    
    def _owned_rating(self, rating_id: int, denied_message: str) -> Rating:
        rating = self.db.query(Rating).filter(Rating.id == rating_id).first()
        if not rating:
            raise NotFoundError("No review with that ID!")
        if rating.user_id != self.user.id:
            raise AuthorizationError(denied_message)
        return rating
    
    def _refresh_doctor_stats(self, doctor: Doctor):
        average, count = self.db.query(
            func.avg(Rating.rating), func.count(Rating.id)
        ).filter(Rating.doctor_id == doctor.id).one()
        
        doctor.rate = round(float(average or 0), 2)
        doctor.rating_num = count
