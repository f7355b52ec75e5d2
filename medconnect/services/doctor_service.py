from typing import List, Optional

from sqlalchemy.orm import Session, Query, selectinload

from ..core.config import settings
from ..core.exceptions import NotFoundError, ValidationError
from ..models.doctor import Doctor
from ..models.rating import Rating
from ..models.user import User
from ..schemas.doctor import DoctorDetail, DoctorProfile, DoctorSummary
from ..schemas.rating import RatingResponse
from .geo import bounding_box, haversine_km, parse_coordinates

def _like_pattern(term: str) -> str:
    escaped = term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return f"%{escaped}%"

class DoctorService:
    def __init__(self, db: Session):
        self.db = db
        self.max_distance_km = settings.SEARCH_MAX_DISTANCE_KM

    def search_by_speciality(self, speciality: str, coordinates: str) -> List[DoctorSummary]:
        """Doctors of exactly ``speciality`` within range of ``"lat,lng"``, nearest first."""
        if not speciality or not speciality.strip():
            raise ValidationError("Please provide a speciality!")
        latitude, longitude = parse_coordinates(coordinates)

        query = self.db.query(Doctor).filter(Doctor.speciality == speciality.strip())
        doctors = self._nearby(query, latitude, longitude)
        if not doctors:
            raise NotFoundError("No doctors found!")
        return doctors

    def search(
        self,
        user: User,
        name: Optional[str] = None,
        speciality: Optional[str] = None,
    ) -> List[DoctorSummary]:
        """Case-insensitive partial match on name and/or speciality around the user."""
        name = (name or "").strip()
        speciality = (speciality or "").strip()
        if not name and not speciality:
            raise ValidationError("You should provide a name or a speciality!")
        if not user.has_location:
            raise ValidationError("Please set your location before searching for doctors!")

        query = self.db.query(Doctor)
        if name:
            query = query.filter(Doctor.name.ilike(_like_pattern(name), escape="\\"))
        if speciality:
            query = query.filter(Doctor.speciality.ilike(_like_pattern(speciality), escape="\\"))

        doctors = self._nearby(query, user.latitude, user.longitude)
        if not doctors:
            raise NotFoundError("No doctors found!")
        return doctors

    def get_by_id(self, doctor_id: int) -> DoctorProfile:
        doctor = self.db.query(Doctor).filter(Doctor.id == doctor_id).first()
        if not doctor:
            raise NotFoundError("No doctor found with that ID")

        ratings = self.db.query(Rating).filter(
            Rating.doctor_id == doctor.id
        ).order_by(Rating.created_at.desc(), Rating.id.desc()).all()

        return DoctorProfile(
            doctor=DoctorDetail.from_doctor(doctor),
            ratings=[RatingResponse.model_validate(rating) for rating in ratings],
        )

    def get_by_user_id(self, user_id: int) -> DoctorDetail:
        doctor = self.db.query(Doctor).filter(Doctor.user_id == user_id).first()
        if not doctor:
            raise NotFoundError("No doctor found for that user ID")
        return DoctorDetail.from_doctor(doctor)

    def _nearby(self, query: Query, latitude: float, longitude: float) -> List[DoctorSummary]:
        """Apply the distance bound to ``query`` and project to summaries."""
        min_lat, max_lat, min_lng, max_lng = bounding_box(latitude, longitude, self.max_distance_km)
        query = query.filter(Doctor.latitude.between(min_lat, max_lat))
        if min_lng is not None:
            query = query.filter(Doctor.longitude.between(min_lng, max_lng))

        results = []
        for doctor in query.options(selectinload(Doctor.available_times)).all():
            distance = haversine_km(latitude, longitude, doctor.latitude, doctor.longitude)
            if distance > self.max_distance_km:
                continue
            results.append(DoctorSummary(
                id=doctor.id,
                name=doctor.name,
                speciality=doctor.speciality,
                available_times=doctor.schedule(),
                distance=round(distance, 2),
                rate=doctor.rate,
                rating_num=doctor.rating_num,
            ))

        results.sort(key=lambda summary: summary.distance)
        return results
