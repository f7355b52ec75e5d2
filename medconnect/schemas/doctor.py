from pydantic import BaseModel
from typing import Dict, List, Optional

from .rating import RatingResponse

class DoctorSummary(BaseModel):
    """Projection returned by the search endpoints."""
    id: int
    name: str
    speciality: str
    available_times: Dict[str, List[str]]
    distance: Optional[float] = None  # km from the search anchor
    rate: float
    rating_num: int

class DoctorDetail(BaseModel):
    id: int
    user_id: int
    name: str
    speciality: str
    fees: int
    longitude: float
    latitude: float
    available_times: Dict[str, List[str]]
    rate: float
    rating_num: int

    @classmethod
    def from_doctor(cls, doctor) -> "DoctorDetail":
        return cls(
            id=doctor.id,
            user_id=doctor.user_id,
            name=doctor.name,
            speciality=doctor.speciality,
            fees=doctor.fees,
            longitude=doctor.longitude,
            latitude=doctor.latitude,
            available_times=doctor.schedule(),
            rate=doctor.rate,
            rating_num=doctor.rating_num,
        )

class DoctorProfile(BaseModel):
    doctor: DoctorDetail
    ratings: List[RatingResponse]
