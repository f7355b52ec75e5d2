from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ...core.database import get_db
from ...api.deps import get_current_patient
from ...models.patient import Patient
from ...schemas.common import Envelope, success
from ...schemas.rating import RatingCreate, RatingResponse, ReviewCreate, ReviewUpdate
from ...services.rating_service import RatingService

router = APIRouter(prefix="/ratings", tags=["Ratings"])

@router.post("", response_model=Envelope[RatingResponse])
async def rate_doctor(
    rating: RatingCreate,
    db: Session = Depends(get_db),
    patient: Patient = Depends(get_current_patient)
):
    """Rate a doctor after a completed appointment."""
    rating_service = RatingService(db, patient.user, patient)
    return success(rating_service.rate_doctor(rating.doctor_id, rating.rating))

@router.post("/review", response_model=Envelope[RatingResponse])
async def review_doctor(
    review: ReviewCreate,
    db: Session = Depends(get_db),
    patient: Patient = Depends(get_current_patient)
):
    """Attach a review to an existing rating."""
    rating_service = RatingService(db, patient.user, patient)
    return success(rating_service.review_doctor(review.doctor_id, review.review))

@router.patch("/{rating_id}/review", response_model=Envelope[RatingResponse])
async def edit_review(
    rating_id: int,
    review: ReviewUpdate,
    db: Session = Depends(get_db),
    patient: Patient = Depends(get_current_patient)
):
    """Replace the text of one of your reviews."""
    rating_service = RatingService(db, patient.user, patient)
    return success(rating_service.edit_review(rating_id, review.review))

@router.delete("/{rating_id}/review", response_model=Envelope[RatingResponse])
async def delete_review(
    rating_id: int,
    db: Session = Depends(get_db),
    patient: Patient = Depends(get_current_patient)
):
    """Clear one of your reviews, keeping the rating."""
    rating_service = RatingService(db, patient.user, patient)
    return success(rating_service.delete_review(rating_id))
