from pydantic import BaseModel, Field
from typing import Optional
from datetime import datetime

class RatingCreate(BaseModel):
    doctor_id: int
    rating: int = Field(..., ge=1, le=5)

class ReviewCreate(BaseModel):
    doctor_id: int
    review: str = Field(..., min_length=1)

class ReviewUpdate(BaseModel):
    review: str = Field(..., min_length=1)

class RatingResponse(BaseModel):
    id: int
    user_id: int
    doctor_id: int
    rating: int
    review: Optional[str] = None
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True
