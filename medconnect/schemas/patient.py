from pydantic import BaseModel, Field
from typing import Optional
from datetime import datetime

class BMIRequest(BaseModel):
    weight: float = Field(..., gt=0, description="Weight in kg")
    height: float = Field(..., gt=0, description="Height in cm")

class PatientResponse(BaseModel):
    id: int
    user_id: int
    name: str
    weight: Optional[float] = None
    height: Optional[float] = None
    bmi: Optional[float] = None

    class Config:
        from_attributes = True

class EMRResponse(BaseModel):
    id: int
    appointment_id: int
    patient_id: int
    diagnosis: Optional[str] = None
    prescription: Optional[str] = None
    notes: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True
