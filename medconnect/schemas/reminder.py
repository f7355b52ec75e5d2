from pydantic import BaseModel, Field
from typing import Optional
from datetime import datetime

class ReminderCreate(BaseModel):
    name: str = Field(..., min_length=1)
    type: str = Field(..., min_length=1)
    frequency: int = Field(..., gt=0, description="Hours between doses")

class ReminderUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1)
    type: Optional[str] = Field(None, min_length=1)
    frequency: Optional[int] = Field(None, gt=0)

class ReminderResponse(BaseModel):
    id: int
    name: str
    type: str
    frequency: int
    next_reminder: datetime
    active: bool

    class Config:
        from_attributes = True
