from pydantic import BaseModel
from typing import Optional

class DiagnosisRequest(BaseModel):
    symptoms: Optional[str] = None
