from fastapi import APIRouter, Depends

from ...api.deps import get_current_user, get_diagnosis_service
from ...models.user import User
from ...schemas.common import Envelope, success
from ...schemas.diagnosis import DiagnosisRequest
from ...services.diagnosis import DiagnosisService

router = APIRouter(prefix="/diagnosis", tags=["Diagnosis"])

@router.post("", response_model=Envelope[str])
async def diagnose_symptoms(
    diagnosis_request: DiagnosisRequest,
    current_user: User = Depends(get_current_user),
    diagnosis_service: DiagnosisService = Depends(get_diagnosis_service)
):
    """Ask the language model what the described symptoms may indicate."""
    return success(await diagnosis_service.diagnose(diagnosis_request.symptoms))
