import logging
from typing import Optional

from openai import AsyncOpenAI, OpenAIError

from ..core.exceptions import UpstreamError, ValidationError
from ..core.upstream import call_upstream

logger = logging.getLogger(__name__)

PROMPT_TEMPLATE = (
    "Based on my symptoms, can you help diagnose what medical condition "
    "I might have? My symptoms include: {symptoms}."
)

class DiagnosisService:
    """Passes free-text symptoms to a text-completion model and returns its raw answer."""
    
    def __init__(self, client: AsyncOpenAI, model: str):
        self.client = client
        self.model = model
    
    async def diagnose(self, symptoms: Optional[str]) -> str:
        if not symptoms or not symptoms.strip():
            raise ValidationError("Please provide your symptoms!")
        
        prompt = PROMPT_TEMPLATE.format(symptoms=symptoms.strip())
        try:
            response = await call_upstream(
                self.client.chat.completions.create(
                    model=self.model,
                    messages=[{"role": "user", "content": prompt}],
                    max_tokens=2048,
                    temperature=0,
                ),
                "Diagnosis completion",
            )
        except OpenAIError as exc:
            logger.error(f"Diagnosis completion failed: {str(exc)}")
            raise UpstreamError()
        
        return response.choices[0].message.content or ""
