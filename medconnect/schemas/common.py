from typing import Generic, TypeVar
from pydantic import BaseModel

T = TypeVar("T")

class Envelope(BaseModel, Generic[T]):
    """Success wrapper shared by every endpoint."""
    status: str = "success"
    data: T

def success(data) -> dict:
    return {"status": "success", "data": data}
