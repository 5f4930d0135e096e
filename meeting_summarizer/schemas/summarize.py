from pydantic import BaseModel
from typing import Optional

class SummarizeRequest(BaseModel):
    transcript: Optional[str] = None
    prompt: Optional[str] = None

class SummarizeResponse(BaseModel):
    summary: str

class HealthResponse(BaseModel):
    ok: bool = True
    uptime: float
