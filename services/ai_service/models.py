"""
AI service data models for captioning requests and responses.
"""

from dataclasses import dataclass
from typing import Any, Dict
from pydantic import BaseModel, Field


class CaptionInputs(BaseModel):
    """Inputs block of a captioning request"""
    prompt: str
    image: str = Field(description="Bare base64 image payload, no data-URI prefix")


class CaptionRequest(BaseModel):
    """JSON body sent to the captioning endpoint"""
    inputs: CaptionInputs

    @classmethod
    def build(cls, prompt: str, image_b64: str) -> 'CaptionRequest':
        return cls(inputs=CaptionInputs(prompt=prompt, image=image_b64))

    def to_payload(self) -> Dict[str, Any]:
        return self.model_dump()


@dataclass
class CaptionResponse:
    """Response from the captioning endpoint, whatever its status"""
    status_code: int
    data: Any = None  # parsed JSON, None for an empty body
    raw_text: str = ""

    @property
    def ok(self) -> bool:
        return 200 <= self.status_code < 300
