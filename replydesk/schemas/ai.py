from enum import Enum
from typing import Dict, Generic, List, Literal, Optional, TypeVar

from pydantic import BaseModel, Field

from replydesk.schemas.base import CamelModel


class Priority(str, Enum):
    low = "low"
    normal = "normal"
    high = "high"
    urgent = "urgent"


class InquiryCategory(str, Enum):
    project = "project"
    pricing = "pricing"
    availability = "availability"
    support = "support"
    general = "general"


class Classification(CamelModel):
    category: InquiryCategory = InquiryCategory.general
    priority: Priority = Priority.normal
    intent: str = "General inquiry"
    confidence: float = 0.0
    required_variables: List[str] = []
    suggested_template_id: Optional[str] = None


class ResponseGeneration(CamelModel):
    content: str
    confidence: float = 0.0
    variables: Dict[str, str] = {}


class SentimentAnalysis(CamelModel):
    rating: int = 3
    confidence: float = 0.0


class TemplateImprovement(CamelModel):
    improved_content: str
    improvements: List[str] = []
    confidence: float = 0.0


class FeedbackRecord(CamelModel):
    """One historical use of a template, as fed to the improvement prompt."""
    success: bool = False
    customer_feedback: Optional[int] = None
    response_time: int = 0


# Request bodies for the /api/ai endpoints

class ClassifyRequest(CamelModel):
    subject: Optional[str] = None
    content: str


class GenerateResponseRequest(CamelModel):
    inquiry_content: str
    template_id: str
    variables: Dict[str, str] = Field(default_factory=dict)


class SentimentRequest(CamelModel):
    text: str


T = TypeVar("T")


class AIResult(BaseModel, Generic[T]):
    """Outcome of one gateway call.

    ``payload`` is always usable. ``status`` tells a real answer from the
    documented fallback, and ``cause`` says why the fallback was used.
    """
    status: Literal["ok", "degraded"]
    payload: T
    cause: Optional[str] = None

    @property
    def degraded(self) -> bool:
        return self.status == "degraded"
