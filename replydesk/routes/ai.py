"""Direct access to the AI operations. Degraded results still return 200."""
from fastapi import APIRouter, Depends

from replydesk.deps import get_ai_gateway, get_demo_owner, get_storage
from replydesk.exceptions import NotFoundException
from replydesk.schemas.ai import (
    Classification,
    ClassifyRequest,
    FeedbackRecord,
    GenerateResponseRequest,
    ResponseGeneration,
    SentimentAnalysis,
    SentimentRequest,
    TemplateImprovement,
)
from replydesk.schemas.user import User
from replydesk.services.ai_gateway import AIGateway
from replydesk.storage import StorageBackend

router = APIRouter(prefix="/api/ai", tags=["AI"])


@router.post("/classify", response_model=Classification)
def classify(
    payload: ClassifyRequest,
    storage: StorageBackend = Depends(get_storage),
    gateway: AIGateway = Depends(get_ai_gateway),
    owner: User = Depends(get_demo_owner),
):
    templates = storage.get_templates(owner.id)
    return gateway.classify_inquiry(payload.subject, payload.content, templates).payload


@router.post("/generate-response", response_model=ResponseGeneration)
def generate_response(
    payload: GenerateResponseRequest,
    storage: StorageBackend = Depends(get_storage),
    gateway: AIGateway = Depends(get_ai_gateway),
):
    template = storage.get_template(payload.template_id)
    if not template:
        raise NotFoundException("Template not found")
    return gateway.generate_response(payload.inquiry_content, template.content, payload.variables).payload


@router.post("/improve-template/{template_id}", response_model=TemplateImprovement)
def improve_template(
    template_id: str,
    storage: StorageBackend = Depends(get_storage),
    gateway: AIGateway = Depends(get_ai_gateway),
):
    template = storage.get_template(template_id)
    if not template:
        raise NotFoundException("Template not found")

    history = [
        FeedbackRecord(success=bool(r.success), customer_feedback=r.customer_feedback or None)
        for r in storage.get_responses_by_user(template.user_id)
        if r.template_id == template_id
    ]
    return gateway.improve_template(template.content, history).payload


@router.post("/sentiment", response_model=SentimentAnalysis)
def analyze_sentiment(payload: SentimentRequest, gateway: AIGateway = Depends(get_ai_gateway)):
    return gateway.analyze_sentiment(payload.text).payload
