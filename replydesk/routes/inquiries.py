"""Inquiry intake: store every inquiry, classify it and auto-reply when a template matches."""
import logging
from typing import List

from fastapi import APIRouter, Depends, status

from replydesk.deps import get_ai_gateway, get_demo_owner, get_storage
from replydesk.exceptions import NotFoundException
from replydesk.schemas.inquiry import Inquiry, InquiryCreate, InquiryIn
from replydesk.schemas.response import Response, ResponseCreate
from replydesk.schemas.user import User
from replydesk.services.ai_gateway import AIGateway
from replydesk.storage import StorageBackend

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/inquiries", tags=["Inquiries"])


@router.get("", response_model=List[Inquiry])
def list_inquiries(
    storage: StorageBackend = Depends(get_storage),
    owner: User = Depends(get_demo_owner),
):
    return storage.get_inquiries(owner.id)


@router.post("", response_model=Inquiry, status_code=status.HTTP_201_CREATED)
def create_inquiry(
    payload: InquiryIn,
    storage: StorageBackend = Depends(get_storage),
    gateway: AIGateway = Depends(get_ai_gateway),
    owner: User = Depends(get_demo_owner),
):
    """Classify and store an inquiry.

    The classifier decides category and priority. When it names one of the
    owner's templates, a reply is generated and stored as an automated
    response and the template's usage count goes up by one. A degraded AI
    call never blocks the inquiry from being stored.
    """
    templates = storage.get_templates(owner.id)
    classification = gateway.classify_inquiry(payload.subject, payload.content, templates).payload

    inquiry = storage.create_inquiry(InquiryCreate(
        **payload.model_dump(),
        user_id=owner.id,
        category=classification.category.value,
        priority=classification.priority,
        ai_classification=classification,
    ))
    logger.info(
        f"[intake] inquiry={inquiry.id} category={inquiry.category} "
        f"priority={inquiry.priority.value} confidence={classification.confidence:.2f}"
    )

    template_id = classification.suggested_template_id
    template = storage.get_template(template_id) if template_id else None
    if template:
        generated = gateway.generate_response(payload.content, template.content, {}).payload
        response = storage.create_response(ResponseCreate(
            inquiry_id=inquiry.id,
            template_id=template.id,
            content=generated.content,
            is_automated=True,
            was_modified=False,
        ))
        storage.increment_template_usage(template.id)
        logger.info(f"[intake] auto-response={response.id} template={template.id}")
    elif template_id:
        logger.info(f"[intake] suggested template {template_id} not found, no auto-response")

    return inquiry


@router.get("/{inquiry_id}/responses", response_model=List[Response])
def list_inquiry_responses(inquiry_id: str, storage: StorageBackend = Depends(get_storage)):
    if not storage.get_inquiry(inquiry_id):
        raise NotFoundException("Inquiry not found")
    return storage.get_responses(inquiry_id)
