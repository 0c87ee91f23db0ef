from typing import List

from fastapi import APIRouter, Depends, status

from replydesk.deps import get_demo_owner, get_storage
from replydesk.exceptions import NotFoundException
from replydesk.schemas.response import Response, ResponseCreate, ResponseFeedback
from replydesk.schemas.user import User
from replydesk.storage import StorageBackend

router = APIRouter(prefix="/api/responses", tags=["Responses"])


@router.get("", response_model=List[Response])
def list_responses(
    storage: StorageBackend = Depends(get_storage),
    owner: User = Depends(get_demo_owner),
):
    return storage.get_responses_by_user(owner.id)


@router.post("", response_model=Response, status_code=status.HTTP_201_CREATED)
def create_response(payload: ResponseCreate, storage: StorageBackend = Depends(get_storage)):
    return storage.create_response(payload)


@router.put("/{response_id}/feedback", response_model=Response)
def record_feedback(
    response_id: str,
    payload: ResponseFeedback,
    storage: StorageBackend = Depends(get_storage),
):
    # Only fields present in the body are applied
    response = storage.update_response(response_id, payload.model_dump(exclude_unset=True))
    if not response:
        raise NotFoundException("Response not found")
    return response
