import logging
from typing import List

from fastapi import APIRouter, Depends, status

from replydesk.deps import get_demo_owner, get_storage
from replydesk.exceptions import NotFoundException
from replydesk.schemas.integration import (
    KNOWN_PLATFORMS,
    Integration,
    IntegrationCreate,
    IntegrationIn,
    IntegrationUpdate,
)
from replydesk.schemas.user import User
from replydesk.storage import StorageBackend

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/integrations", tags=["Integrations"])


@router.get("", response_model=List[Integration])
def list_integrations(
    storage: StorageBackend = Depends(get_storage),
    owner: User = Depends(get_demo_owner),
):
    return storage.get_integrations(owner.id)


@router.post("", response_model=Integration, status_code=status.HTTP_201_CREATED)
def create_integration(
    payload: IntegrationIn,
    storage: StorageBackend = Depends(get_storage),
    owner: User = Depends(get_demo_owner),
):
    if payload.platform not in KNOWN_PLATFORMS:
        logger.info(f"[integrations] unrecognised platform '{payload.platform}' stored as-is")
    return storage.create_integration(IntegrationCreate(user_id=owner.id, **payload.model_dump()))


@router.put("/{integration_id}", response_model=Integration)
def update_integration(
    integration_id: str,
    payload: IntegrationUpdate,
    storage: StorageBackend = Depends(get_storage),
):
    integration = storage.update_integration(integration_id, payload.model_dump(exclude_unset=True))
    if not integration:
        raise NotFoundException("Integration not found")
    return integration
