from typing import List

from fastapi import APIRouter, Depends, status
from fastapi import Response as HTTPResponse

from replydesk.deps import get_demo_owner, get_storage
from replydesk.exceptions import NotFoundException
from replydesk.schemas.template import Template, TemplateCreate, TemplateIn, TemplateUpdate
from replydesk.schemas.user import User
from replydesk.storage import StorageBackend

router = APIRouter(prefix="/api/templates", tags=["Templates"])


@router.get("", response_model=List[Template])
def list_templates(
    storage: StorageBackend = Depends(get_storage),
    owner: User = Depends(get_demo_owner),
):
    return storage.get_templates(owner.id)


@router.post("", response_model=Template, status_code=status.HTTP_201_CREATED)
def create_template(
    payload: TemplateIn,
    storage: StorageBackend = Depends(get_storage),
    owner: User = Depends(get_demo_owner),
):
    return storage.create_template(TemplateCreate(user_id=owner.id, **payload.model_dump()))


@router.put("/{template_id}", response_model=Template)
def update_template(
    template_id: str,
    payload: TemplateUpdate,
    storage: StorageBackend = Depends(get_storage),
):
    template = storage.update_template(template_id, payload.model_dump(exclude_unset=True))
    if not template:
        raise NotFoundException("Template not found")
    return template


@router.delete("/{template_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_template(template_id: str, storage: StorageBackend = Depends(get_storage)):
    if not storage.delete_template(template_id):
        raise NotFoundException("Template not found")
    return HTTPResponse(status_code=status.HTTP_204_NO_CONTENT)
