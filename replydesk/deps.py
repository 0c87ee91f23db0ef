"""Request-scoped dependencies shared by the routers."""
from fastapi import Depends, Request

from replydesk.core.settings import settings
from replydesk.exceptions import NotFoundException
from replydesk.schemas.user import User
from replydesk.services.ai_gateway import AIGateway
from replydesk.storage import StorageBackend


def get_storage(request: Request) -> StorageBackend:
    return request.app.state.storage


def get_ai_gateway(request: Request) -> AIGateway:
    return request.app.state.ai_gateway


def get_demo_owner(storage: StorageBackend = Depends(get_storage)) -> User:
    """Every request acts on behalf of the demo account."""
    user = storage.get_user_by_username(settings.demo_username)
    if not user:
        raise NotFoundException("User not found")
    return user
