"""
FastAPI dependencies: repository, session resolution, access checks
and the per-request menu builder.
"""

import logging
from typing import Optional

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from menucup.core.config import get_settings
from menucup.database import get_db
from menucup.errors import ForbiddenError, UnauthorizedError
from menucup.menu_builder import MenuBuilder
from menucup.models import Restaurant
from menucup.repository import MenuRepository
from menucup.services.storage import BaseStorageService, get_storage_service
from menucup.session import SessionContext, SessionStore, get_session_store

logger = logging.getLogger(__name__)


def extract_token(request: Request) -> Optional[str]:
    """Access token from the session cookie or an Authorization: Bearer header."""
    token = request.cookies.get(get_settings().session_cookie_name)
    if token:
        return token
    authorization = request.headers.get("authorization", "")
    scheme, _, credentials = authorization.partition(" ")
    if scheme.lower() == "bearer" and credentials.strip():
        return credentials.strip()
    return None


async def get_repository(db: AsyncSession = Depends(get_db)) -> MenuRepository:
    return MenuRepository(db)


def get_store() -> SessionStore:
    return get_session_store()


def get_storage() -> BaseStorageService:
    return get_storage_service()


async def get_optional_session(
    request: Request,
    store: SessionStore = Depends(get_store),
) -> Optional[SessionContext]:
    return await store.get(extract_token(request))


async def require_session(
    session: Optional[SessionContext] = Depends(get_optional_session),
) -> SessionContext:
    """401 for JSON routes without a valid session."""
    if session is None:
        raise UnauthorizedError()
    return session


async def ensure_can_manage(
    session: SessionContext,
    repository: MenuRepository,
    restaurant: Restaurant,
) -> None:
    """Owners manage their own restaurants; admins manage all."""
    if not await session.can_manage(repository, restaurant.owner_id):
        logger.info(f"User {session.user_id} denied access to {restaurant.slug}")
        raise ForbiddenError("Access denied")


async def get_menu_builder(
    session: SessionContext = Depends(require_session),
    repository: MenuRepository = Depends(get_repository),
    storage: BaseStorageService = Depends(get_storage),
    store: SessionStore = Depends(get_store),
) -> MenuBuilder:
    """Menu-builder state lives on the session; each request rebinds it."""
    builder = session.builder
    if builder is None:
        builder = MenuBuilder(
            repository=repository,
            storage=storage,
            session=session,
            session_store=store,
        )
        session.builder = builder
    else:
        builder.bind(repository, storage)
    return builder
