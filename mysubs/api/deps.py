"""
FastAPI dependencies (repository, request deadline)
"""
import logging

from fastapi import Request

from mysubs.config import STORAGE_MEMORY, STORAGE_POSTGRES, Settings
from mysubs.domain.repository import SubscriptionRepository
from mysubs.infrastructure.repositories.memory import InMemorySubscriptionRepository
from mysubs.infrastructure.repositories.postgres import SqlSubscriptionRepository

logger = logging.getLogger(__name__)


def build_repository(settings: Settings) -> SubscriptionRepository:
    """
    Create the repository selected by STORAGE_BACKEND

    Raises:
        ValueError: unknown backend name
    """
    backend = settings.STORAGE_BACKEND.lower()
    if backend == STORAGE_MEMORY:
        logger.info("using in-memory storage")
        return InMemorySubscriptionRepository()
    if backend == STORAGE_POSTGRES:
        return SqlSubscriptionRepository.from_settings(settings)
    raise ValueError(f"Unknown STORAGE_BACKEND: {settings.STORAGE_BACKEND!r}")


def get_repository(request: Request) -> SubscriptionRepository:
    """
    Repository attached to the app by create_app

    Usage:
        @router.get("/")
        async def handler(repo: SubscriptionRepository = Depends(get_repository)):
            ...
    """
    return request.app.state.repository


def get_request_timeout(request: Request) -> float:
    return request.app.state.settings.REQUEST_TIMEOUT_SECONDS
