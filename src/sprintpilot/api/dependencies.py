from typing import Annotated, Optional

from fastapi import Depends

from sprintpilot.ai.content_generator import ContentGenerator
from sprintpilot.ai.llm import OpenAIProvider
from sprintpilot.engine.holiday_service import HolidayService
from sprintpilot.engine.sprint_service import SprintService
from sprintpilot.integrations.holidays.service import HolidayApiClient
from sprintpilot.platform.config import settings
from sprintpilot.platform.logging import get_logger
from sprintpilot.storage.base import KeyValueStore
from sprintpilot.storage.repositories.sprint_repository import SprintRepository
from sprintpilot.storage.sql_store import SqlKeyValueStore

logger = get_logger(__name__)

# Singletons
_store: Optional[KeyValueStore] = None
_holiday_client: Optional[HolidayApiClient] = None
_content_generator: Optional[ContentGenerator] = None


def get_store() -> KeyValueStore:
    global _store
    if not _store:
        _store = SqlKeyValueStore(url=settings.DATABASE_URL, echo=settings.DATABASE_ECHO)
    return _store


def get_holiday_client() -> HolidayApiClient:
    global _holiday_client
    if not _holiday_client:
        _holiday_client = HolidayApiClient()
    return _holiday_client


def get_content_generator() -> ContentGenerator:
    global _content_generator
    if not _content_generator:
        provider = OpenAIProvider()
        if not provider.configured:
            logger.warning("OPENAI_API_KEY is not set, AI features are disabled")
        _content_generator = ContentGenerator(provider if provider.configured else None)
    return _content_generator


def get_repository(
    store: Annotated[KeyValueStore, Depends(get_store)],
) -> SprintRepository:
    return SprintRepository(store)


def get_holiday_service(
    repository: Annotated[SprintRepository, Depends(get_repository)],
    client: Annotated[HolidayApiClient, Depends(get_holiday_client)],
) -> HolidayService:
    return HolidayService(repository, client)


def get_sprint_service(
    repository: Annotated[SprintRepository, Depends(get_repository)],
    holiday_service: Annotated[HolidayService, Depends(get_holiday_service)],
) -> SprintService:
    return SprintService(repository, holiday_service)


async def init_resources() -> None:
    """Initialize the document store."""
    store = get_store()
    store.connect()


async def close_resources() -> None:
    """Close all resources."""
    global _store, _holiday_client, _content_generator

    if _store:
        _store.close()
        _store = None

    _holiday_client = None
    _content_generator = None
