import pytest
from datetime import date
from unittest.mock import AsyncMock, MagicMock

from sprintpilot.domain.models import SprintSettings
from sprintpilot.engine.errors import DuplicateHolidayError, HolidayNotFoundError
from sprintpilot.engine.holiday_service import HolidayService
from sprintpilot.integrations.holidays.service import HolidayApiClient
from sprintpilot.storage.memory import InMemoryKeyValueStore
from sprintpilot.storage.repositories.sprint_repository import SprintRepository


@pytest.fixture
def client():
    client = MagicMock(spec=HolidayApiClient)
    client.get_holiday_dates_for_sprint = AsyncMock(return_value=[])
    client.get_holidays_by_date_range = AsyncMock(return_value=[])
    return client


@pytest.fixture
def service(client):
    return HolidayService(SprintRepository(InMemoryKeyValueStore()), client)


def test_master_list_starts_empty(service):
    assert service.list_master_holidays() == []


def test_add_keeps_list_sorted(service):
    service.add_master_holiday("Christmas", date(2024, 12, 25))
    service.add_master_holiday("Independence Day", date(2024, 7, 4))

    holidays = service.list_master_holidays()

    assert [h.name for h in holidays] == ["Independence Day", "Christmas"]
    assert all(h.id.startswith("mh-") for h in holidays)


def test_duplicate_date_rejected(service):
    service.add_master_holiday("Christmas", date(2024, 12, 25))

    with pytest.raises(DuplicateHolidayError):
        service.add_master_holiday("Xmas", date(2024, 12, 25))


def test_remove(service):
    holiday = service.add_master_holiday("Christmas", date(2024, 12, 25))

    service.remove_master_holiday(holiday.id)

    assert service.list_master_holidays() == []
    with pytest.raises(HolidayNotFoundError):
        service.remove_master_holiday(holiday.id)


def test_holidays_in_window(service):
    service.add_master_holiday("Before", date(2024, 6, 28))
    service.add_master_holiday("Inside", date(2024, 7, 4))
    service.add_master_holiday("Last day", date(2024, 7, 12))

    names = [h.name for h in service.master_holidays_between(date(2024, 7, 1), date(2024, 7, 12))]

    assert names == ["Inside", "Last day"]


@pytest.mark.asyncio
async def test_exclusion_dates_merge_all_sources(service, client):
    service.add_master_holiday("Master", date(2024, 7, 8))
    client.get_holiday_dates_for_sprint.return_value = [date(2024, 7, 10)]
    settings = SprintSettings(start_date=date(2024, 7, 1), duration=10, public_holidays=[date(2024, 7, 4)])

    excluded = await service.exclusion_dates(settings)

    assert excluded == {date(2024, 7, 4), date(2024, 7, 8), date(2024, 7, 10)}
    client.get_holiday_dates_for_sprint.assert_awaited_once_with(date(2024, 7, 1), date(2024, 7, 21))
