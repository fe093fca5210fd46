import uuid
from datetime import date, timedelta
from typing import List, Set

from sprintpilot.domain.models import MasterHoliday, SprintSettings
from sprintpilot.engine.errors import DuplicateHolidayError, HolidayNotFoundError
from sprintpilot.integrations.holidays.service import HolidayApiClient, RemoteHoliday
from sprintpilot.planning.capacity import sprint_exclusion_set
from sprintpilot.platform.logging import get_logger
from sprintpilot.storage.repositories.sprint_repository import SprintRepository

logger = get_logger(__name__)


class HolidayService:
    """
    Master holiday list and holiday exclusion sets.

    The master list lives in the repository; the holiday API widens the
    exclusion set when it is reachable.
    """

    def __init__(self, repository: SprintRepository, client: HolidayApiClient):
        self.repository = repository
        self.client = client

    def list_master_holidays(self) -> List[MasterHoliday]:
        return self.repository.get_master_holidays() or []

    def add_master_holiday(self, name: str, holiday_date: date) -> MasterHoliday:
        with self.repository.locked():
            holidays = self.list_master_holidays()
            if any(h.date == holiday_date for h in holidays):
                raise DuplicateHolidayError(holiday_date.isoformat())

            holiday = MasterHoliday(id=f"mh-{uuid.uuid4().hex[:8]}", name=name, date=holiday_date)
            holidays.append(holiday)
            holidays.sort(key=lambda h: h.date)
            self.repository.save_master_holidays(holidays)

        logger.info("Added master holiday", holiday_id=holiday.id, date=holiday_date.isoformat())
        return holiday

    def remove_master_holiday(self, holiday_id: str) -> None:
        with self.repository.locked():
            holidays = self.list_master_holidays()
            remaining = [h for h in holidays if h.id != holiday_id]
            if len(remaining) == len(holidays):
                raise HolidayNotFoundError(holiday_id)
            self.repository.save_master_holidays(remaining)
        logger.info("Removed master holiday", holiday_id=holiday_id)

    def master_holidays_between(self, start: date, end: date) -> List[MasterHoliday]:
        return [h for h in self.list_master_holidays() if start <= h.date <= end]

    async def exclusion_dates(self, settings: SprintSettings) -> Set[date]:
        """
        Holidays to skip when deriving a sprint's end date.

        Remote holidays are looked up over 2 x duration calendar days from
        the start; a failed lookup contributes nothing.
        """
        excluded = sprint_exclusion_set(settings, self.list_master_holidays())

        lookahead_end = settings.start_date + timedelta(days=settings.duration * 2)
        remote = await self.client.get_holiday_dates_for_sprint(settings.start_date, lookahead_end)
        if remote:
            logger.debug("Merged remote holidays", count=len(remote))
        excluded.update(remote)
        return excluded

    async def lookup_remote_holidays(self, start: date, end: date) -> List[RemoteHoliday]:
        """Named holidays from the holiday API; empty when it is unreachable."""
        return await self.client.get_holidays_by_date_range(start, end)
