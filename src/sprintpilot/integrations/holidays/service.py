import datetime as dt
import httpx
from datetime import date
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ValidationError

from sprintpilot.platform.config import settings
from sprintpilot.platform.logging import get_logger

logger = get_logger(__name__)


class RemoteHoliday(BaseModel):
    name: str
    date: dt.date


class HolidayApiClient:
    """
    Client for the holiday REST API using httpx.

    Every lookup degrades to an empty list on failure so that end-date and
    capacity calculations can proceed with local holiday data.
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        location: Optional[str] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = (base_url if base_url is not None else settings.HOLIDAY_API_URL).rstrip("/")
        self.timeout = timeout if timeout is not None else settings.HOLIDAY_API_TIMEOUT
        self.location = location if location is not None else settings.HOLIDAY_LOCATION
        self.transport = transport

    def _params(self, start_date: date, end_date: date) -> Dict[str, str]:
        params = {"startDate": start_date.isoformat(), "endDate": end_date.isoformat()}
        if self.location:
            params["location"] = self.location
        return params

    async def _get(self, endpoint: str, params: Dict[str, str]) -> Optional[Any]:
        """GET an endpoint and return its `data` payload, or None on any failure."""
        if not self.base_url:
            logger.warning("Holiday API URL is not configured. Skipping lookup.")
            return None

        async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
            try:
                response = await client.get(f"{self.base_url}/{endpoint}", params=params)
                response.raise_for_status()
                body = response.json()
            except (httpx.HTTPError, ValueError) as e:
                logger.error("Holiday API request failed", endpoint=endpoint, error=str(e))
                return None

        if not isinstance(body, dict) or not body.get("success"):
            error = body.get("error") if isinstance(body, dict) else "malformed response"
            logger.error("Holiday API error", endpoint=endpoint, error=error)
            return None
        return body.get("data")

    async def get_holiday_dates_for_sprint(self, start_date: date, end_date: date) -> List[date]:
        """Holiday dates within [start_date, end_date]."""
        data = await self._get("sprint", self._params(start_date, end_date))
        if not data:
            return []

        dates = []
        for raw in data:
            try:
                dates.append(date.fromisoformat(str(raw)[:10]))
            except ValueError:
                logger.warning("Skipping malformed holiday date", value=raw)
        return dates

    async def get_holidays_by_date_range(self, start_date: date, end_date: date) -> List[RemoteHoliday]:
        """Named holidays within [start_date, end_date]."""
        data = await self._get("range", self._params(start_date, end_date))
        if not data:
            return []

        holidays = []
        for raw in data:
            try:
                holidays.append(RemoteHoliday(
                    name=raw.get("name", "Holiday"),
                    date=raw.get("holidayDate") or raw.get("date"),
                ))
            except (AttributeError, ValidationError):
                logger.warning("Skipping malformed holiday entry", value=raw)
        return holidays
