from datetime import date
from typing import Annotated, List

from fastapi import APIRouter, Depends, HTTPException, status

from sprintpilot.api import schemas
from sprintpilot.api.dependencies import get_holiday_service
from sprintpilot.domain.models import MasterHoliday
from sprintpilot.engine.errors import DuplicateHolidayError, NotFoundError
from sprintpilot.engine.holiday_service import HolidayService
from sprintpilot.integrations.holidays.service import RemoteHoliday

router = APIRouter()


@router.get("/", response_model=List[MasterHoliday])
def list_holidays(
    service: Annotated[HolidayService, Depends(get_holiday_service)],
):
    """Master holidays, sorted by date."""
    return service.list_master_holidays()


@router.post("/", response_model=MasterHoliday, status_code=status.HTTP_201_CREATED)
def add_holiday(
    holiday: schemas.HolidayCreate,
    service: Annotated[HolidayService, Depends(get_holiday_service)],
):
    try:
        return service.add_master_holiday(holiday.name, holiday.date)
    except DuplicateHolidayError as e:
        raise HTTPException(status_code=409, detail=str(e))


@router.delete("/{holiday_id}", status_code=status.HTTP_204_NO_CONTENT)
def remove_holiday(
    holiday_id: str,
    service: Annotated[HolidayService, Depends(get_holiday_service)],
):
    try:
        service.remove_master_holiday(holiday_id)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    return None


@router.get("/remote", response_model=List[RemoteHoliday])
async def lookup_remote_holidays(
    start_date: date,
    end_date: date,
    service: Annotated[HolidayService, Depends(get_holiday_service)],
):
    """Holidays known to the holiday API between two dates."""
    if end_date < start_date:
        raise HTTPException(status_code=400, detail="end_date must not be before start_date")
    return await service.lookup_remote_holidays(start_date, end_date)
