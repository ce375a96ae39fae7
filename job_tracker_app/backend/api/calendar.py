from datetime import date
from typing import List, Optional
from fastapi import APIRouter, Depends, HTTPException, Query, status

from .. import schemas
from ..config.settings import get_settings
from ..services import deadline_calendar
from ..services.company_service import CompanyDataService
from ..services.errors import StoreError
from ..utils.api_helpers import get_company_service, handle_service_error

router = APIRouter()
settings = get_settings()


def _load(service: CompanyDataService):
    try:
        return service.fetch_companies()
    except StoreError as e:
        raise handle_service_error(e, "Calendar")


@router.get("/deadlines", response_model=List[schemas.DeadlineEvent])
def read_deadlines(
    start: Optional[date] = None,
    end: Optional[date] = None,
    service: CompanyDataService = Depends(get_company_service),
):
    """
    Deadline events, optionally restricted to ``[start, end]``.
    """
    companies = _load(service)
    if start is None and end is None:
        return deadline_calendar.deadline_events(companies)
    if start is not None and end is not None and start > end:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="start must not be after end")
    return deadline_calendar.events_between(companies, start or date.min, end or date.max)


@router.get("/upcoming", response_model=List[schemas.DeadlineEvent])
def read_upcoming_deadlines(
    days: int = Query(default=settings.upcoming_deadline_days, ge=0, le=365),
    service: CompanyDataService = Depends(get_company_service),
):
    """
    Open applications due within the next ``days`` days.
    """
    return deadline_calendar.upcoming_deadlines(_load(service), days=days)
