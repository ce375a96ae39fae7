from fastapi import APIRouter, Depends

from .. import schemas
from ..services import statistics as statistics_service
from ..services.company_service import CompanyDataService
from ..services.errors import StoreError
from ..utils.api_helpers import get_company_service, handle_service_error

router = APIRouter()

@router.get("/", response_model=schemas.Statistics)
def read_statistics(service: CompanyDataService = Depends(get_company_service)):
    """
    Overview counts, per-stage breakdown and monthly timeline for the current user.
    """
    try:
        companies = service.fetch_companies()
    except StoreError as e:
        raise handle_service_error(e, "Statistics")
    return statistics_service.build_statistics(companies)
