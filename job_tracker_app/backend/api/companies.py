from typing import List
from fastapi import APIRouter, Depends, status

from .. import schemas
from ..services.company_service import CompanyDataService
from ..services.errors import StoreError
from ..utils.api_helpers import (
    check_resource_exists,
    get_company_service,
    handle_service_error,
    raise_for_result,
)

router = APIRouter()

@router.post("/", response_model=schemas.Company, status_code=status.HTTP_201_CREATED)
def create_company(
    company: schemas.CompanyCreate,
    service: CompanyDataService = Depends(get_company_service),
):
    """
    Record a new application for the current user.
    """
    result = service.add_company(company)
    raise_for_result(result, "Company")
    return result.company

@router.get("/", response_model=List[schemas.Company])
def read_companies(service: CompanyDataService = Depends(get_company_service)):
    """
    Retrieve all of the current user's companies, newest first.
    """
    try:
        return service.fetch_companies()
    except StoreError as e:
        raise handle_service_error(e, "Company")

@router.get("/{company_id}", response_model=schemas.Company)
def read_company(
    company_id: str,
    service: CompanyDataService = Depends(get_company_service),
):
    """
    Retrieve a specific company by its ID.
    """
    try:
        company = service.get_company(company_id)
    except StoreError as e:
        raise handle_service_error(e, "Company")
    check_resource_exists(company, "Company")
    return company

@router.put("/{company_id}", response_model=schemas.Company)
def update_company(
    company_id: str,
    company: schemas.CompanyUpdate,
    service: CompanyDataService = Depends(get_company_service),
):
    """
    Update only the fields present in the request body.
    """
    result = service.update_company(company_id, company)
    raise_for_result(result, "Company")
    check_resource_exists(result.company, "Company")
    return result.company

@router.delete("/{company_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_company(
    company_id: str,
    service: CompanyDataService = Depends(get_company_service),
):
    """
    Delete one of the current user's companies.
    """
    result = service.delete_company(company_id)
    raise_for_result(result, "Company")
