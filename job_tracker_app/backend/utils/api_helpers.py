"""
Common API utilities shared by the company, board, statistics and calendar routers.
"""
import logging
from typing import Optional
from fastapi import Depends, HTTPException, status
from sqlalchemy.orm import Session

from .. import schemas
from ..api.auth import get_current_active_user
from ..models.db.database import get_db
from ..services.company_service import CompanyDataService, MutationResult
from ..services.company_store import CompanyStore
from ..services.errors import (
    AuthenticationRequiredError,
    AuthorizationError,
    RateLimitError,
    StoreError,
    TrackerError,
    ValidationError,
)
from ..services.rate_limiter import RateLimiter, get_rate_limiter

logger = logging.getLogger(__name__)

_STATUS_CODES = {
    ValidationError: status.HTTP_400_BAD_REQUEST,
    AuthorizationError: status.HTTP_404_NOT_FOUND,
    RateLimitError: status.HTTP_429_TOO_MANY_REQUESTS,
    AuthenticationRequiredError: status.HTTP_401_UNAUTHORIZED,
    StoreError: status.HTTP_503_SERVICE_UNAVAILABLE,
}


def get_company_service(
    db: Session = Depends(get_db),
    current_user: schemas.User = Depends(get_current_active_user),
    rate_limiter: RateLimiter = Depends(get_rate_limiter),
) -> CompanyDataService:
    """Build a company service bound to the current user for one request."""
    return CompanyDataService(
        store=CompanyStore(db),
        user_id=current_user.id,
        rate_limiter=rate_limiter,
    )


def handle_service_error(error: Exception, service_name: str) -> HTTPException:
    """
    Standardized error handling for service layer exceptions.

    Args:
        error: The exception that occurred
        service_name: Name of the service for logging/error messages

    Returns:
        HTTPException with appropriate status code and message
    """
    if isinstance(error, TrackerError):
        status_code = next(
            (code for cls, code in _STATUS_CODES.items() if isinstance(error, cls)),
            status.HTTP_500_INTERNAL_SERVER_ERROR,
        )
        return HTTPException(status_code=status_code, detail=error.message)

    logger.error("%s service error: %s", service_name, error)
    if isinstance(error, ValueError):
        return HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(error)
        )
    return HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail=f"An unexpected error occurred in {service_name}"
    )


def raise_for_result(result: MutationResult, service_name: str) -> None:
    """Turn a failed mutation into the matching HTTP error."""
    if not result.ok:
        raise handle_service_error(result.error, service_name)


def check_resource_exists(resource: Optional[object], resource_type: str) -> None:
    """
    Raise a 404 when ``resource`` is None.

    Args:
        resource: The resource to check
        resource_type: Type of resource for error message

    Raises:
        HTTPException: If resource is None
    """
    if resource is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"{resource_type} not found"
        )
