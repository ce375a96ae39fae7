from typing import List
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from .. import schemas
from ..models.db import crud
from ..models.db.database import get_db
from ..services.company_service import CompanyDataService, MutationResult
from ..services.errors import StoreError
from ..services.kanban_state import KanbanStateController
from ..utils.api_helpers import (
    check_resource_exists,
    get_company_service,
    handle_service_error,
    raise_for_result,
)
from .auth import get_current_active_user

router = APIRouter()


def _load(service: CompanyDataService) -> List[schemas.Company]:
    try:
        return service.fetch_companies()
    except StoreError as e:
        raise handle_service_error(e, "Board")


@router.get("/", response_model=schemas.Board)
def read_board(
    db: Session = Depends(get_db),
    current_user: schemas.User = Depends(get_current_active_user),
    service: CompanyDataService = Depends(get_company_service),
):
    """
    All six pipeline columns with their titles and companies, including empty ones.
    """
    companies = _load(service)
    controller = KanbanStateController(column_titles=crud.get_column_titles(db, current_user.id))
    return {"columns": controller.columns(companies), "total": len(companies)}


@router.post("/move", response_model=schemas.MoveResult)
def move_company(
    move: schemas.MoveRequest,
    service: CompanyDataService = Depends(get_company_service),
):
    """
    Drag a card onto another column. Dropping onto its own column changes nothing.
    """
    companies = _load(service)
    check_resource_exists(next((c for c in companies if c.id == move.company_id), None), "Company")

    results: List[MutationResult] = []
    controller = KanbanStateController()
    controller.on_drag_start(move.company_id)
    controller.on_drag_over(move.status)
    controller.on_drop(
        move.status,
        companies,
        lambda company_id, updates: results.append(service.update_company(company_id, updates)),
    )

    if not results:
        return {"moved": False, "company": next(c for c in companies if c.id == move.company_id)}

    raise_for_result(results[0], "Board")
    return {"moved": True, "company": results[0].company}


@router.put("/columns/{column_status}", response_model=schemas.StatusColumnConfig)
def rename_column(
    column_status: schemas.CompanyStatus,
    update: schemas.ColumnTitleUpdate,
    db: Session = Depends(get_db),
    current_user: schemas.User = Depends(get_current_active_user),
):
    """
    Rename a column for the current user. The title is kept across sessions.
    """
    controller = KanbanStateController(column_titles=crud.get_column_titles(db, current_user.id))
    result = controller.on_edit_column_title(column_status, update.title)
    if not result:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=result.error)

    crud.set_column_title(db, current_user.id, column_status.value, update.title)
    return controller.column_config[column_status]
