"""
Database access for company records.

Every query is scoped by ``user_id``: reads only return the caller's rows and
update/delete use an ``id = ? AND user_id = ?`` predicate, reporting how many
rows they touched. A count of zero means the row does not exist or belongs to
someone else; the two cases are deliberately indistinguishable.
"""
import logging
from typing import Any, Dict, Iterable, List, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, selectinload

from ..models.db import company as company_model
from .errors import StoreError

logger = logging.getLogger(__name__)

COMPANY_COLUMNS = (
    "id",
    "name",
    "position",
    "position_type",
    "status",
    "deadline",
    "description",
    "application_link",
    "cover_letter",
    "created_at",
    "user_id",
)
SECTION_COLUMNS = ("id", "title", "content", "max_length", "sort_order")


def _section_to_row(section: company_model.CoverLetterSection) -> Dict[str, Any]:
    return {column: getattr(section, column) for column in SECTION_COLUMNS}


def _company_to_row(company: company_model.Company) -> Dict[str, Any]:
    row = {column: getattr(company, column) for column in COMPANY_COLUMNS}
    row["cover_letter_sections"] = [_section_to_row(s) for s in company.cover_letter_sections]
    return row


def _build_sections(sections: Iterable[Dict[str, Any]]) -> List[company_model.CoverLetterSection]:
    built = []
    for sort_order, section in enumerate(sections):
        values = {k: v for k, v in section.items() if k in SECTION_COLUMNS and v is not None}
        values["sort_order"] = sort_order
        built.append(company_model.CoverLetterSection(**values))
    return built


class CompanyStore:
    """Row-level CRUD over the ``companies`` table and its ordered sections."""

    def __init__(self, db: Session):
        self.db = db

    def _scoped(self, user_id: int):
        return self.db.query(company_model.Company).filter(company_model.Company.user_id == user_id)

    def _get_owned(self, company_id: str, user_id: int) -> Optional[company_model.Company]:
        return self._scoped(user_id).filter(company_model.Company.id == company_id).first()

    def select_for_user(self, user_id: int) -> List[Dict[str, Any]]:
        try:
            rows = (
                self._scoped(user_id)
                .options(selectinload(company_model.Company.cover_letter_sections))
                .order_by(company_model.Company.created_at.desc())
                .all()
            )
        except SQLAlchemyError as e:
            raise StoreError("Could not load companies.") from e
        return [_company_to_row(row) for row in rows]

    def select_one(self, company_id: str, user_id: int) -> Optional[Dict[str, Any]]:
        try:
            row = self._get_owned(company_id, user_id)
        except SQLAlchemyError as e:
            raise StoreError("Could not load company.") from e
        return _company_to_row(row) if row is not None else None

    def insert(self, row: Dict[str, Any]) -> Dict[str, Any]:
        if row.get("user_id") is None:
            raise ValueError("insert requires a user_id")

        values = {k: v for k, v in row.items() if k in COMPANY_COLUMNS and v is not None}
        db_company = company_model.Company(**values)
        db_company.cover_letter_sections = _build_sections(row.get("cover_letter_sections") or [])
        try:
            self.db.add(db_company)
            self.db.commit()
            self.db.refresh(db_company)
        except SQLAlchemyError as e:
            self.db.rollback()
            raise StoreError("Could not save company.") from e
        return _company_to_row(db_company)

    def update(self, company_id: str, user_id: int, values: Dict[str, Any]) -> int:
        """Apply ``values`` to the caller's row; returns the number of rows changed."""
        try:
            db_company = self._get_owned(company_id, user_id)
            if db_company is None:
                return 0

            for key, value in values.items():
                if key == "cover_letter_sections":
                    # Old rows must be gone before new ones reuse their ids
                    db_company.cover_letter_sections = []
                    self.db.flush()
                    db_company.cover_letter_sections = _build_sections(value or [])
                elif key in COMPANY_COLUMNS and key not in ("id", "user_id", "created_at"):
                    setattr(db_company, key, value)
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            raise StoreError("Could not update company.") from e
        return 1

    def delete(self, company_id: str, user_id: int) -> int:
        try:
            db_company = self._get_owned(company_id, user_id)
            if db_company is None:
                return 0
            self.db.delete(db_company)
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            raise StoreError("Could not delete company.") from e
        return 1
