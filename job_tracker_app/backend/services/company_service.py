"""
Company data service: the single owner of a user's company list.

All writes to the ``companies`` table go through this class. Each mutation
follows the same discipline:

1. reject early when no user is signed in or the rate limiter says no,
2. validate the touched fields and abort before any write on failure,
3. sanitize free text and write through ``CompanyStore``,
4. refetch the whole list (never patch it locally),
5. tell the user what happened and log the details.

Mutations never raise. They return a ``MutationResult`` and, on failure, the
in-memory list is exactly what it was before the call.
"""
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Dict, List, Mapping, Optional, Union

from pydantic import BaseModel

from .. import schemas
from .company_store import CompanyStore
from .errors import (
    AuthenticationRequiredError,
    AuthorizationError,
    RateLimitError,
    StoreError,
    TrackerError,
    ValidationError,
)
from .notifications import Notifier
from .rate_limiter import RateLimiter
from .validation import (
    sanitize_html,
    validate_company_data,
    validate_cover_letter_content,
)

logger = logging.getLogger(__name__)

# camelCase wire names -> store column names
FIELD_MAP = {
    "positionType": "position_type",
    "applicationLink": "application_link",
    "coverLetter": "cover_letter",
    "coverLetterSections": "cover_letter_sections",
    "createdAt": "created_at",
    "maxLength": "max_length",
    "userId": "user_id",
}

VALIDATED_FIELDS = ("name", "position", "description", "application_link")
SANITIZED_FIELDS = ("name", "position", "description")
IMMUTABLE_FIELDS = ("id", "created_at", "user_id")
NON_NULL_FIELDS = ("status",)

CompanyInput = Union[BaseModel, Mapping[str, Any]]


def _plain(value: Any) -> Any:
    return value.value if isinstance(value, Enum) else value


def to_store_fields(data: CompanyInput, exclude_unset: bool = False) -> Dict[str, Any]:
    """Translate a model or camel/snake dict into store column names."""
    if isinstance(data, BaseModel):
        data = data.model_dump(exclude_unset=exclude_unset)

    fields: Dict[str, Any] = {}
    for key, value in data.items():
        column = FIELD_MAP.get(key, key)
        if column == "cover_letter_sections" and value is not None:
            value = [
                {FIELD_MAP.get(k, k): _plain(v) for k, v in (s.model_dump() if isinstance(s, BaseModel) else s).items()}
                for s in value
            ]
        fields[column] = _plain(value)
    return fields


def company_from_row(row: Mapping[str, Any]) -> schemas.Company:
    """Build the in-memory model from a store row, sanitizing free text on the way in."""
    data = dict(row)
    data.pop("user_id", None)
    for field in SANITIZED_FIELDS:
        if data.get(field) is not None:
            data[field] = sanitize_html(data[field])
    data["cover_letter_sections"] = [
        {**section, "title": sanitize_html(section.get("title")), "content": sanitize_html(section.get("content"))}
        for section in data.get("cover_letter_sections") or []
    ]
    return schemas.Company.model_validate(data)


def _sanitize_sections(sections: Optional[List[Dict[str, Any]]]) -> Optional[List[Dict[str, Any]]]:
    if sections is None:
        return None
    return [
        {**section, "title": sanitize_html(section.get("title")), "content": sanitize_html(section.get("content"))}
        for section in sections
    ]


@dataclass
class MutationResult:
    ok: bool
    error: Optional[TrackerError] = None
    company: Optional[schemas.Company] = None

    @property
    def message(self) -> Optional[str]:
        return self.error.message if self.error else None


class CompanyDataService:
    """Owns the signed-in user's company list and every write to it."""

    def __init__(
        self,
        store: CompanyStore,
        user_id: Optional[int] = None,
        notifier: Optional[Notifier] = None,
        rate_limiter: Optional[RateLimiter] = None,
    ):
        self.store = store
        self.user_id = user_id
        self.notifier = notifier or Notifier()
        self.rate_limiter = rate_limiter
        self._companies: List[schemas.Company] = []

    @property
    def companies(self) -> List[schemas.Company]:
        """A copy of the last fetched list; callers cannot mutate it in place."""
        return list(self._companies)

    # ------------------------------------------------------------------ reads

    def fetch_companies(self) -> List[schemas.Company]:
        """Load the user's companies, newest first. Empty when signed out."""
        if self.user_id is None:
            self._companies = []
            return []

        try:
            rows = self.store.select_for_user(self.user_id)
        except StoreError:
            logger.error("Error fetching companies for user %s", self.user_id, exc_info=True)
            raise

        self._companies = [company_from_row(row) for row in rows]
        return self.companies

    def get_company(self, company_id: str) -> Optional[schemas.Company]:
        if self.user_id is None:
            return None
        row = self.store.select_one(company_id, self.user_id)
        return company_from_row(row) if row is not None else None

    # -------------------------------------------------------------- mutations

    def add_company(self, draft: CompanyInput) -> MutationResult:
        return self._run_mutation("add_company", self._add, draft)

    def update_company(self, company_id: str, updates: CompanyInput) -> MutationResult:
        return self._run_mutation("update_company", self._update, company_id, updates)

    def delete_company(self, company_id: str) -> MutationResult:
        return self._run_mutation("delete_company", self._delete, company_id)

    def _add(self, draft: CompanyInput) -> schemas.Company:
        fields = to_store_fields(draft)
        for immutable in IMMUTABLE_FIELDS:
            fields.pop(immutable, None)

        self._validate(fields)

        row = dict(fields)
        for field in SANITIZED_FIELDS:
            if row.get(field):
                row[field] = sanitize_html(row[field])
        if not row.get("description"):
            row["description"] = None
        row["cover_letter_sections"] = _sanitize_sections(row.get("cover_letter_sections") or [])
        row["user_id"] = self.user_id

        created = self.store.insert(row)
        logger.info("User %s added company %s", self.user_id, created["id"])
        return company_from_row(created)

    def _update(self, company_id: str, updates: CompanyInput) -> Optional[schemas.Company]:
        fields = to_store_fields(updates, exclude_unset=True)
        touched = [f for f in IMMUTABLE_FIELDS if f in fields]
        if touched:
            raise ValidationError(f"{', '.join(touched)} cannot be changed.")
        nulled = [f for f in NON_NULL_FIELDS if f in fields and fields[f] is None]
        if nulled:
            raise ValidationError(f"{', '.join(nulled).capitalize()} cannot be empty.")
        self._check_enums(fields)
        self._check_sections(fields.get("cover_letter_sections"))

        if any(field in fields for field in VALIDATED_FIELDS):
            # Untouched fields count as empty here; they are not written
            self._validate({field: fields.get(field) for field in VALIDATED_FIELDS + ("cover_letter",)})
        else:
            self._check_cover_letter(fields.get("cover_letter"))

        values = dict(fields)
        for field in SANITIZED_FIELDS:
            if values.get(field):
                values[field] = sanitize_html(values[field])
        if "cover_letter_sections" in values:
            values["cover_letter_sections"] = _sanitize_sections(values["cover_letter_sections"])

        affected = self.store.update(company_id, self.user_id, values)
        if affected == 0:
            raise AuthorizationError("Company not found.")

        logger.info("User %s updated company %s (%s)", self.user_id, company_id, ", ".join(sorted(values)) or "no fields")
        row = self.store.select_one(company_id, self.user_id)
        return company_from_row(row) if row is not None else None

    def _delete(self, company_id: str) -> None:
        affected = self.store.delete(company_id, self.user_id)
        if affected == 0:
            raise AuthorizationError("Company not found.")
        logger.info("User %s deleted company %s", self.user_id, company_id)
        return None

    # ---------------------------------------------------------------- helpers

    def _check_enums(self, fields: Mapping[str, Any]) -> None:
        if fields.get("status") is not None:
            try:
                schemas.CompanyStatus(fields["status"])
            except ValueError:
                raise ValidationError(f"Unknown status: {fields['status']}")
        if fields.get("position_type") is not None:
            try:
                schemas.PositionType(fields["position_type"])
            except ValueError:
                raise ValidationError(f"Unknown position type: {fields['position_type']}")

    def _validate(self, fields: Mapping[str, Any]) -> None:
        self._check_enums(fields)
        result = validate_company_data(fields)
        if not result:
            raise ValidationError(result.error)
        self._check_cover_letter(fields.get("cover_letter"))
        self._check_sections(fields.get("cover_letter_sections"))

    def _check_cover_letter(self, content: Optional[str]) -> None:
        if content:
            result = validate_cover_letter_content(content)
            if not result:
                raise ValidationError(result.error)

    def _check_sections(self, sections: Optional[List[Dict[str, Any]]]) -> None:
        ids = [s.get("id") for s in sections or [] if s.get("id") is not None]
        if len(ids) != len(set(ids)):
            raise ValidationError("Cover letter section ids must be unique.")

    def _check_rate_limit(self, operation: str) -> None:
        if self.rate_limiter is None:
            return
        if not self.rate_limiter.can_make_request(f"{operation}:{self.user_id}"):
            raise RateLimitError("Too many requests. Please try again later.")

    def _run_mutation(self, operation: str, action: Callable[..., Any], *args) -> MutationResult:
        snapshot = self._companies
        try:
            if self.user_id is None:
                raise AuthenticationRequiredError("You must be signed in.")
            self._check_rate_limit(operation)
            company = action(*args)
        except TrackerError as e:
            self._companies = snapshot
            self._report_failure(operation, e)
            return MutationResult(ok=False, error=e)
        except Exception as e:
            self._companies = snapshot
            logger.exception("Unexpected error during %s", operation)
            error = StoreError("Something went wrong. Please try again.")
            error.__cause__ = e
            self._report_failure(operation, error)
            return MutationResult(ok=False, error=error)

        self._refresh(snapshot)
        self.notifier.success(*_SUCCESS_MESSAGES[operation])
        return MutationResult(ok=True, company=company)

    def _refresh(self, snapshot: List[schemas.Company]) -> None:
        try:
            self.fetch_companies()
        except StoreError as e:
            self._companies = snapshot
            self.notifier.error("Refresh failed", e.message)

    def _report_failure(self, operation: str, error: TrackerError) -> None:
        if isinstance(error, ValidationError):
            logger.info("%s rejected for user %s: %s", operation, self.user_id, error.message)
        elif isinstance(error, (AuthorizationError, RateLimitError, AuthenticationRequiredError)):
            logger.warning("%s refused for user %s: %s", operation, self.user_id, error.message)
        else:
            logger.error("%s failed for user %s: %s", operation, self.user_id, error.message, exc_info=error)
        self.notifier.error(error.title, error.message)


_SUCCESS_MESSAGES = {
    "add_company": ("Company added", "The company was added successfully."),
    "update_company": ("Company updated", "The company details were updated."),
    "delete_company": ("Company deleted", "The company was removed."),
}
