"""
Kanban board view state: column configuration and the drag-and-drop protocol.

The controller owns no company data. Column membership is always derived
from the list it is handed, so it can never drift from what was fetched.
A drop is translated into a status-change request for the company data
service; the controller itself never writes anything.
"""
import copy
import logging
from collections import OrderedDict
from typing import Callable, Dict, List, Mapping, Optional, Sequence, TypeVar, Union

from ..schemas import STATUS_ORDER, CompanyStatus, StatusColumnConfig
from .validation import ValidationResult, validate_column_title

logger = logging.getLogger(__name__)

DEFAULT_STATUS_CONFIG: Dict[CompanyStatus, StatusColumnConfig] = {
    CompanyStatus.PENDING: StatusColumnConfig(
        title="To Apply", color="bg-white border-gray-200", shadow="ring-gray-200"
    ),
    CompanyStatus.APPLIED: StatusColumnConfig(
        title="Applied", color="bg-blue-50/30 border-blue-200", shadow="ring-blue-200"
    ),
    CompanyStatus.APTITUDE: StatusColumnConfig(
        title="Aptitude Test", color="bg-purple-50/30 border-purple-200", shadow="ring-purple-200"
    ),
    CompanyStatus.INTERVIEW: StatusColumnConfig(
        title="Interviewing", color="bg-yellow-50/30 border-yellow-200", shadow="ring-yellow-200"
    ),
    CompanyStatus.PASSED: StatusColumnConfig(
        title="Offer", color="bg-green-50/30 border-green-200", shadow="ring-green-200"
    ),
    CompanyStatus.REJECTED: StatusColumnConfig(
        title="Rejected", color="bg-red-50/30 border-red-200", shadow="ring-red-200"
    ),
}

T = TypeVar("T")
StatusLike = Union[CompanyStatus, str]
UpdateFn = Callable[[str, dict], object]


def _status(value: StatusLike) -> CompanyStatus:
    return value if isinstance(value, CompanyStatus) else CompanyStatus(value)


def companies_in_column(companies: Sequence[T], status: StatusLike) -> List[T]:
    target = _status(status)
    return [c for c in companies if _status(c.status) == target]


def group_by_status(companies: Sequence[T]) -> "OrderedDict[CompanyStatus, List[T]]":
    """Every status gets a column, empty or not, in pipeline order."""
    columns: "OrderedDict[CompanyStatus, List[T]]" = OrderedDict((status, []) for status in STATUS_ORDER)
    for company in companies:
        columns[_status(company.status)].append(company)
    return columns


class KanbanStateController:
    """Drag state and per-column display settings for one board session."""

    def __init__(
        self,
        on_add_company: Optional[Callable[[], None]] = None,
        column_titles: Optional[Mapping[str, str]] = None,
    ):
        self.column_config: Dict[CompanyStatus, StatusColumnConfig] = copy.deepcopy(DEFAULT_STATUS_CONFIG)
        self.dragged_item_id: Optional[str] = None
        self.hovered_column: Optional[CompanyStatus] = None
        self._on_add_company = on_add_company

        for status, title in (column_titles or {}).items():
            try:
                key = _status(status)
            except ValueError:
                logger.warning("Ignoring saved title for unknown column %r", status)
                continue
            self.column_config[key] = self.column_config[key].model_copy(update={"title": title})

    # ------------------------------------------------------------ drag & drop

    def on_drag_start(self, company_id: str) -> None:
        self.dragged_item_id = company_id

    def on_drag_over(self, status: StatusLike) -> None:
        self.hovered_column = _status(status)

    def on_drag_leave(self) -> None:
        self.hovered_column = None

    def on_drop(self, status: StatusLike, companies: Sequence, update_fn: UpdateFn) -> bool:
        """
        Finish a drag onto ``status``.

        Calls ``update_fn(company_id, {"status": status})`` once when the
        dragged company is found and sits in a different column. Drag and
        hover state are cleared whatever happens, including when
        ``status`` is not a known column or ``update_fn`` raises. Returns
        whether an update was requested.
        """
        try:
            target = _status(status)
            if self.dragged_item_id is None:
                return False

            company = next((c for c in companies if c.id == self.dragged_item_id), None)
            if company is None:
                logger.debug("Dropped company %s is not on the board", self.dragged_item_id)
                return False
            if _status(company.status) == target:
                return False

            update_fn(company.id, {"status": target.value})
            return True
        finally:
            self.dragged_item_id = None
            self.hovered_column = None

    @property
    def is_dragging(self) -> bool:
        return self.dragged_item_id is not None

    # ---------------------------------------------------------------- columns

    def on_edit_column_title(self, status: StatusLike, new_title: str) -> ValidationResult:
        try:
            key = _status(status)
        except ValueError:
            return ValidationResult(False, f"Unknown column: {status}")

        result = validate_column_title(new_title)
        if not result:
            return result

        self.column_config[key] = self.column_config[key].model_copy(update={"title": new_title})
        return result

    def column_titles(self) -> Dict[str, str]:
        return {status.value: config.title for status, config in self.column_config.items()}

    def columns(self, companies: Sequence[T]) -> List[dict]:
        """Column config merged with the companies that belong in each column."""
        grouped = group_by_status(companies)
        return [
            {
                "status": status,
                **self.column_config[status].model_dump(),
                "companies": members,
                "is_drag_target": self.hovered_column == status,
            }
            for status, members in grouped.items()
        ]

    # ----------------------------------------------------------------- dialog

    def request_add_company(self) -> None:
        """Ask whoever owns the creation form to open it."""
        if self._on_add_company is not None:
            self._on_add_company()
