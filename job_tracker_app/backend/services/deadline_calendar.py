"""
Deadline calendar derived from company deadlines.

Deadlines are stored as free-form ISO strings, either a bare date
(``2025-01-30``) or a date and time (``2025-01-30T23:59``). Anything that
does not parse is left off the calendar.
"""
import logging
from datetime import date, datetime, timedelta
from typing import List, Optional, Sequence, Tuple

from ..schemas import CompanyStatus

logger = logging.getLogger(__name__)

CLOSED_STATUSES = (CompanyStatus.PASSED, CompanyStatus.REJECTED)


def parse_deadline(value: Optional[str]) -> Optional[Tuple[datetime, bool]]:
    """Return ``(moment, has_time)`` or None when the value is empty or malformed."""
    if not value:
        return None
    text = value.strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    try:
        if len(text) == 10:
            parsed_date = date.fromisoformat(text)
            return datetime(parsed_date.year, parsed_date.month, parsed_date.day), False
        return datetime.fromisoformat(text), True
    except ValueError:
        logger.debug("Skipping unparseable deadline %r", value)
        return None


def deadline_events(companies: Sequence) -> List[dict]:
    """One event per company with a usable deadline, soonest first."""
    events = []
    for company in companies:
        parsed = parse_deadline(company.deadline)
        if parsed is None:
            continue
        moment, has_time = parsed
        events.append({
            "company_id": company.id,
            "company_name": company.name,
            "position": company.position,
            "status": CompanyStatus(company.status),
            "deadline": moment,
            "day": moment.date(),
            "time": moment.strftime("%H:%M") if has_time else None,
        })
    events.sort(key=lambda e: (e["day"], e["time"] or "99:99"))
    return events


def events_between(companies: Sequence, start: date, end: date) -> List[dict]:
    """Events whose day falls in ``[start, end]``."""
    return [e for e in deadline_events(companies) if start <= e["day"] <= end]


def events_on(companies: Sequence, day: date) -> List[dict]:
    return events_between(companies, day, day)


def upcoming_deadlines(companies: Sequence, today: Optional[date] = None, days: int = 7) -> List[dict]:
    """Open applications due within the next ``days`` days, today included."""
    today = today or date.today()
    return [
        e for e in events_between(companies, today, today + timedelta(days=days))
        if e["status"] not in CLOSED_STATUSES
    ]
