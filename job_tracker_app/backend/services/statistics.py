"""
Summary statistics over a user's applications.
"""
import math
from collections import OrderedDict
from typing import Dict, List, Sequence

from ..schemas import STATUS_ORDER, CompanyStatus

ACTIVE_EXCLUDED = (CompanyStatus.PENDING, CompanyStatus.PASSED, CompanyStatus.REJECTED)


def _percent(part: int, whole: int) -> int:
    # Half-up rounding, so 2.5 -> 3
    if not whole:
        return 0
    return int(math.floor(part * 100 / whole + 0.5))


def count_by_status(companies: Sequence) -> Dict[CompanyStatus, int]:
    counts = {status: 0 for status in STATUS_ORDER}
    for company in companies:
        counts[CompanyStatus(company.status)] += 1
    return counts


def compute_overview(companies: Sequence) -> dict:
    """
    Headline numbers for the dashboard.

    ``success_rate`` only considers applications with a final decision:
    passed / (passed + rejected), 0 when nothing has been decided yet.
    """
    counts = count_by_status(companies)
    passed = counts[CompanyStatus.PASSED]
    rejected = counts[CompanyStatus.REJECTED]
    return {
        "total": len(companies),
        "pending": counts[CompanyStatus.PENDING],
        "active": sum(n for status, n in counts.items() if status not in ACTIVE_EXCLUDED),
        "passed": passed,
        "rejected": rejected,
        "success_rate": _percent(passed, passed + rejected),
    }


def stage_counts(companies: Sequence) -> List[dict]:
    counts = count_by_status(companies)
    total = len(companies)
    return [
        {"status": status, "count": counts[status], "percentage": _percent(counts[status], total)}
        for status in STATUS_ORDER
    ]


def monthly_timeline(companies: Sequence) -> List[dict]:
    """Applications created per month (``YYYY-MM``), split by current status, oldest first."""
    months: "OrderedDict[str, Dict[CompanyStatus, int]]" = OrderedDict()
    for company in sorted(companies, key=lambda c: c.created_at):
        month = company.created_at.strftime("%Y-%m")
        if month not in months:
            months[month] = {status: 0 for status in STATUS_ORDER}
        months[month][CompanyStatus(company.status)] += 1

    return [
        {"month": month, "counts": counts, "total": sum(counts.values())}
        for month, counts in months.items()
    ]


def build_statistics(companies: Sequence) -> dict:
    return {
        "overview": compute_overview(companies),
        "stages": stage_counts(companies),
        "timeline": monthly_timeline(companies),
    }
