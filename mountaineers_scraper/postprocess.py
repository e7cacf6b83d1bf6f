"""Sorting, filtering and limiting of already-normalized records.

Dates are compared as YYYY-MM-DD strings, which order the same way
lexicographically and chronologically.
"""

import logging
from datetime import datetime
from typing import Optional

import pytz

from .config import SITE_TIMEZONE
from .models import Badge, ListResult


logger = logging.getLogger(__name__)

# Equality filters accepted by filter_records
EQUALITY_FILTERS = ('category', 'result', 'activity_type', 'role', 'status')


def sort_by_date(records: list, field: str = 'start_date', descending: bool = False) -> list:
    """
    Sort records by a date field.

    Records without a date always go last, in either direction. The sort is
    stable, so records with equal dates keep their input order.

    Example:
        >>> [r.start_date for r in sort_by_date(activities, descending=True)]
        ['2025-06-01', '2024-08-15', '2024-01-01', None]
    """
    dated = [record for record in records if getattr(record, field)]
    undated = [record for record in records if not getattr(record, field)]

    dated.sort(key=lambda record: getattr(record, field), reverse=descending)
    # sort(reverse=True) keeps equal keys in input order as well
    return dated + undated


def _matches(value: Optional[str], wanted: str) -> bool:
    return value is not None and value.lower() == wanted.lower()


def filter_records(
    records: list,
    date_from: Optional[str] = None,
    date_to: Optional[str] = None,
    date_field: str = 'start_date',
    **filters: Optional[str],
) -> list:
    """
    Filter records by case-insensitive field equality and an inclusive date range.

    Args:
        records: Normalized records (MyActivity, MyCourse, ...)
        date_from: Lowest date to keep (YYYY-MM-DD, inclusive)
        date_to: Highest date to keep (YYYY-MM-DD, inclusive)
        date_field: Record attribute holding the date
        **filters: Any of category, result, activity_type, role, status.
            Empty values are ignored.

    Returns:
        The matching records, in input order. A record whose field is None
        never matches a filter on that field.

    Raises:
        ValueError: If an unknown filter name is given
    """
    unknown = set(filters) - set(EQUALITY_FILTERS)
    if unknown:
        raise ValueError(f"Unknown filter(s): {', '.join(sorted(unknown))}")

    active = {name: value for name, value in filters.items() if value}
    kept = []

    for record in records:
        if not all(_matches(getattr(record, name, None), value) for name, value in active.items()):
            continue

        if date_from or date_to:
            date = getattr(record, date_field, None)
            if not date:
                continue
            if date_from and date < date_from:
                continue
            if date_to and date > date_to:
                continue

        kept.append(record)

    logger.debug(f"Filtered {len(records)} records down to {len(kept)}")
    return kept


def limit_records(records: list, limit: int = 0) -> ListResult:
    """
    Truncate records to limit items (0 means all).

    total_count is the number of records before truncation.
    """
    if limit < 0:
        raise ValueError(f"limit must be zero or positive, got {limit}")

    items = list(records[:limit]) if limit > 0 else list(records)
    return ListResult(total_count=len(records), items=items, limit=limit)


def site_today() -> str:
    """Today's date in the club's timezone, as YYYY-MM-DD."""
    return datetime.now(pytz.timezone(SITE_TIMEZONE)).date().isoformat()


def filter_badges(
    badges: list[Badge],
    active_only: bool = False,
    name: Optional[str] = None,
    today: Optional[str] = None,
) -> list[Badge]:
    """
    Filter profile badges.

    Args:
        badges: Badges as parsed from the member profile
        active_only: Drop badges whose expiry date is before today.
            Badges without an expiry date are always active.
        name: Keep only badges whose name contains this (case-insensitive)
        today: Reference date (YYYY-MM-DD); defaults to today in the club's timezone

    Returns:
        Matching badges in profile order
    """
    if active_only:
        today = today or site_today()
        badges = [badge for badge in badges if not badge.expires or badge.expires >= today]

    if name:
        needle = name.lower()
        badges = [badge for badge in badges if needle in badge.name.lower()]

    return badges
