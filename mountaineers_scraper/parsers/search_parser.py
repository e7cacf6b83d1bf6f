"""Parser for Mountaineers faceted search results pages."""

import logging
from typing import Optional

from ..config import BASE_URL
from ..models import (
    ActivitySummary,
    CourseSummary,
    RouteSummary,
    SearchResult,
    TripReportSummary,
)
from .common import (
    extract_text,
    has_class,
    label_text,
    parse_result_count,
    resolve_url,
    value_text,
)


logger = logging.getLogger(__name__)

RESULT_ITEM_XPATH = f"//div[{has_class('result-item')}]"
TITLE_LINK_XPATH = f"(.//*[{has_class('result-title')}]//a)[1]"
DIFFICULTY_PREFIX = 'Difficulty:'

# Sidebar label substring -> trip report summary field
TRIP_REPORT_SIDEBAR_FIELDS = [
    ('by', 'author'),
    ('activity type', 'activity_type'),
    ('trip result', 'trip_result'),
]


def _field(item, class_name: str) -> Optional[str]:
    """Text of the first element in item carrying class_name."""
    return extract_text(item, f"(.//*[{has_class(class_name)}])[1]")


def _labeled_field(item, class_name: str) -> Optional[str]:
    """Like _field, but with the <label> child removed before reading."""
    matches = item.xpath(f"(.//*[{has_class(class_name)}])[1]")
    if not matches:
        return None
    return value_text(matches[0], drop=('label',))


def _difficulty(item) -> Optional[str]:
    """Difficulty text with the literal 'Difficulty:' prefix stripped."""
    difficulty = _field(item, 'result-difficulty')
    if difficulty and difficulty.startswith(DIFFICULTY_PREFIX):
        difficulty = difficulty[len(DIFFICULTY_PREFIX):].strip() or None
    return difficulty


def _title_and_url(item, base_url: str) -> tuple[str, str]:
    """Card title ('' when the link has no text) and absolute URL."""
    title = extract_text(item, TITLE_LINK_XPATH) or ''
    url = resolve_url(item, TITLE_LINK_XPATH, base_url) or ''
    return title, url


def _leader(item, base_url: str) -> tuple[Optional[str], Optional[str]]:
    """Leader name and profile URL from the .result-leader block."""
    leader_link = f"(.//*[{has_class('result-leader')}]//a)[1]"
    return extract_text(item, leader_link), resolve_url(item, leader_link, base_url)


def extract_result_items(tree) -> list:
    """
    Find all result cards on a search results page, in document order.

    Uses XPath: //div[contains(@class, 'result-item')]
    """
    return tree.xpath(RESULT_ITEM_XPATH)


def parse_activity_results(tree, page: int, base_url: str = BASE_URL) -> SearchResult:
    """
    Parse an activity search results page.

    Args:
        tree: Loaded search results document
        page: Zero-based page number the document was fetched for
        base_url: Site origin used to resolve relative links

    Returns:
        SearchResult of ActivitySummary items

    Example:
        >>> tree = load_document('<div id="faceted-result-count">42 results</div>')
        >>> result = parse_activity_results(tree, 0)
        >>> result.total_count, result.has_more
        (42, True)
    """
    total_count = parse_result_count(tree)
    items = []

    for item in extract_result_items(tree):
        title, url = _title_and_url(item, base_url)
        leader, leader_url = _leader(item, base_url)
        items.append(ActivitySummary(
            title=title,
            url=url,
            type=_field(item, 'result-type'),
            date=_field(item, 'result-date'),
            difficulty=_difficulty(item),
            availability=_labeled_field(item, 'result-availability'),
            branch=_field(item, 'result-branch'),
            leader=leader,
            leader_url=leader_url,
            description=_field(item, 'result-summary'),
            prerequisites=_field(item, 'result-prereqs'),
        ))

    logger.debug(f"Parsed {len(items)} activities of {total_count} (page {page})")
    return SearchResult(total_count=total_count, items=items, page=page)


def parse_course_results(tree, page: int, base_url: str = BASE_URL) -> SearchResult:
    """Parse a course search results page into CourseSummary items."""
    total_count = parse_result_count(tree)
    items = []

    for item in extract_result_items(tree):
        title, url = _title_and_url(item, base_url)
        leader, leader_url = _leader(item, base_url)
        items.append(CourseSummary(
            title=title,
            url=url,
            date=_field(item, 'result-date'),
            prerequisites=_field(item, 'result-prereqs'),
            availability=_labeled_field(item, 'result-availability'),
            branch=_field(item, 'result-branch'),
            leader=leader,
            leader_url=leader_url,
            description=_field(item, 'result-summary'),
        ))

    logger.debug(f"Parsed {len(items)} courses of {total_count} (page {page})")
    return SearchResult(total_count=total_count, items=items, page=page)


def parse_trip_report_sidebar(item) -> dict:
    """
    Read the label/value pairs of a trip report card's sidebar.

    Each `.result-sidebar > div` holds a <label> and a value. Labels are
    matched by case-insensitive substring, first match wins.
    """
    fields = {name: None for _, name in TRIP_REPORT_SIDEBAR_FIELDS}

    for entry in item.xpath(f".//*[{has_class('result-sidebar')}]/div"):
        value = value_text(entry, drop=('label',))
        if not value:
            continue

        label = label_text(entry, tags=('label',))
        for pattern, name in TRIP_REPORT_SIDEBAR_FIELDS:
            if pattern in label:
                fields[name] = value
                break

    return fields


def parse_trip_report_results(tree, page: int, base_url: str = BASE_URL) -> SearchResult:
    """Parse a trip report search results page into TripReportSummary items."""
    total_count = parse_result_count(tree)
    items = []

    for item in extract_result_items(tree):
        title, url = _title_and_url(item, base_url)
        items.append(TripReportSummary(
            title=title,
            url=url,
            date=_field(item, 'result-date'),
            description=_field(item, 'result-summary'),
            **parse_trip_report_sidebar(item),
        ))

    logger.debug(f"Parsed {len(items)} trip reports of {total_count} (page {page})")
    return SearchResult(total_count=total_count, items=items, page=page)


def parse_route_results(tree, page: int, base_url: str = BASE_URL) -> SearchResult:
    """Parse a routes & places search results page into RouteSummary items."""
    total_count = parse_result_count(tree)
    items = []

    for item in extract_result_items(tree):
        title, url = _title_and_url(item, base_url)
        items.append(RouteSummary(
            title=title,
            url=url,
            type=_field(item, 'result-type'),
            description=_field(item, 'result-summary'),
        ))

    logger.debug(f"Parsed {len(items)} routes of {total_count} (page {page})")
    return SearchResult(total_count=total_count, items=items, page=page)
