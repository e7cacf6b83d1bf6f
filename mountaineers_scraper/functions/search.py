"""Search handlers - run a faceted query and parse one page of results."""

import logging
from dataclasses import asdict
from typing import Any, Dict, Optional

from ..config import PAGE_SIZE
from ..http_client import MountaineersClient, get_client
from ..parsers import (
    load_document,
    parse_activity_results,
    parse_course_results,
    parse_route_results,
    parse_trip_report_results,
)


logger = logging.getLogger(__name__)

ACTIVITIES_PATH = '/activities/activities'
COURSES_PATH = '/activities/courses-clinics-seminars'
TRIP_REPORTS_PATH = '/activities/trip-reports'
ROUTES_PATH = '/activities/routes-places'

# Argument name -> faceted query parameter, per listing
ACTIVITY_FACETS = [
    ('query', 'c2'),
    ('activity_type', 'c4[]'),
    ('audience', 'c5[]'),
    ('branch', 'c8[]'),
    ('difficulty', 'c15[]'),
    ('type', 'c16[]'),
    ('open_only', 'c17'),
    ('day_of_week', 'c21[]'),
    ('date_start', 'start'),
    ('date_end', 'end'),
]
COURSE_FACETS = [
    ('query', 'c2'),
    ('activity_type', 'c4[]'),
    ('branch', 'c7[]'),
    ('difficulty', 'c15[]'),
    ('open_only', 'c17'),
]
TRIP_REPORT_FACETS = [
    ('query', 'c2'),
    ('activity_type', 'c4[]'),
]
ROUTE_FACETS = [
    ('query', 'c2'),
    ('activity_type', 'c4[]'),
    ('difficulty', 'c5[]'),
    ('climbing_category', 'c7[]'),
    ('used_for', 'c9[]'),
    ('snowshoeing_category', 'c10[]'),
]


def build_faceted_params(arguments: Dict[str, Any], facets: list) -> tuple[list, int]:
    """
    Build faceted query parameters from handler arguments.

    Empty arguments are skipped; booleans are sent as '1'. Pages after the
    first add b_start = page * PAGE_SIZE.

    Returns:
        (params, page) where params is a list of (name, value) pairs

    Raises:
        ValueError: If page is negative or not an integer

    Example:
        >>> build_faceted_params({'query': 'rainier', 'open_only': True, 'page': 2}, ACTIVITY_FACETS)
        ([('c2', 'rainier'), ('c17', '1'), ('b_start', '40')], 2)
    """
    page = arguments.get('page') or 0
    if not isinstance(page, int) or isinstance(page, bool) or page < 0:
        raise ValueError(f"page must be a non-negative integer, got {page!r}")

    params = []
    for argument, parameter in facets:
        value = arguments.get(argument)
        if value is True:
            params.append((parameter, '1'))
        elif value:
            params.append((parameter, str(value)))

    if page > 0:
        params.append(('b_start', str(page * PAGE_SIZE)))

    return params, page


def _search(
    name: str,
    arguments: Optional[Dict[str, Any]],
    client: Optional[MountaineersClient],
    path: str,
    facets: list,
    parse,
) -> Dict[str, Any]:
    try:
        arguments = arguments or {}
        client = client or get_client()

        params, page = build_faceted_params(arguments, facets)
        logger.info(f"Searching {path} (page {page}) with {params}")

        tree = load_document(client.fetch_faceted_query(path, params))
        result = parse(tree, page, client.base_url)

        logger.info(f"Found {len(result.items)} of {result.total_count} results")

        return {
            'status': 'success',
            'result': asdict(result),
        }

    except Exception as e:
        logger.error(f"Error in {name}: {e}", exc_info=True)
        return {
            'status': 'error',
            'error': str(e),
        }


def search_activities_handler(arguments: Dict[str, Any] = None, client: MountaineersClient = None) -> Dict[str, Any]:
    """
    Search activities (trips, clinics, seminars and course sessions).

    Args:
        arguments: Optional query, activity_type, audience, branch, difficulty,
            type, open_only, day_of_week, date_start, date_end and page (0-based)
        client: Client to use (defaults to the shared client)

    Returns:
        Dict with:
            - status: str - "success" or "error"
            - result: dict - SearchResult of ActivitySummary (on success)
            - error: str (optional) - Error message if status is "error"

    Example:
        >>> result = search_activities_handler({'activity_type': 'Day Hiking'})
        >>> result['status']
        'success'
    """
    return _search('search_activities_handler', arguments, client,
                   ACTIVITIES_PATH, ACTIVITY_FACETS, parse_activity_results)


def search_courses_handler(arguments: Dict[str, Any] = None, client: MountaineersClient = None) -> Dict[str, Any]:
    """Search courses, clinics and seminars (query, activity_type, branch, difficulty, open_only, page)."""
    return _search('search_courses_handler', arguments, client,
                   COURSES_PATH, COURSE_FACETS, parse_course_results)


def search_trip_reports_handler(arguments: Dict[str, Any] = None, client: MountaineersClient = None) -> Dict[str, Any]:
    """Search trip reports (query, activity_type, page)."""
    return _search('search_trip_reports_handler', arguments, client,
                   TRIP_REPORTS_PATH, TRIP_REPORT_FACETS, parse_trip_report_results)


def search_routes_handler(arguments: Dict[str, Any] = None, client: MountaineersClient = None) -> Dict[str, Any]:
    """Search routes & places (query, activity_type, difficulty, climbing_category, used_for, snowshoeing_category, page)."""
    return _search('search_routes_handler', arguments, client,
                   ROUTES_PATH, ROUTE_FACETS, parse_route_results)
