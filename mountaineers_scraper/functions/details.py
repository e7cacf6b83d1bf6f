"""Detail handlers - fetch one entity page and parse it."""

import logging
from dataclasses import asdict
from typing import Any, Dict

from ..http_client import MountaineersClient, get_client
from ..parsers import (
    load_document,
    parse_activity_detail,
    parse_course_detail,
    parse_member_profile,
    parse_roster,
    parse_route_detail,
    parse_trip_report_detail,
)
from ..postprocess import limit_records


logger = logging.getLogger(__name__)

ACTIVITY_BASE_PATH = '/activities/activities'
COURSE_BASE_PATH = '/courses/courses-clinics-seminars'
ROUTE_BASE_PATH = '/activities/routes-places'
TRIP_REPORT_BASE_PATH = '/activities/trip-reports'
MEMBER_BASE_PATH = '/members'


def page_url(url_or_slug: str, base_path: str, base_url: str) -> str:
    """
    Canonical page URL from a full URL or a bare slug.

    Example:
        >>> page_url('day-hike-rock-candy-mountain-11', ACTIVITY_BASE_PATH, 'https://www.mountaineers.org')
        'https://www.mountaineers.org/activities/activities/day-hike-rock-candy-mountain-11'
    """
    if not url_or_slug:
        raise ValueError("Missing required parameter: url")

    url_or_slug = url_or_slug.strip()
    if url_or_slug.startswith('http'):
        return url_or_slug
    return f"{base_url}{base_path}/{url_or_slug.strip('/')}"


def _error(name: str, e: Exception) -> Dict[str, Any]:
    logger.error(f"Error in {name}: {e}", exc_info=True)
    return {
        'status': 'error',
        'error': str(e),
    }


def get_activity_handler(arguments: Dict[str, Any] = None, client: MountaineersClient = None) -> Dict[str, Any]:
    """
    Fetch and parse an activity page.

    Args:
        arguments: {'url': full activity URL or activity slug}
        client: Client to use (defaults to the shared client)

    Returns:
        Dict with:
            - status: str - "success" or "error"
            - result: dict - ActivityDetail (on success)
            - error: str (optional) - Error message if status is "error"
    """
    try:
        client = client or get_client()
        url = page_url((arguments or {}).get('url'), ACTIVITY_BASE_PATH, client.base_url)

        logger.info(f"Fetching activity: {url}")
        activity = parse_activity_detail(load_document(client.fetch_page(url)), url, client.base_url)
        logger.info(f"Parsed activity: {activity.title}")

        return {'status': 'success', 'result': asdict(activity)}

    except Exception as e:
        return _error('get_activity_handler', e)


def get_trip_report_handler(arguments: Dict[str, Any] = None, client: MountaineersClient = None) -> Dict[str, Any]:
    """Fetch and parse a trip report ({'url': URL or slug})."""
    try:
        client = client or get_client()
        url = page_url((arguments or {}).get('url'), TRIP_REPORT_BASE_PATH, client.base_url)

        logger.info(f"Fetching trip report: {url}")
        report = parse_trip_report_detail(load_document(client.fetch_page(url)), url, client.base_url)

        return {'status': 'success', 'result': asdict(report)}

    except Exception as e:
        return _error('get_trip_report_handler', e)


def get_route_handler(arguments: Dict[str, Any] = None, client: MountaineersClient = None) -> Dict[str, Any]:
    """Fetch and parse a route or place ({'url': URL or slug})."""
    try:
        client = client or get_client()
        url = page_url((arguments or {}).get('url'), ROUTE_BASE_PATH, client.base_url)

        logger.info(f"Fetching route: {url}")
        route = parse_route_detail(load_document(client.fetch_page(url)), url)

        return {'status': 'success', 'result': asdict(route)}

    except Exception as e:
        return _error('get_route_handler', e)


def get_course_handler(arguments: Dict[str, Any] = None, client: MountaineersClient = None) -> Dict[str, Any]:
    """Fetch and parse a course, clinic or seminar ({'url': URL or slug})."""
    try:
        client = client or get_client()
        url = page_url((arguments or {}).get('url'), COURSE_BASE_PATH, client.base_url)

        logger.info(f"Fetching course: {url}")
        course = parse_course_detail(load_document(client.fetch_page(url)), url, client.base_url)

        return {'status': 'success', 'result': asdict(course)}

    except Exception as e:
        return _error('get_course_handler', e)


def get_member_profile_handler(arguments: Dict[str, Any] = None, client: MountaineersClient = None) -> Dict[str, Any]:
    """Fetch and parse a member profile ({'member_slug': 'jane-doe'}); members only."""
    try:
        client = client or get_client()
        url = page_url((arguments or {}).get('member_slug'), MEMBER_BASE_PATH, client.base_url)

        logger.info(f"Fetching member profile: {url}")
        profile = parse_member_profile(load_document(client.fetch_page(url, authenticated=True)), url)

        return {'status': 'success', 'result': asdict(profile)}

    except Exception as e:
        return _error('get_member_profile_handler', e)


def get_activity_roster_handler(arguments: Dict[str, Any] = None, client: MountaineersClient = None) -> Dict[str, Any]:
    """
    Fetch and parse the roster of an activity ({'url': URL or slug}); members only.

    The roster is not paged, so the result is a ListResult with limit 0.
    """
    try:
        client = client or get_client()
        url = page_url((arguments or {}).get('url'), ACTIVITY_BASE_PATH, client.base_url)

        logger.info(f"Fetching roster: {url}")
        entries = parse_roster(load_document(client.fetch_roster_tab(url)), client.base_url)
        logger.info(f"Found {len(entries)} roster entries")

        return {'status': 'success', 'result': asdict(limit_records(entries))}

    except Exception as e:
        return _error('get_activity_roster_handler', e)
