"""Member handlers - pages and data of the logged-in member."""

import logging
from dataclasses import asdict
from typing import Any, Dict

from ..http_client import AuthenticationError, MountaineersClient, get_client
from ..models import WhoAmI
from ..parsers import (
    find_profile_link,
    load_document,
    parse_embedded_activities,
    parse_embedded_courses,
    parse_history_payload,
    parse_member_profile,
)
from ..parsers.common import MEMBER_PATH_PATTERN, slug_from_url
from ..parsers.profile_parser import extract_profile_name
from ..postprocess import filter_badges, filter_records, limit_records, sort_by_date


logger = logging.getLogger(__name__)

HISTORY_PATH = '/members/{slug}/member-activity-history.json'
DEFAULT_HISTORY_LIMIT = 20


def resolve_member(client: MountaineersClient):
    """
    Identify the logged-in member.

    The home page (as seen when logged in) links to the member's own profile
    as "My Profile". The profile page is fetched for the display name.

    Returns:
        (WhoAmI, profile document) so callers can reuse the profile page

    Raises:
        AuthenticationError: If there are no credentials or no "My Profile" link
    """
    home = load_document(client.fetch_page('/', authenticated=True))
    profile_url = find_profile_link(home, client.base_url)
    if not profile_url:
        raise AuthenticationError("Could not find profile URL. Are you logged in?")

    match = MEMBER_PATH_PATTERN.search(profile_url)
    slug = match.group(1) if match else slug_from_url(profile_url)

    profile = load_document(client.fetch_page(f"{client.base_url}/members/{slug}", authenticated=True))
    me = WhoAmI(
        name=extract_profile_name(profile, slug),
        slug=slug,
        profile_url=profile_url,
    )

    logger.info(f"Logged in as {me.name} ({me.slug})")
    return me, profile


def _limit(arguments: Dict[str, Any], default: int) -> int:
    limit = arguments.get('limit')
    return default if limit is None else limit


def _error(name: str, e: Exception) -> Dict[str, Any]:
    logger.error(f"Error in {name}: {e}", exc_info=True)
    return {
        'status': 'error',
        'error': str(e),
    }


def whoami_handler(arguments: Dict[str, Any] = None, client: MountaineersClient = None) -> Dict[str, Any]:
    """
    Identify the logged-in member.

    Returns:
        Dict with:
            - status: str - "success" or "error"
            - result: dict - {name, slug, profile_url} (on success)
            - error: str (optional) - Error message if status is "error"
    """
    try:
        me, _ = resolve_member(client or get_client())
        return {'status': 'success', 'result': asdict(me)}

    except Exception as e:
        return _error('whoami_handler', e)


def get_my_activities_handler(arguments: Dict[str, Any] = None, client: MountaineersClient = None) -> Dict[str, Any]:
    """
    Activities embedded in the logged-in member's profile page, soonest first.

    Args:
        arguments: Optional category, result, activity_type, status,
            date_from, date_to (YYYY-MM-DD) and limit (default 0 = all)
        client: Client to use (defaults to the shared client)
    """
    try:
        arguments = arguments or {}
        client = client or get_client()

        _, profile = resolve_member(client)
        activities = parse_embedded_activities(profile, client.base_url)

        activities = filter_records(
            activities,
            category=arguments.get('category'),
            result=arguments.get('result'),
            activity_type=arguments.get('activity_type'),
            status=arguments.get('status'),
            date_from=arguments.get('date_from'),
            date_to=arguments.get('date_to'),
        )
        result = limit_records(sort_by_date(activities), _limit(arguments, 0))

        logger.info(f"Returning {len(result.items)} of {result.total_count} activities")
        return {'status': 'success', 'result': asdict(result)}

    except Exception as e:
        return _error('get_my_activities_handler', e)


def get_activity_history_handler(arguments: Dict[str, Any] = None, client: MountaineersClient = None) -> Dict[str, Any]:
    """
    The logged-in member's activity history from the JSON endpoint, most recent first.

    Args:
        arguments: Optional category, result, activity_type, date_from,
            date_to (YYYY-MM-DD) and limit (default 20, 0 = all)
        client: Client to use (defaults to the shared client)

    Returns:
        Dict with:
            - status: str - "success" or "error"
            - result: dict - ListResult of MyActivity; total_count counts
              the filtered history before the limit is applied
            - error: str (optional) - Error message if status is "error"
    """
    try:
        arguments = arguments or {}
        client = client or get_client()

        me, _ = resolve_member(client)
        payload = client.fetch_json(HISTORY_PATH.format(slug=me.slug), authenticated=True)
        activities = parse_history_payload(payload, client.base_url)

        activities = filter_records(
            sort_by_date(activities, descending=True),
            category=arguments.get('category'),
            result=arguments.get('result'),
            activity_type=arguments.get('activity_type'),
            date_from=arguments.get('date_from'),
            date_to=arguments.get('date_to'),
        )
        result = limit_records(activities, _limit(arguments, DEFAULT_HISTORY_LIMIT))

        logger.info(f"Returning {len(result.items)} of {result.total_count} history records")
        return {'status': 'success', 'result': asdict(result)}

    except Exception as e:
        return _error('get_activity_history_handler', e)


def get_my_courses_handler(arguments: Dict[str, Any] = None, client: MountaineersClient = None) -> Dict[str, Any]:
    """
    Courses embedded in the logged-in member's profile page, soonest first.

    Args:
        arguments: Optional role, status, result, date_from, date_to and
            limit (default 0 = all)
        client: Client to use (defaults to the shared client)
    """
    try:
        arguments = arguments or {}
        client = client or get_client()

        _, profile = resolve_member(client)
        courses = parse_embedded_courses(profile, client.base_url)

        courses = filter_records(
            courses,
            role=arguments.get('role'),
            status=arguments.get('status'),
            result=arguments.get('result'),
            date_from=arguments.get('date_from'),
            date_to=arguments.get('date_to'),
        )
        result = limit_records(sort_by_date(courses), _limit(arguments, 0))

        return {'status': 'success', 'result': asdict(result)}

    except Exception as e:
        return _error('get_my_courses_handler', e)


def get_my_badges_handler(arguments: Dict[str, Any] = None, client: MountaineersClient = None) -> Dict[str, Any]:
    """
    Badges on the logged-in member's profile.

    Args:
        arguments: Optional active_only (drop expired badges) and name
            (case-insensitive substring)
        client: Client to use (defaults to the shared client)
    """
    try:
        arguments = arguments or {}
        client = client or get_client()

        me, profile = resolve_member(client)
        badges = parse_member_profile(profile, f"{client.base_url}/members/{me.slug}").badges

        badges = filter_badges(
            badges,
            active_only=bool(arguments.get('active_only')),
            name=arguments.get('name'),
        )

        return {'status': 'success', 'result': asdict(limit_records(badges))}

    except Exception as e:
        return _error('get_my_badges_handler', e)
