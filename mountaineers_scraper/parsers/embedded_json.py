"""Extractors for JSON data embedded in, or served alongside, member pages.

Some member pages render their lists client-side: the data ships as a JSON
string in the data-react-props attribute of a component marker element,
e.g. <div data-component="MemberActivities" data-react-props='{...}'>.
The member activity history is also available from a JSON endpoint with a
flatter record shape. Both are normalized into the same records.
"""

import json
import logging
from html import unescape
from typing import Any, Optional

from ..config import BASE_URL
from ..models import MyActivity, MyCourse
from .common import absolute_url, slug_from_url


logger = logging.getLogger(__name__)

COMPONENT_ATTRIBUTE = 'data-component'
PROPS_ATTRIBUTE = 'data-react-props'
ACTIVITIES_COMPONENT = 'MemberActivities'
COURSES_COMPONENT = 'MemberCourses'

# Keys that may wrap the record list in a JSON API response
PAYLOAD_LIST_KEYS = ('items', 'results', 'data')

# Roster positions that count as leading the activity (compared lowercased)
LEADER_ROLES = frozenset({
    'leader',
    'primary leader',
    'co-leader',
    'assistant leader',
    'instructor',
    'lead instructor',
    'course leader',
})


def _string(value: Any) -> Optional[str]:
    """Trimmed string for scalar JSON values, None for blanks and containers."""
    if value is None or isinstance(value, (dict, list, bool)):
        return None
    text = str(value).strip()
    return text or None


def iso_date(value: Any) -> Optional[str]:
    """
    Date-only part of an ISO datetime string.

    Example:
        >>> iso_date('2025-03-15T09:00:00-07:00')
        '2025-03-15'
    """
    text = _string(value)
    return text[:10] if text else None


def is_leader_role(role: Optional[str]) -> bool:
    """True if role is one of the leader-equivalent positions (case-insensitive)."""
    return bool(role) and role.strip().lower() in LEADER_ROLES


def normalize_leader(raw: Any, base_url: str = BASE_URL) -> tuple[Optional[str], Optional[str]]:
    """
    Normalize the leader field into a (name, url) pair.

    The field is either an object {"name": ..., "href": ...}, a bare name
    string, or missing.

    Example:
        >>> normalize_leader({'name': 'Bob Smith', 'href': '/members/bob'}, 'https://www.mountaineers.org')
        ('Bob Smith', 'https://www.mountaineers.org/members/bob')
        >>> normalize_leader('Alice Jones')
        ('Alice Jones', None)
    """
    if isinstance(raw, dict):
        return _string(raw.get('name')), absolute_url(_string(raw.get('href')), base_url)
    if isinstance(raw, str):
        return _string(raw), None
    return None, None


def _uid(raw: dict, url: str) -> str:
    return _string(raw.get('uid')) or _string(raw.get('id')) or slug_from_url(url)


def extract_embedded_json(tree, component: str) -> Optional[Any]:
    """
    Decode the JSON payload of a component marker element.

    Args:
        tree: Loaded page document
        component: Value of the data-component attribute to look for

    Returns:
        The decoded payload, or None if the page has no such component

    Raises:
        json.JSONDecodeError: If the payload exists but is not valid JSON
    """
    markers = tree.xpath(f"//*[@{COMPONENT_ATTRIBUTE}='{component}'][@{PROPS_ATTRIBUTE}]")
    if not markers:
        logger.debug(f"No embedded {component} component found")
        return None

    return json.loads(markers[0].get(PROPS_ATTRIBUTE))


def iter_payload_records(payload: Any) -> list[dict]:
    """
    Records of a decoded payload.

    A list is used as-is; for an object, every list-valued key is
    concatenated in key order. Non-object entries are dropped.
    """
    if isinstance(payload, list):
        records = payload
    elif isinstance(payload, dict):
        records = []
        for value in payload.values():
            if isinstance(value, list):
                records.extend(value)
    else:
        records = []

    return [record for record in records if isinstance(record, dict)]


def normalize_embedded_activity(raw: dict, base_url: str = BASE_URL) -> MyActivity:
    """Normalize one activity record from the MemberActivities component."""
    url = absolute_url(_string(raw.get('href')), base_url) or ''
    leader, leader_url = normalize_leader(raw.get('leader'), base_url)
    position = _string(raw.get('position'))

    return MyActivity(
        uid=_uid(raw, url),
        title=_string(raw.get('title')) or '',
        url=url,
        category=_string(raw.get('category')),
        activity_type=_string(raw.get('activity_type')),
        start_date=iso_date(raw.get('start')),
        leader=leader,
        leader_url=leader_url,
        is_leader=is_leader_role(position),
        position=position,
        status=_string(raw.get('status')),
        result=_string(raw.get('result')),
        difficulty=_string(raw.get('difficulty')),
        leader_rating=None,
    )


def normalize_embedded_course(raw: dict, base_url: str = BASE_URL) -> MyCourse:
    """Normalize one course record from the MemberCourses component."""
    url = absolute_url(_string(raw.get('href')), base_url) or ''
    dates = _string(raw.get('dates'))
    role = _string(raw.get('role')) or _string(raw.get('position'))

    return MyCourse(
        uid=_uid(raw, url),
        title=_string(raw.get('title')) or '',
        url=url,
        start_date=iso_date(raw.get('start')),
        dates=' '.join(unescape(dates).split()) if dates else None,
        role=role,
        is_leader=is_leader_role(role),
        status=_string(raw.get('status')),
        result=_string(raw.get('result')),
    )


def parse_embedded_activities(tree, base_url: str = BASE_URL) -> list[MyActivity]:
    """Activities from the page's MemberActivities component ([] if absent)."""
    payload = extract_embedded_json(tree, ACTIVITIES_COMPONENT)
    return [normalize_embedded_activity(raw, base_url) for raw in iter_payload_records(payload)]


def parse_embedded_courses(tree, base_url: str = BASE_URL) -> list[MyCourse]:
    """Courses from the page's MemberCourses component ([] if absent)."""
    payload = extract_embedded_json(tree, COURSES_COMPONENT)
    return [normalize_embedded_course(raw, base_url) for raw in iter_payload_records(payload)]


def normalize_history_record(raw: dict, base_url: str = BASE_URL) -> MyActivity:
    """
    Normalize one record of the member-activity-history.json endpoint.

    trip_results is preferred over result; an explicit is_leader flag wins
    over the one derived from position.
    """
    url = absolute_url(_string(raw.get('href')), base_url) or ''
    leader, leader_url = normalize_leader(raw.get('leader'), base_url)
    position = _string(raw.get('position'))
    is_leader = raw.get('is_leader')

    return MyActivity(
        uid=_uid(raw, url),
        title=_string(raw.get('title')) or '',
        url=url,
        category=_string(raw.get('category')),
        activity_type=_string(raw.get('activity_type')),
        start_date=iso_date(raw.get('start') or raw.get('date')),
        leader=leader,
        leader_url=leader_url,
        is_leader=is_leader if isinstance(is_leader, bool) else is_leader_role(position),
        position=position,
        status=_string(raw.get('status')) or _string(raw.get('review_state')),
        result=_string(raw.get('trip_results')) or _string(raw.get('result')),
        difficulty=_string(raw.get('difficulty_rating')),
        leader_rating=_string(raw.get('leader_rating')),
    )


def parse_history_payload(payload: Any, base_url: str = BASE_URL) -> list[MyActivity]:
    """
    Normalize a member-activity-history.json response.

    The endpoint returns either a bare list or an object wrapping the list
    under one of 'items', 'results' or 'data'.
    """
    if isinstance(payload, dict):
        for key in PAYLOAD_LIST_KEYS:
            if isinstance(payload.get(key), list):
                payload = payload[key]
                break
        else:
            payload = []

    return [normalize_history_record(raw, base_url) for raw in iter_payload_records(payload)]
