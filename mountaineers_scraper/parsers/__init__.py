"""Parsers for extracting data from Mountaineers HTML pages."""

from .common import load_document, extract_text, resolve_url, parse_result_count, slug_from_url
from .search_parser import (
    parse_activity_results,
    parse_course_results,
    parse_trip_report_results,
    parse_route_results,
)
from .detail_parser import parse_activity_detail
from .trip_report_parser import parse_trip_report_detail
from .route_parser import parse_route_detail
from .course_parser import parse_course_detail
from .profile_parser import parse_member_profile, find_profile_link
from .roster_parser import parse_roster
from .embedded_json import (
    extract_embedded_json,
    parse_embedded_activities,
    parse_embedded_courses,
    parse_history_payload,
)

__all__ = [
    'load_document',
    'extract_text',
    'resolve_url',
    'parse_result_count',
    'slug_from_url',
    'parse_activity_results',
    'parse_course_results',
    'parse_trip_report_results',
    'parse_route_results',
    'parse_activity_detail',
    'parse_trip_report_detail',
    'parse_route_detail',
    'parse_course_detail',
    'parse_member_profile',
    'find_profile_link',
    'parse_roster',
    'extract_embedded_json',
    'parse_embedded_activities',
    'parse_embedded_courses',
    'parse_history_payload',
]
