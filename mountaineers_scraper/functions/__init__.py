"""Request handlers, one per tool."""

from .search import (
    search_activities_handler,
    search_courses_handler,
    search_trip_reports_handler,
    search_routes_handler,
)
from .details import (
    get_activity_handler,
    get_trip_report_handler,
    get_route_handler,
    get_course_handler,
    get_member_profile_handler,
    get_activity_roster_handler,
)
from .member import (
    whoami_handler,
    get_my_activities_handler,
    get_activity_history_handler,
    get_my_courses_handler,
    get_my_badges_handler,
)

# Tool name -> handler
HANDLERS = {
    'search_activities': search_activities_handler,
    'search_courses': search_courses_handler,
    'search_trip_reports': search_trip_reports_handler,
    'search_routes': search_routes_handler,
    'get_activity': get_activity_handler,
    'get_trip_report': get_trip_report_handler,
    'get_route': get_route_handler,
    'get_course': get_course_handler,
    'get_member_profile': get_member_profile_handler,
    'get_activity_roster': get_activity_roster_handler,
    'whoami': whoami_handler,
    'get_my_activities': get_my_activities_handler,
    'get_activity_history': get_activity_history_handler,
    'get_my_courses': get_my_courses_handler,
    'get_my_badges': get_my_badges_handler,
}

__all__ = [
    'HANDLERS',
    'search_activities_handler',
    'search_courses_handler',
    'search_trip_reports_handler',
    'search_routes_handler',
    'get_activity_handler',
    'get_trip_report_handler',
    'get_route_handler',
    'get_course_handler',
    'get_member_profile_handler',
    'get_activity_roster_handler',
    'whoami_handler',
    'get_my_activities_handler',
    'get_activity_history_handler',
    'get_my_courses_handler',
    'get_my_badges_handler',
]
