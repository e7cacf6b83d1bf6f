"""Tests for tool handlers and the HTTP entry point."""

import json
import pytest
from pathlib import Path

from mountaineers_scraper.functions import (
    HANDLERS,
    get_activity_handler,
    get_activity_history_handler,
    get_activity_roster_handler,
    get_course_handler,
    get_member_profile_handler,
    get_my_activities_handler,
    get_my_badges_handler,
    get_my_courses_handler,
    get_route_handler,
    get_trip_report_handler,
    search_activities_handler,
    search_courses_handler,
    search_routes_handler,
    search_trip_reports_handler,
    whoami_handler,
)
from mountaineers_scraper.functions.search import ACTIVITY_FACETS, build_faceted_params
from mountaineers_scraper.http_client import AuthenticationError


BASE = "https://www.mountaineers.org"
FIXTURES = Path(__file__).parent / "fixtures"


def fixture_text(name: str) -> str:
    return (FIXTURES / name).read_text()


@pytest.fixture
def client(mocker):
    """Client double serving fixture pages."""
    client = mocker.MagicMock()
    client.base_url = BASE
    return client


@pytest.fixture
def member_client(client):
    """Client double for a logged-in member (jane-doe)."""
    pages = {
        '/': fixture_text("home_logged_in.html"),
        f"{BASE}/members/jane-doe": fixture_text("member_profile.html"),
    }
    client.fetch_page.side_effect = lambda url, authenticated=False: pages[url]
    client.fetch_json.return_value = json.loads(fixture_text("member_activity_history.json"))
    return client


# Search handlers

def test_search_activities_handler(client):
    """Test a successful search."""
    client.fetch_faceted_query.return_value = fixture_text("activity_search_results.html")

    result = search_activities_handler({'activity_type': 'Climbing', 'open_only': True, 'page': 1}, client=client)

    # Verify result
    assert result['status'] == 'success'
    assert result['result']['total_count'] == 42
    assert result['result']['page'] == 1
    assert result['result']['has_more'] is True
    assert result['result']['items'][0]['title'] == "Mt Rainier Climb"

    # Verify the faceted query
    client.fetch_faceted_query.assert_called_once_with(
        '/activities/activities',
        [('c4[]', 'Climbing'), ('c17', '1'), ('b_start', '20')],
    )


@pytest.mark.parametrize('handler,path,arguments,params', [
    (search_courses_handler, '/activities/courses-clinics-seminars',
     {'branch': 'Seattle', 'query': 'navigation'}, [('c2', 'navigation'), ('c7[]', 'Seattle')]),
    (search_trip_reports_handler, '/activities/trip-reports',
     {'activity_type': 'Climbing'}, [('c4[]', 'Climbing')]),
    (search_routes_handler, '/activities/routes-places',
     {'difficulty': 'Moderate', 'used_for': 'Basic Alpine'}, [('c5[]', 'Moderate'), ('c9[]', 'Basic Alpine')]),
])
def test_search_handlers_query_their_listing(client, handler, path, arguments, params):
    client.fetch_faceted_query.return_value = '<div id="faceted-result-count">0 results</div>'

    result = handler(arguments, client=client)

    assert result['status'] == 'success'
    assert result['result'] == {'total_count': 0, 'items': [], 'page': 0, 'has_more': False}
    client.fetch_faceted_query.assert_called_once_with(path, params)


def test_build_faceted_params_first_page_has_no_offset():
    params, page = build_faceted_params({'query': 'rainier', 'open_only': False}, ACTIVITY_FACETS)

    assert params == [('c2', 'rainier')]
    assert page == 0


@pytest.mark.parametrize('page', [-1, 'two', 1.5])
def test_search_rejects_bad_page(client, page):
    result = search_activities_handler({'page': page}, client=client)

    assert result['status'] == 'error'
    assert 'page' in result['error']
    client.fetch_faceted_query.assert_not_called()


def test_search_handler_http_error(client):
    """Errors are reported, not raised."""
    client.fetch_faceted_query.side_effect = Exception('Network error')

    result = search_activities_handler({}, client=client)

    assert result['status'] == 'error'
    assert 'Network error' in result['error']


# Detail handlers

def test_get_activity_handler_from_slug(client):
    client.fetch_page.return_value = fixture_text("activity_detail.html")

    result = get_activity_handler({'url': 'backpack-enchantments-traverse'}, client=client)

    assert result['status'] == 'success'
    assert result['result']['url'] == f"{BASE}/activities/activities/backpack-enchantments-traverse"
    assert result['result']['end_date'] == "2026-02-15"
    assert len(result['result']['leaders']) == 2
    client.fetch_page.assert_called_once_with(f"{BASE}/activities/activities/backpack-enchantments-traverse")


def test_get_activity_handler_full_url(client):
    client.fetch_page.return_value = fixture_text("activity_detail.html")
    url = "https://www.mountaineers.org/activities/activities/some-other-activity"

    get_activity_handler({'url': url}, client=client)

    client.fetch_page.assert_called_once_with(url)


def test_get_activity_handler_missing_url(client):
    result = get_activity_handler({}, client=client)

    assert result['status'] == 'error'
    assert 'url' in result['error']
    client.fetch_page.assert_not_called()


@pytest.mark.parametrize('handler,fixture_name,slug,expected_url,title', [
    (get_trip_report_handler, "trip_report_detail.html", "mt-baker",
     f"{BASE}/activities/trip-reports/mt-baker", "Mt Baker Summit Trip Report"),
    (get_route_handler, "route_detail.html", "mount-si-old-trail",
     f"{BASE}/activities/routes-places/mount-si-old-trail", "Mount Si Old Trail"),
    (get_course_handler, "course_detail.html", "wilderness-navigation",
     f"{BASE}/courses/courses-clinics-seminars/wilderness-navigation", "Wilderness Navigation"),
])
def test_detail_handlers_build_urls_from_slugs(client, handler, fixture_name, slug, expected_url, title):
    client.fetch_page.return_value = fixture_text(fixture_name)

    result = handler({'url': slug}, client=client)

    assert result['status'] == 'success'
    assert result['result']['url'] == expected_url
    assert result['result']['title'] == title
    client.fetch_page.assert_called_once_with(expected_url)


def test_get_member_profile_handler(client):
    client.fetch_page.return_value = fixture_text("member_profile.html")

    result = get_member_profile_handler({'member_slug': 'jane-doe'}, client=client)

    assert result['status'] == 'success'
    assert result['result']['name'] == "Jane Doe"
    assert result['result']['email'] == "jane@example.com"
    client.fetch_page.assert_called_once_with(f"{BASE}/members/jane-doe", authenticated=True)


def test_get_activity_roster_handler(client):
    client.fetch_roster_tab.return_value = fixture_text("roster_tab.html")

    result = get_activity_roster_handler({'url': 'day-hike-rock-candy-mountain-11'}, client=client)

    assert result['status'] == 'success'
    assert result['result']['total_count'] == 3
    assert result['result']['limit'] == 0
    assert result['result']['items'][0]['name'] == "Jane Doe"
    client.fetch_roster_tab.assert_called_once_with(f"{BASE}/activities/activities/day-hike-rock-candy-mountain-11")


# Member handlers

def test_whoami_handler(member_client):
    result = whoami_handler({}, client=member_client)

    assert result == {
        'status': 'success',
        'result': {
            'name': "Jane Doe",
            'slug': "jane-doe",
            'profile_url': f"{BASE}/members/jane-doe",
        },
    }


def test_whoami_handler_without_profile_link(client):
    client.fetch_page.return_value = '<html><body><a href="/login">Log in</a></body></html>'

    result = whoami_handler({}, client=client)

    assert result['status'] == 'error'
    assert 'Could not find profile URL' in result['error']


def test_whoami_handler_falls_back_to_slug(client):
    pages = {
        '/': fixture_text("home_logged_in.html"),
        f"{BASE}/members/jane-doe": "<html><head><title>The Mountaineers</title></head><body><h1>Profile</h1></body></html>",
    }
    client.fetch_page.side_effect = lambda url, authenticated=False: pages[url]

    result = whoami_handler({}, client=client)

    assert result['result']['name'] == "jane-doe"


def test_get_activity_history_handler(member_client):
    result = get_activity_history_handler({}, client=member_client)

    assert result['status'] == 'success'
    assert result['result']['limit'] == 20
    assert result['result']['total_count'] == 4
    assert [a['start_date'] for a in result['result']['items']] == ["2025-06-01", "2024-08-15", "2024-01-01", None]
    member_client.fetch_json.assert_called_once_with(
        '/members/jane-doe/member-activity-history.json', authenticated=True
    )


def test_get_activity_history_handler_filters_then_limits(member_client):
    result = get_activity_history_handler({'category': 'TRIP', 'limit': 1}, client=member_client)

    assert result['result']['total_count'] == 3
    assert result['result']['limit'] == 1
    assert [a['title'] for a in result['result']['items']] == ["Climb - Mount Rainier"]


def test_get_activity_history_handler_date_range(member_client):
    result = get_activity_history_handler({'date_from': '2024-06-01', 'limit': 0}, client=member_client)

    assert [a['start_date'] for a in result['result']['items']] == ["2025-06-01", "2024-08-15"]


def test_get_my_activities_handler(member_client):
    """Embedded activities, soonest first."""
    result = get_my_activities_handler({}, client=member_client)

    assert result['status'] == 'success'
    assert [a['start_date'] for a in result['result']['items']] == ["2025-07-12", "2026-10-25", "2026-11-08"]
    assert result['result']['limit'] == 0


def test_get_my_activities_handler_filters(member_client):
    result = get_my_activities_handler({'activity_type': 'scrambling'}, client=member_client)

    assert [a['title'] for a in result['result']['items']] == ["Scramble - Kendall Peak"]
    assert result['result']['items'][0]['is_leader'] is True


def test_get_my_courses_handler(member_client):
    result = get_my_courses_handler({'role': 'instructor'}, client=member_client)

    assert result['status'] == 'success'
    assert result['result']['total_count'] == 1
    assert result['result']['items'][0]['uid'] == "nav-2025"


def test_get_my_badges_handler(member_client, mocker):
    mocker.patch('mountaineers_scraper.postprocess.site_today', return_value="2026-10-17")

    result = get_my_badges_handler({'active_only': True, 'name': 'wilderness'}, client=member_client)

    assert result['status'] == 'success'
    assert [b['name'] for b in result['result']['items']] == ["Wilderness Navigation", "Wilderness First Aid"]


def test_member_handler_without_credentials(client):
    client.fetch_page.side_effect = AuthenticationError(
        "MOUNTAINEERS_USERNAME and MOUNTAINEERS_PASSWORD environment variables required"
    )

    result = get_my_badges_handler({}, client=client)

    assert result['status'] == 'error'
    assert 'MOUNTAINEERS_USERNAME' in result['error']


# Entry point

def test_handlers_registry():
    assert set(HANDLERS) == {
        'search_activities', 'search_courses', 'search_trip_reports', 'search_routes',
        'get_activity', 'get_trip_report', 'get_route', 'get_course',
        'get_member_profile', 'get_activity_roster',
        'whoami', 'get_my_activities', 'get_activity_history', 'get_my_courses', 'get_my_badges',
    }


def test_tools_dispatches_to_handler(mocker):
    import main

    handler = mocker.MagicMock(return_value={'status': 'success', 'result': {}})
    mocker.patch.dict(main.HANDLERS, {'whoami': handler})
    request = mocker.MagicMock()
    request.get_json.return_value = {'tool': 'whoami', 'arguments': {'x': 1}}

    result = main.tools(request)

    assert result == {'status': 'success', 'result': {}}
    handler.assert_called_once_with({'x': 1})


def test_tools_unknown_tool(mocker):
    import main

    request = mocker.MagicMock()
    request.get_json.return_value = {'tool': 'delete_everything'}

    result = main.tools(request)

    assert result['status'] == 'error'
    assert 'Unknown tool' in result['error']


def test_tools_rejects_non_object_arguments():
    import main

    result = main.dispatch({'tool': 'whoami', 'arguments': ['not', 'a', 'dict']})

    assert result['status'] == 'error'


def test_tools_rejects_non_object_body(mocker):
    import main

    request = mocker.MagicMock()
    request.get_json.return_value = [{'tool': 'whoami'}]

    result = main.tools(request)

    assert result == {'status': 'error', 'error': 'request body must be a JSON object'}
