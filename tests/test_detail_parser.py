"""Tests for activity detail parser."""

import pytest
from pathlib import Path

from mountaineers_scraper.models import LeaderEntry
from mountaineers_scraper.parsers import load_document
from mountaineers_scraper.parsers.detail_parser import (
    extract_leaders,
    extract_tabs,
    parse_activity_detail,
)


ACTIVITY_URL = "https://www.mountaineers.org/activities/activities/backpack-enchantments-traverse"


@pytest.fixture
def activity_detail():
    """Load sample activity detail page (multi-day, two leaders)."""
    fixture_path = Path(__file__).parent / "fixtures" / "activity_detail.html"
    return load_document(fixture_path.read_text())


def page(body: str):
    return load_document(f"<html><body><h1>Test</h1>{body}</body></html>")


def test_parse_activity_detail(activity_detail):
    """Test parsing all fields from the sample page."""
    activity = parse_activity_detail(activity_detail, ACTIVITY_URL)

    assert activity.title == "Backpack - Enchantments Traverse"
    assert activity.url == ACTIVITY_URL
    assert activity.type == "Backpacking"
    assert activity.date == "Sat, Feb 7, 2026 - Sun, Feb 15, 2026"
    assert activity.end_date == "2026-02-15"
    assert activity.committee == "Seattle Backpacking Committee"
    assert activity.activity_type == "Backpacking"
    assert activity.audience == "Adults"
    assert activity.difficulty == "Challenging"
    assert activity.mileage == "18 mi"
    assert activity.elevation_gain == "4,500 ft"
    assert activity.availability == "3 of 8 spots"
    assert activity.registration_open == "Dec 1, 2025"
    assert activity.registration_close == "Feb 1, 2026"
    assert activity.branch == "Seattle"
    assert activity.prerequisites == "Backpacking Building Blocks"


def test_parse_activity_detail_leaders(activity_detail):
    """Every named leader is kept in order; the first fills leader/leader_url."""
    activity = parse_activity_detail(activity_detail, ACTIVITY_URL)

    assert activity.leaders == [
        LeaderEntry(
            name="Jane Doe",
            url="https://www.mountaineers.org/members/jane-doe",
            role="Primary Leader",
        ),
        LeaderEntry(
            name="Bob Smith",
            url="https://www.mountaineers.org/members/robert-smith",
            role="Assistant Leader",
        ),
    ]
    assert activity.leader == "Jane Doe"
    assert activity.leader_url == "https://www.mountaineers.org/members/jane-doe"


def test_parse_activity_detail_sections_and_tabs(activity_detail):
    activity = parse_activity_detail(activity_detail, ACTIVITY_URL)

    assert activity.leader_notes == "Bring rain gear and extra water.\n\nPermits are arranged by the leader."
    assert activity.meeting_place == "Stuart Lake trailhead at 6am."
    assert activity.route_place == "Enchantment Lakes - Snow Lakes"
    assert activity.required_equipment == "Ten Essentials\nBear canister\n\nMicrospikes"


def test_parse_activity_detail_minimal():
    """A page with only a heading has every other field None."""
    activity = parse_activity_detail(load_document("<html><body><h1>Simple Activity</h1></body></html>"), ACTIVITY_URL)

    assert activity.title == "Simple Activity"
    assert activity.url == ACTIVITY_URL
    assert activity.leaders == []
    for name in ('type', 'date', 'end_date', 'committee', 'activity_type', 'audience',
                 'difficulty', 'mileage', 'elevation_gain', 'availability',
                 'registration_open', 'registration_close', 'branch', 'leader',
                 'leader_url', 'leader_notes', 'meeting_place', 'route_place',
                 'required_equipment', 'prerequisites'):
        assert getattr(activity, name) is None


def test_parse_activity_detail_requires_url():
    with pytest.raises(ValueError):
        parse_activity_detail(page(""), "")


def test_single_date_has_no_end_date():
    activity = parse_activity_detail(page('<ul class="details"><li>Saturday, Jan 15, 2025</li></ul>'), ACTIVITY_URL)

    assert activity.date == "Saturday, Jan 15, 2025"
    assert activity.end_date is None


def test_only_first_unlabeled_item_is_date():
    activity = parse_activity_detail(page("""
        <ul class="details">
          <li>First Date</li>
          <li>Should Be Ignored</li>
          <li><label>Branch:</label> Olympia</li>
        </ul>
    """), ACTIVITY_URL)

    assert activity.date == "First Date"
    assert activity.branch == "Olympia"


def test_strong_labels():
    activity = parse_activity_detail(page("""
        <ul class="details">
          <li><strong>Difficulty:</strong> Hard</li>
          <li><strong>Branch:</strong> Everett</li>
        </ul>
    """), ACTIVITY_URL)

    assert activity.difficulty == "Hard"
    assert activity.branch == "Everett"


def test_distance_label_fills_mileage():
    activity = parse_activity_detail(page('<ul class="details"><li><label>Distance:</label> 12 miles</li></ul>'), ACTIVITY_URL)
    assert activity.mileage == "12 miles"


def test_leader_rating_is_discarded():
    activity = parse_activity_detail(page("""
        <ul class="details">
          <li><label>Leader Rating:</label> A</li>
          <li><label>Difficulty:</label> Hard</li>
        </ul>
    """), ACTIVITY_URL)

    assert activity.difficulty == "Hard"
    assert activity.leader is None


def test_assistant_availability_is_skipped():
    activity = parse_activity_detail(page("""
        <ul class="details">
          <li><label>Assistant Availability:</label> 2 spots</li>
          <li><label>Availability:</label> 5 spots</li>
        </ul>
    """), ACTIVITY_URL)

    assert activity.availability == "5 spots"


def test_committee_falls_back_to_value_text():
    activity = parse_activity_detail(page(
        '<ul class="details"><li><label>Committee:</label> The Backcountry Committee</li></ul>'
    ), ACTIVITY_URL)

    assert activity.committee == "The Backcountry Committee"


def test_leader_name_from_div_when_no_alt():
    leaders = extract_leaders(page("""
        <div class="leaders">
          <div class="roster-contact">
            <img src="/images/default-avatar.jpg" />
            <div>Alice Wonderland</div>
            <div class="roster-position">Leader</div>
          </div>
        </div>
    """))

    assert leaders == [LeaderEntry(name="Alice Wonderland", url=None, role="Leader")]


def test_explicit_member_link_wins_over_image_src():
    """The anchor href wins when it points at a different member than the image."""
    leaders = extract_leaders(page("""
        <div class="leaders">
          <div class="roster-contact">
            <img src="/members/old-slug/@@images/portrait" alt="Charlie" />
            <a href="/members/charlie-brown">Profile</a>
          </div>
        </div>
    """))

    assert leaders[0].name == "Charlie"
    assert leaders[0].url == "https://www.mountaineers.org/members/charlie-brown"


def test_leader_url_from_absolute_link():
    leaders = extract_leaders(page("""
        <div class="leaders">
          <div class="roster-contact">
            <img src="/images/default.jpg" alt="Charlie" />
            <a href="https://www.mountaineers.org/members/charlie-abs">Profile</a>
          </div>
        </div>
    """))

    assert leaders[0].url == "https://www.mountaineers.org/members/charlie-abs"


def test_nameless_first_leader_fills_singular_fields():
    """The first contact block drives leader/leader_url even without a name."""
    activity = parse_activity_detail(page("""
        <div class="leaders">
          <div class="roster-contact">
            <img src="/members/first-lead/@@images/portrait" alt="" />
          </div>
          <div class="roster-contact">
            <img src="/members/second/@@images/portrait" alt="Second Person" />
          </div>
        </div>
    """), ACTIVITY_URL)

    assert activity.leader is None
    assert activity.leader_url == "https://www.mountaineers.org/members/first-lead"
    assert activity.leaders == [
        LeaderEntry(name="Second Person", url="https://www.mountaineers.org/members/second", role=None),
    ]


def test_place_tab_fills_route_place():
    tabs = extract_tabs(page("""
        <div class="tabs">
          <div class="tab">
            <div class="tab-title">Place</div>
            <div class="tab-content">Some trailhead location</div>
          </div>
        </div>
    """))

    assert tabs['route_place'] == "Some trailhead location"
    assert tabs['required_equipment'] is None
