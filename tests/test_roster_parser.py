"""Tests for roster parser."""

import pytest
from pathlib import Path

from mountaineers_scraper.models import RosterEntry
from mountaineers_scraper.parsers import load_document, parse_roster


@pytest.fixture
def roster_tab():
    fixture_path = Path(__file__).parent / "fixtures" / "roster_tab.html"
    return load_document(fixture_path.read_text())


def test_parse_roster(roster_tab):
    entries = parse_roster(roster_tab)

    assert entries == [
        RosterEntry(
            name="Jane Doe",
            profile_url="https://www.mountaineers.org/members/jane-doe",
            role="Trip Leader",
            avatar="/members/jane-doe/@@images/portrait",
        ),
        RosterEntry(
            name="John Smith",
            profile_url="https://www.mountaineers.org/members/john-smith",
            role="Participant",
            avatar="/members/john-smith/@@images/portrait",
        ),
        RosterEntry(
            name="Unknown",
            profile_url=None,
            role="Participant",
            avatar=None,
        ),
    ]


def test_name_candidates_in_priority_order():
    """.roster-name wins over an earlier link with text."""
    entries = parse_roster(load_document("""
        <div class="roster-contact">
          <a href="/members/jane-doe">View profile</a>
          <div class="roster-name">Jane Doe</div>
        </div>
    """))

    assert entries[0].name == "Jane Doe"


def test_contact_modal_link_preferred():
    entries = parse_roster(load_document("""
        <div class="roster-contact">
          <a href="/members/someone-else">Someone</a>
          <a class="contact-modal" href="/members/jane-doe">Jane Doe</a>
        </div>
    """))

    assert entries[0].profile_url == "https://www.mountaineers.org/members/jane-doe"


def test_empty_roster():
    assert parse_roster(load_document('<div class="empty-roster"></div>')) == []


@pytest.mark.parametrize('href', [
    "/members/jane-doe",
    "https://www.mountaineers.org/members/jane-doe",
])
def test_profile_url_from_relative_or_absolute_href(href):
    entries = parse_roster(load_document(f"""
        <div class="roster-contact">
          <a class="contact-modal" href="{href}">Jane Doe</a>
        </div>
    """))

    assert entries[0].profile_url == "https://www.mountaineers.org/members/jane-doe"
