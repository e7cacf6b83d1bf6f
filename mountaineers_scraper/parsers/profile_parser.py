"""Parser for Mountaineers member profile pages."""

import re
from typing import Optional

from ..config import BASE_URL
from ..models import Badge, MemberProfile
from .common import (
    absolute_url,
    extract_text,
    has_class,
    link_text,
    require_url,
    slug_from_url,
    title_tag_name,
)


PROFILE_PLACEHOLDER = 'Profile'
PROFILE_LINK_TEXT = 'My Profile'

# Older and newer profile templates, in preference order
COMMITTEE_CONTAINERS = ('profile-committees', 'committees')
BADGE_CONTAINERS = ('profile-badges', 'badges', 'badge-list')

MEMBER_SINCE_PATTERN = re.compile(r'member since:\s*(.+)', re.IGNORECASE)
BRANCH_PATTERN = re.compile(r'branch:\s*(.+)', re.IGNORECASE)
EARNED_PATTERN = re.compile(r'earned:\s*([^,;]+)', re.IGNORECASE)
EXPIRES_PATTERN = re.compile(r'expires:\s*([^,;]+)', re.IGNORECASE)


def extract_profile_name(tree, slug: str = '') -> str:
    """
    Member display name.

    Profile pages carry a placeholder "Profile" heading next to the real
    name. Headings equal to the placeholder are skipped; the <title> tag
    ('Jane Doe — The Mountaineers') is the next source and the member slug
    the last one.
    """
    headings = tree.xpath(f"//h1[{has_class('documentFirstHeading')}]") + tree.xpath('//h1')
    for heading in headings:
        name = extract_text(heading)
        if name and name != PROFILE_PLACEHOLDER:
            return name

    return title_tag_name(tree) or slug


def parse_badge(link) -> Optional[Badge]:
    """
    Badge from its profile link; None when the link has no text.

    Earned and expiry dates come from the title attribute,
    e.g. title="Earned: 2020-01-15; Expires: 2025-01-15".
    """
    name = extract_text(link)
    if not name:
        return None

    title_attr = link.get('title') or ''
    earned = EARNED_PATTERN.search(title_attr)
    expires = EXPIRES_PATTERN.search(title_attr)

    return Badge(
        name=name,
        earned=earned.group(1).strip() if earned else None,
        expires=expires.group(1).strip() if expires else None,
    )


def extract_committees(tree) -> list[str]:
    """Committee names from the first committee container that has any."""
    for container in COMMITTEE_CONTAINERS:
        links = tree.xpath(f"//*[{has_class(container)}]//li//a")
        names = [name for name in (extract_text(link) for link in links) if name]
        if names:
            return names
    return []


def extract_badges(tree) -> list[Badge]:
    """Badges from the first badge container that has any, empty names skipped."""
    for container in BADGE_CONTAINERS:
        links = tree.xpath(f"//*[{has_class(container)}]//*[{has_class('badge')}]//a")
        badges = [badge for badge in (parse_badge(link) for link in links) if badge]
        if badges:
            return badges
    return []


def extract_email(tree) -> Optional[str]:
    """
    Email address from the .email container.

    Other mailto links on the page (e.g. "Share via Email") are ignored.
    """
    links = tree.xpath(f"//*[{has_class('email')}]//a[starts-with(@href, 'mailto:')]")
    if not links:
        return None

    return extract_text(links[0]) or links[0].get('href')[len('mailto:'):].strip() or None


def parse_member_profile(tree, profile_url: str) -> MemberProfile:
    """
    Parse a member profile page.

    Args:
        tree: Loaded profile document
        profile_url: The canonical profile URL (used as-is)

    Returns:
        MemberProfile with committees and badges as (possibly empty) lists
    """
    require_url(profile_url)

    member_since = None
    branch = None

    for item in tree.xpath(f"//ul[{has_class('details')}]/li"):
        full_text = extract_text(item) or ''
        lowered = full_text.lower()

        if lowered.startswith('member since'):
            match = MEMBER_SINCE_PATTERN.search(full_text)
            if match:
                member_since = match.group(1).strip()
        elif lowered.startswith('branch'):
            match = BRANCH_PATTERN.search(full_text)
            branch = link_text(item) or (match.group(1).strip() if match else None)

    return MemberProfile(
        name=extract_profile_name(tree, slug_from_url(profile_url)),
        url=profile_url,
        member_since=member_since,
        branch=branch,
        email=extract_email(tree),
        committees=extract_committees(tree),
        badges=extract_badges(tree),
    )


def find_profile_link(tree, base_url: str = BASE_URL) -> Optional[str]:
    """
    URL of the logged-in member's own profile.

    Only the link whose text is exactly "My Profile" counts; other member
    links on the page (leaders, contacts) are ignored.
    """
    for link in tree.xpath("//a[contains(@href, '/members/')]"):
        if extract_text(link) == PROFILE_LINK_TEXT:
            return absolute_url(link.get('href'), base_url)
    return None
