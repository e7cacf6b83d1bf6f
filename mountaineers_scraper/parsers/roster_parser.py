"""Parser for the activity roster tab."""

from typing import Optional

from ..config import BASE_URL
from ..models import RosterEntry
from .common import extract_text, has_class, resolve_url, select_first


CONTACT_XPATH = f"//*[{has_class('roster-contact')}]"

# Tried in order; the first with text wins
NAME_XPATHS = (
    f"(.//*[{has_class('roster-name')}])[1]",
    f"(.//*[{has_class('contact-name')}])[1]",
    '(.//a)[1]',
)
PROFILE_LINK_XPATHS = (
    f"(.//a[{has_class('contact-modal')}])[1]",
    "(.//a[contains(@href, '/members/')])[1]",
)


def _first_text(contact, paths: tuple) -> Optional[str]:
    for path in paths:
        text = extract_text(contact, path)
        if text:
            return text
    return None


def _profile_url(contact, base_url: str) -> Optional[str]:
    for path in PROFILE_LINK_XPATHS:
        url = resolve_url(contact, path, base_url)
        if url:
            return url
    return None


def parse_roster(tree, base_url: str = BASE_URL) -> list[RosterEntry]:
    """
    Parse roster contacts in page order.

    Args:
        tree: Loaded roster tab fragment
        base_url: Site origin used to resolve profile links

    Returns:
        One RosterEntry per contact block; name is 'Unknown' when no name
        element has text
    """
    entries = []

    for contact in tree.xpath(CONTACT_XPATH):
        avatar = select_first(contact, '(.//img)[1]/@src')
        entries.append(RosterEntry(
            name=_first_text(contact, NAME_XPATHS) or 'Unknown',
            profile_url=_profile_url(contact, base_url),
            role=extract_text(contact, f"(.//*[{has_class('roster-position')}])[1]"),
            avatar=str(avatar) if avatar else None,
        ))

    return entries
