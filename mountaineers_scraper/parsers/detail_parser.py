"""Parser for Mountaineers activity detail pages."""

import logging
from typing import Optional

from ..config import BASE_URL
from ..models import ActivityDetail, LeaderEntry
from .common import (
    LabelRule,
    absolute_url,
    contact_name,
    extract_block_text,
    extract_details,
    extract_text,
    has_class,
    member_url_from_src,
    page_title,
    parse_date_range,
    require_url,
    select_first,
    value_text,
)


logger = logging.getLogger(__name__)

DETAILS_ITEM_XPATH = f"//ul[{has_class('details')}]//li"
LEADER_CONTACT_XPATH = f"//div[{has_class('leaders')}]//div[{has_class('roster-contact')}]"
ROLE_XPATH = f"(.//*[{has_class('roster-position')}])[1]"
CONTENT_SECTION_XPATH = f"//div[{has_class('content-text')}]/div"
TAB_XPATH = f"//div[{has_class('tabs')}]//div[{has_class('tab')}]"

# Evaluated top to bottom; the first matching rule wins.
ACTIVITY_DETAIL_RULES = [
    LabelRule(('committee',), 'committee', prefer_link=True),
    LabelRule(('activity type',), 'activity_type'),
    LabelRule(('audience',), 'audience'),
    LabelRule(('difficulty',), 'difficulty'),
    LabelRule(('leader rating',), None),
    LabelRule(('mileage',), 'mileage'),
    LabelRule(('distance',), 'mileage'),
    LabelRule(('elevation gain',), 'elevation_gain'),
    LabelRule(('availability',), 'availability', exclude=('assistant',)),
    LabelRule(('registration open',), 'registration_open'),
    LabelRule(('registration close',), 'registration_close'),
    LabelRule(('branch',), 'branch', prefer_link=True),
    LabelRule(('prerequisite',), 'prerequisites'),
]


def parse_activity_detail(tree, activity_url: str, base_url: str = BASE_URL) -> ActivityDetail:
    """
    Parse activity detail page and extract all fields.

    Args:
        tree: Loaded activity detail document
        activity_url: The canonical URL of the activity (used as-is)
        base_url: Site origin used to resolve relative links

    Returns:
        ActivityDetail with every field present (None when missing)

    Raises:
        ValueError: If activity_url is empty

    Example:
        >>> tree = load_document('<h1>Simple Activity</h1>')
        >>> parse_activity_detail(tree, 'https://example.com/activity-1').title
        'Simple Activity'
    """
    require_url(activity_url)

    fields = extract_details(tree, ACTIVITY_DETAIL_RULES, DETAILS_ITEM_XPATH)
    fields['end_date'] = parse_date_range(fields.get('date'))[1]

    fields['leaders'] = extract_leaders(tree, base_url)
    fields['leader'], fields['leader_url'] = extract_primary_leader(tree, base_url)

    fields.update(extract_content_sections(tree))
    fields.update(extract_tabs(tree))

    return ActivityDetail(
        title=page_title(tree),
        url=activity_url,
        type=extract_text(tree, f"(//h2[{has_class('kicker')}])[1]"),
        **fields,
    )


def extract_leader_url(contact, base_url: str = BASE_URL) -> Optional[str]:
    """
    Leader profile URL from a roster-contact block.

    An explicit /members/ link wins over the path embedded in the image src.
    """
    link = select_first(contact, "(.//a[contains(@href, '/members/')])[1]")
    if link is not None:
        return absolute_url(link.get('href'), base_url)

    return member_url_from_src(select_first(contact, '(.//img)[1]/@src'), base_url)


def extract_primary_leader(tree, base_url: str = BASE_URL) -> tuple[Optional[str], Optional[str]]:
    """(name, url) of the first leader contact block, named or not."""
    contact = select_first(tree, f"({LEADER_CONTACT_XPATH})[1]")
    if contact is None:
        return None, None
    return contact_name(contact), extract_leader_url(contact, base_url)


def extract_leaders(tree, base_url: str = BASE_URL) -> list[LeaderEntry]:
    """
    Extract leader information.

    XPath: //div[@class='leaders']/div[@class='roster-contact']
    Returns: Leaders in page order; blocks without a resolvable name are skipped.
    """
    leaders = []
    for contact in tree.xpath(LEADER_CONTACT_XPATH):
        name = contact_name(contact)
        if not name:
            logger.debug("Skipping leader contact without a name")
            continue

        leaders.append(LeaderEntry(
            name=name,
            url=extract_leader_url(contact, base_url),
            role=extract_text(contact, ROLE_XPATH),
        ))

    return leaders


def extract_content_sections(tree) -> dict:
    """Leader notes and meeting place from the labeled .content-text blocks."""
    sections = {'leader_notes': None, 'meeting_place': None}

    for section in tree.xpath(CONTENT_SECTION_XPATH):
        label = (extract_text(section, './label') or '').lower()
        content = value_text(section, drop=('label',), block=True)
        if not content:
            continue

        if 'leader' in label and 'note' in label:
            sections['leader_notes'] = content
        elif 'meeting' in label:
            sections['meeting_place'] = content

    return sections


def extract_tabs(tree) -> dict:
    """
    Route/place and required equipment from the tab panels.

    XPath: //div[@class='tabs']//div[@class='tab'], title in .tab-title, body in .tab-content
    """
    tabs = {'route_place': None, 'required_equipment': None}

    for tab in tree.xpath(TAB_XPATH):
        title = (extract_text(tab, f"(.//*[{has_class('tab-title')}])[1]") or '').lower()
        content = extract_block_text(tab, f"(.//*[{has_class('tab-content')}])[1]")
        if not content:
            continue

        if 'route' in title or 'place' in title:
            tabs['route_place'] = content
        elif 'equipment' in title:
            tabs['required_equipment'] = content

    return tabs
