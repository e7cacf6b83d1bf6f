"""Parser for Mountaineers routes & places pages."""

from typing import Optional

from ..models import RouteDetail
from .common import (
    LabelRule,
    extract_block_text,
    extract_details,
    extract_text,
    has_class,
    page_title,
    require_url,
)


DETAILS_ITEM_XPATH = f"//*[{has_class('program-core')}]//ul[{has_class('details')}]/li"
TAB_XPATH = f"//div[{has_class('tabs')}]//div[{has_class('tab')}]"
HEADING_TAGS = ('h1', 'h2', 'h3')

ROUTE_DETAIL_RULES = [
    LabelRule(('suitable activit',), 'suitable_activities'),
    LabelRule(('season',), 'seasons'),
    LabelRule(('difficulty',), 'difficulty'),
    LabelRule(('length',), 'length'),
    LabelRule(('elevation gain',), 'elevation_gain'),
    LabelRule(('high point',), 'high_point'),
    LabelRule(('land manager',), 'land_manager', prefer_link=True),
    LabelRule(('parking permit',), 'parking_permit', prefer_link=True),
    LabelRule(('recommended party size',), 'recommended_party_size'),
    LabelRule(('maximum party size',), 'maximum_party_size'),
]


def extract_section(tree, heading: str) -> Optional[str]:
    """
    Text of the blocks that follow an <h2> whose text contains heading.

    Collection stops at the next heading. Blocks are separated by a blank line.
    """
    lowered = "translate(normalize-space(.), 'ABCDEFGHIJKLMNOPQRSTUVWXYZ', 'abcdefghijklmnopqrstuvwxyz')"
    matches = tree.xpath(f"//h2[contains({lowered}, '{heading}')]")
    if not matches:
        return None

    blocks = []
    for sibling in matches[0].itersiblings():
        if not isinstance(sibling.tag, str):
            continue
        if sibling.tag in HEADING_TAGS:
            break
        text = extract_block_text(sibling)
        if text:
            blocks.append(text)

    return '\n\n'.join(blocks) or None


def extract_list_items(element) -> list[str]:
    """Non-empty text of every <li> under element, in order."""
    items = []
    for li in element.xpath('.//li'):
        text = extract_text(li)
        if text:
            items.append(text)
    return items


def parse_route_detail(tree, route_url: str) -> RouteDetail:
    """
    Parse a route or place page.

    Args:
        tree: Loaded route document
        route_url: The canonical URL of the route (used as-is)

    Returns:
        RouteDetail; recommended_maps and related_routes are empty lists
        when the page has no Map / Titles tab
    """
    require_url(route_url)

    fields = extract_details(tree, ROUTE_DETAIL_RULES, DETAILS_ITEM_XPATH, date_field=None)
    recommended_maps = []
    related_routes = []

    for tab in tree.xpath(TAB_XPATH):
        title = (extract_text(tab, f"(.//*[{has_class('tab-title')}])[1]") or '').lower()
        contents = tab.xpath(f"(.//*[{has_class('tab-content')}])[1]")
        if not contents:
            continue

        if 'map' in title:
            recommended_maps = extract_list_items(contents[0])
        elif 'titles' in title:
            related_routes = extract_list_items(contents[0])

    return RouteDetail(
        title=page_title(tree),
        url=route_url,
        description=extract_text(tree, f"(//p[{has_class('documentDescription')}])[1]"),
        directions=extract_section(tree, 'getting there'),
        recommended_maps=recommended_maps,
        related_routes=related_routes,
        **fields,
    )
