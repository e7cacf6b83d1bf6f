"""Parser for Mountaineers trip report pages."""

from typing import Optional

from ..config import BASE_URL
from ..models import TripReportDetail
from .common import (
    extract_text,
    has_class,
    label_text,
    link_text,
    own_text,
    page_title,
    require_url,
    resolve_url,
    select_first,
    value_text,
)


METADATA_XPATH = f"//*[{has_class('tripreport-metadata')}]"
AUTHOR_XPATH = f"({METADATA_XPATH}//span[{has_class('author')}]//a[{has_class('name')}])[1]"
PUBDATE_XPATH = f"({METADATA_XPATH}//*[{has_class('pubdate')}])[1]"
DETAILS_ITEM_XPATH = f"//*[{has_class('program-core')}]//ul[{has_class('details')}]/li"


def extract_author(tree) -> Optional[str]:
    """
    Author name from the report header.

    The author link also wraps an avatar image, so only its direct text
    nodes are read; the full link text is the fallback.
    """
    author_link = select_first(tree, AUTHOR_XPATH)
    if author_link is None:
        return None

    return own_text(author_link) or extract_text(author_link)


def parse_trip_report_detail(tree, report_url: str, base_url: str = BASE_URL) -> TripReportDetail:
    """
    Parse a trip report page.

    Args:
        tree: Loaded trip report document
        report_url: The canonical URL of the report (used as-is)
        base_url: Site origin used to resolve relative links

    Returns:
        TripReportDetail with every field present (None when missing)
    """
    require_url(report_url)

    fields = {
        'date': extract_text(tree, PUBDATE_XPATH),
        'author': extract_author(tree),
        'activity_type': None,
        'trip_result': None,
        'route': None,
        'related_activity_url': None,
    }

    for item in tree.xpath(DETAILS_ITEM_XPATH):
        label = label_text(item, tags=('label',))
        value = value_text(item, drop=('label',))

        if 'date' in label:
            # The publish date from the header wins over the details list
            if not fields['date']:
                fields['date'] = value
        elif 'route' in label or 'place' in label:
            fields['route'] = link_text(item) or value
            fields['related_activity_url'] = resolve_url(item, '(.//a)[1]', base_url)
        elif 'activity type' in label:
            fields['activity_type'] = value
        elif 'trip result' in label:
            fields['trip_result'] = value

    return TripReportDetail(
        title=page_title(tree),
        url=report_url,
        body=extract_text(tree, f"(//p[{has_class('documentDescription')}])[1]"),
        **fields,
    )
