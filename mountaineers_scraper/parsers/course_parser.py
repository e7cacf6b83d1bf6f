"""Parser for Mountaineers course, clinic and seminar pages."""

from typing import Optional

from ..config import BASE_URL
from ..models import CourseDetail, CourseLeader
from .common import (
    LabelRule,
    contact_name,
    extract_details,
    extract_text,
    has_class,
    label_text,
    page_title,
    parse_date_range,
    require_url,
    resolve_url,
    select_first,
)


DETAILS_XPATH = f"//*[{has_class('program-core')}]//ul[{has_class('details')}]"
PLAIN_ITEM_XPATH = (
    f"{DETAILS_XPATH}/li[not({has_class('course-fees')}) and not({has_class('course-availability')})]"
)
LEADER_CONTACT_XPATH = f"//div[{has_class('leaders')}]//div[{has_class('roster-contact')}]"
LOWERED_TEXT = "translate(normalize-space(.), 'ABCDEFGHIJKLMNOPQRSTUVWXYZ', 'abcdefghijklmnopqrstuvwxyz')"

COURSE_DETAIL_RULES = [
    LabelRule(('committee',), 'committee', prefer_link=True),
    LabelRule(('availability',), 'availability', exclude=('assistant',)),
]


def extract_fees(tree) -> dict:
    """
    Member and guest prices from the fees item.

    Markup: <li class="course-fees"><strong>Members:</strong> <span>$150.00</span> ...</li>
    """
    fees = {'member_price': None, 'guest_price': None}

    for strong in tree.xpath(f"{DETAILS_XPATH}/li[{has_class('course-fees')}]/strong"):
        label = (extract_text(strong) or '').lower()
        price = extract_text(strong, 'following-sibling::span[1]')
        if 'member' in label:
            fees['member_price'] = price
        elif 'guest' in label:
            fees['guest_price'] = price

    return fees


def extract_availability(tree) -> dict:
    """Availability status and capacity from the availability item's spans."""
    item = select_first(tree, f"({DETAILS_XPATH}/li[{has_class('course-availability')}])[1]")
    if item is None:
        return {}

    spans = [extract_text(span) for span in item.xpath('span')]
    return {
        'availability': spans[0] if spans else None,
        'capacity': spans[1] if len(spans) > 1 else None,
    }


def extract_committee_url(tree, base_url: str = BASE_URL) -> Optional[str]:
    """Absolute URL of the committee link in the details list."""
    for item in tree.xpath(PLAIN_ITEM_XPATH):
        if 'committee' in label_text(item):
            return resolve_url(item, '(.//a)[1]', base_url)
    return None


def extract_course_leaders(tree) -> list[CourseLeader]:
    """Course contacts with their roles, in page order."""
    leaders = []
    for contact in tree.xpath(LEADER_CONTACT_XPATH):
        name = contact_name(contact)
        if name:
            leaders.append(CourseLeader(
                name=name,
                role=extract_text(contact, f"(.//*[{has_class('roster-position')}])[1]"),
            ))
    return leaders


def extract_badges_earned(tree) -> list[str]:
    """Badge names listed after the 'Badges you will earn' heading."""
    items = tree.xpath(
        f"(//*[self::h2 or self::h3 or self::h4][contains({LOWERED_TEXT}, 'badge')])[1]"
        "/following-sibling::ul[1]/li"
    )
    return [text for text in (extract_text(li) for li in items) if text]


def parse_course_detail(tree, course_url: str, base_url: str = BASE_URL) -> CourseDetail:
    """
    Parse a course page.

    Args:
        tree: Loaded course document
        course_url: The canonical URL of the course (used as-is)
        base_url: Site origin used to resolve relative links

    Returns:
        CourseDetail; start_date and end_date are YYYY-MM-DD when the date
        range can be parsed
    """
    require_url(course_url)

    fields = extract_details(tree, COURSE_DETAIL_RULES, PLAIN_ITEM_XPATH, date_field='dates')
    fields.update(extract_fees(tree))
    fields.update(extract_availability(tree))
    fields['start_date'], fields['end_date'] = parse_date_range(fields['dates'])
    fields.setdefault('capacity', None)

    return CourseDetail(
        title=page_title(tree),
        url=course_url,
        category=extract_text(tree, f"(//h2[{has_class('kicker')}])[1]"),
        description=extract_text(tree, f"(//p[{has_class('documentDescription')}])[1]"),
        committee_url=extract_committee_url(tree, base_url),
        leaders=extract_course_leaders(tree),
        badges_earned=extract_badges_earned(tree),
        **fields,
    )
