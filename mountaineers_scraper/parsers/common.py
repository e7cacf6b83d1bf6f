"""Shared extraction helpers used by every Mountaineers page parser.

All helpers are pure: they take an lxml element (or plain strings) and return
new values. Missing markup is reported as None, never as an exception.
"""

import copy
import re
from typing import NamedTuple, Optional
from urllib.parse import urlsplit

from dateutil import parser as date_parser
from lxml import html

from ..config import BASE_URL


RESULT_COUNT_PATTERN = re.compile(r'(\d[\d,]*)')
TITLE_SEPARATOR_PATTERN = re.compile(r'^(.+?)(?:\s*[—–]\s*|\s+-\s*|-\s+)')
DATE_RANGE_SEPARATOR_PATTERN = re.compile(r'\s+[—–-]\s+')
MEMBER_PATH_PATTERN = re.compile(r'/members/([^/?#]+)')


def has_class(name: str) -> str:
    """
    Build an XPath predicate matching a single CSS class token.

    Example:
        >>> has_class('result-item')
        "contains(concat(' ', normalize-space(@class), ' '), ' result-item ')"
    """
    return f"contains(concat(' ', normalize-space(@class), ' '), ' {name} ')"


def load_document(html_content: str):
    """
    Parse markup into an lxml document.

    Fragments are wrapped in <html><body>. Empty markup yields an empty
    document rather than raising.
    """
    if not html_content or not html_content.strip():
        html_content = '<html><body></body></html>'
    return html.document_fromstring(html_content)


def select_first(node, path: Optional[str] = None):
    """Return the first XPath match under node, or node itself if path is None."""
    if node is None:
        return None
    if path is None:
        return node
    matches = node.xpath(path)
    return matches[0] if matches else None


def collapse_whitespace(text: str) -> str:
    """Collapse every run of whitespace to a single space and trim."""
    return ' '.join(text.split())


def extract_text(node, path: Optional[str] = None, collapse: bool = True) -> Optional[str]:
    """
    Extract normalized text from node (or its first match for path).

    Args:
        node: lxml element to search from
        path: Optional XPath relative to node
        collapse: Collapse internal whitespace runs (otherwise only trim)

    Returns:
        The text, or None if nothing matched or the text is blank

    Example:
        >>> tree = load_document('<p class="x">  Lots   of    spaces  </p>')
        >>> extract_text(tree, './/p')
        'Lots of spaces'
    """
    target = select_first(node, path)
    if target is None:
        return None

    text = target if isinstance(target, str) else target.text_content()
    text = collapse_whitespace(text) if collapse else text.strip()
    return text or None


def extract_block_text(node, path: Optional[str] = None) -> Optional[str]:
    """
    Extract multi-line text, keeping paragraph breaks.

    Whitespace is collapsed inside each line and runs of blank lines are
    reduced to a single blank line.
    """
    target = select_first(node, path)
    if target is None:
        return None

    text = target if isinstance(target, str) else target.text_content()
    lines = [collapse_whitespace(line) for line in text.splitlines()]
    text = re.sub(r'\n{3,}', '\n\n', '\n'.join(lines)).strip()
    return text or None


def own_text(element) -> Optional[str]:
    """Text of the direct text-node children only, ignoring child elements."""
    if element is None:
        return None
    return collapse_whitespace(''.join(element.xpath('text()'))) or None


def value_text(element, drop: tuple = ('label', 'strong'), block: bool = False) -> Optional[str]:
    """
    Text of element with its direct label children removed.

    The element is copied first so the document is left untouched. With
    block=True paragraph breaks are kept (see extract_block_text).

    Example:
        >>> li = load_document('<ul><li><label>Branch:</label> Seattle</li></ul>').xpath('//li')[0]
        >>> value_text(li)
        'Seattle'
    """
    if element is None:
        return None

    clone = copy.deepcopy(element)
    for child in list(clone):
        if isinstance(child.tag, str) and child.tag.lower() in drop:
            child.drop_tree()

    return extract_block_text(clone) if block else extract_text(clone)


def label_text(element, tags: tuple = ('label', 'strong')) -> str:
    """
    Lowercased label of a label/value item, trailing colon stripped.

    The label is the first <label> or <strong> descendant. Returns an empty
    string when the item has no label.
    """
    predicate = ' or '.join(f'self::{tag}' for tag in tags)
    label = extract_text(element, f'(.//*[{predicate}])[1]') or ''
    return re.sub(r':\s*$', '', label).lower()


def link_text(element) -> Optional[str]:
    """Text of the first anchor inside element."""
    return extract_text(element, '(.//a)[1]')


def absolute_url(raw: Optional[str], base_url: str = BASE_URL) -> Optional[str]:
    """
    Make a link absolute against base_url.

    Values that already carry a scheme are returned unchanged.

    Example:
        >>> absolute_url('/members/jane-doe', 'https://www.mountaineers.org')
        'https://www.mountaineers.org/members/jane-doe'
        >>> absolute_url('https://external.com/route', 'https://www.mountaineers.org')
        'https://external.com/route'
    """
    if not raw:
        return None

    raw = raw.strip()
    if not raw:
        return None
    if urlsplit(raw).scheme:
        return raw

    base_url = base_url.rstrip('/')
    if raw.startswith('/'):
        return f'{base_url}{raw}'
    return f'{base_url}/{raw}'


def resolve_url(node, path: Optional[str], base_url: str = BASE_URL) -> Optional[str]:
    """Read the href of the first match for path and make it absolute."""
    target = select_first(node, path)
    if target is None:
        return None

    raw = target if isinstance(target, str) else target.get('href')
    return absolute_url(raw, base_url)


def member_url_from_src(src: Optional[str], base_url: str = BASE_URL) -> Optional[str]:
    """
    Build a member profile URL from an image src embedding /members/<slug>.

    Example:
        >>> member_url_from_src('/members/jane-doe/@@images/portrait', 'https://www.mountaineers.org')
        'https://www.mountaineers.org/members/jane-doe'
    """
    if not src:
        return None

    match = MEMBER_PATH_PATTERN.search(src)
    if not match:
        return None

    return f"{base_url.rstrip('/')}/members/{match.group(1)}"


def parse_result_count(tree) -> int:
    """
    Extract the total number of matches from the result count banner.

    The banner is matched by id or class, e.g. '1,234 results' -> 1234.
    Returns 0 if there is no banner or it has no digits.
    """
    count_text = extract_text(
        tree,
        f"(.//*[@id='faceted-result-count' or {has_class('faceted-result-count')}])[1]",
    )
    if not count_text:
        return 0

    match = RESULT_COUNT_PATTERN.search(count_text)
    return int(match.group(1).replace(',', '')) if match else 0


def page_title(tree) -> str:
    """Title from the documentFirstHeading h1, else the first h1, else ''."""
    return (
        extract_text(tree, f"(.//h1[{has_class('documentFirstHeading')}])[1]")
        or extract_text(tree, '(.//h1)[1]')
        or ''
    )


def title_tag_name(tree) -> Optional[str]:
    """
    Name portion of the <title> tag ('Jane Doe — The Mountaineers' -> 'Jane Doe').

    Em-dash and en-dash separators need no surrounding whitespace; a hyphen
    needs whitespace on at least one side so hyphenated names stay whole.
    """
    title = extract_text(tree, '(//title)[1]')
    if not title:
        return None

    match = TITLE_SEPARATOR_PATTERN.match(title)
    if not match:
        return None

    return match.group(1).strip() or None


def slug_from_url(url: Optional[str]) -> str:
    """Final path segment of a URL ('' for an empty URL)."""
    if not url:
        return ''
    return urlsplit(url).path.rstrip('/').split('/')[-1]


def to_iso_date(text: Optional[str]) -> Optional[str]:
    """
    Parse a free-text date into YYYY-MM-DD.

    Example:
        >>> to_iso_date('Sun, Feb 15, 2026')
        '2026-02-15'
    """
    if not text:
        return None

    try:
        return date_parser.parse(text).date().isoformat()
    except (ValueError, OverflowError):
        return None


def parse_date_range(text: Optional[str]) -> tuple[Optional[str], Optional[str]]:
    """
    Split a 'start - end' date range into ISO start and end dates.

    A single date yields (start, None).

    Example:
        >>> parse_date_range('Fri, Feb 6, 2026 - Sun, Feb 15, 2026')
        ('2026-02-06', '2026-02-15')
    """
    if not text:
        return None, None

    parts = DATE_RANGE_SEPARATOR_PATTERN.split(text, maxsplit=1)
    start_date = to_iso_date(parts[0])
    end_date = to_iso_date(parts[1]) if len(parts) > 1 else None
    return start_date, end_date


def require_url(url: Optional[str]) -> str:
    """Detail parsers need the canonical URL from the caller."""
    if not url:
        raise ValueError("A canonical page URL is required")
    return url


class LabelRule(NamedTuple):
    """
    Maps a label/value item to a record field by case-insensitive substring.

    A rule matches when every pattern occurs in the label and no exclude
    does. A rule with field=None recognizes the label and discards the value.
    """

    patterns: tuple
    field: Optional[str]
    exclude: tuple = ()
    prefer_link: bool = False


def match_label(label: str, rules: list) -> Optional[LabelRule]:
    """Return the first rule matching label, evaluated top to bottom."""
    for rule in rules:
        if all(p in label for p in rule.patterns) and not any(e in label for e in rule.exclude):
            return rule
    return None


def extract_details(tree, rules: list, path: str, date_field: Optional[str] = 'date') -> dict:
    """
    Extract fields from a label/value list.

    Each <li> is labeled by a <label> or <strong> child; its value is the
    remaining text, or the link text for rules with prefer_link. The first
    unlabeled item goes to date_field (when given); later unlabeled items
    are ignored.

    Returns:
        Dict of field name -> value for every field named in rules
    """
    fields = {rule.field: None for rule in rules if rule.field}
    if date_field:
        fields[date_field] = None
    seen_unlabeled = False

    for item in tree.xpath(path):
        label = label_text(item)

        if not label:
            if date_field and not seen_unlabeled:
                fields[date_field] = extract_text(item)
                seen_unlabeled = fields[date_field] is not None
            continue

        rule = match_label(label, rules)
        if rule is None or rule.field is None:
            continue

        value = value_text(item)
        if rule.prefer_link:
            value = link_text(item) or value
        fields[rule.field] = value

    return fields


def contact_name(contact) -> Optional[str]:
    """
    Person name from a roster-contact block.

    Prefers the image alt text, then the first non-role <div> with text.
    """
    name = extract_text(contact, '(.//img)[1]/@alt')
    if name:
        return name

    for div in contact.xpath(f".//div[not({has_class('roster-position')})]"):
        name = extract_text(div)
        if name:
            return name

    return None
