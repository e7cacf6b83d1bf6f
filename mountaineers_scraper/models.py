"""Data models for Mountaineers pages.

Every record is an immutable value: optional fields are always present and
set to None when the page does not provide them.
"""

from dataclasses import dataclass, field
from typing import Generic, Optional, TypeVar

from .config import PAGE_SIZE


T = TypeVar('T')


@dataclass(frozen=True)
class LeaderEntry:
    """A leader listed on an activity page."""

    name: str
    url: Optional[str] = None
    role: Optional[str] = None


@dataclass(frozen=True)
class ActivitySummary:
    """One row of the activity search results."""

    title: str
    url: str
    type: Optional[str] = None
    date: Optional[str] = None
    difficulty: Optional[str] = None
    availability: Optional[str] = None
    branch: Optional[str] = None
    leader: Optional[str] = None
    leader_url: Optional[str] = None
    description: Optional[str] = None
    prerequisites: Optional[str] = None


@dataclass(frozen=True)
class CourseSummary:
    """One row of the course search results."""

    title: str
    url: str
    date: Optional[str] = None
    prerequisites: Optional[str] = None
    availability: Optional[str] = None
    branch: Optional[str] = None
    leader: Optional[str] = None
    leader_url: Optional[str] = None
    description: Optional[str] = None


@dataclass(frozen=True)
class TripReportSummary:
    """One row of the trip report search results."""

    title: str
    url: str
    date: Optional[str] = None
    author: Optional[str] = None
    activity_type: Optional[str] = None
    trip_result: Optional[str] = None
    description: Optional[str] = None


@dataclass(frozen=True)
class RouteSummary:
    """One row of the routes & places search results."""

    title: str
    url: str
    type: Optional[str] = None
    description: Optional[str] = None


@dataclass(frozen=True)
class ActivityDetail:
    """Full record of an activity page."""

    title: str
    url: str
    type: Optional[str] = None
    date: Optional[str] = None
    end_date: Optional[str] = None  # YYYY-MM-DD, only for multi-day activities
    committee: Optional[str] = None
    activity_type: Optional[str] = None
    audience: Optional[str] = None
    difficulty: Optional[str] = None
    mileage: Optional[str] = None
    elevation_gain: Optional[str] = None
    availability: Optional[str] = None
    registration_open: Optional[str] = None
    registration_close: Optional[str] = None
    branch: Optional[str] = None
    leader: Optional[str] = None
    leader_url: Optional[str] = None
    leaders: list[LeaderEntry] = field(default_factory=list)
    leader_notes: Optional[str] = None
    meeting_place: Optional[str] = None
    route_place: Optional[str] = None
    required_equipment: Optional[str] = None
    prerequisites: Optional[str] = None


@dataclass(frozen=True)
class TripReportDetail:
    """Full record of a trip report page."""

    title: str
    url: str
    date: Optional[str] = None
    author: Optional[str] = None
    activity_type: Optional[str] = None
    trip_result: Optional[str] = None
    route: Optional[str] = None
    body: Optional[str] = None
    related_activity_url: Optional[str] = None


@dataclass(frozen=True)
class RouteDetail:
    """Full record of a route or place page."""

    title: str
    url: str
    description: Optional[str] = None
    suitable_activities: Optional[str] = None
    seasons: Optional[str] = None
    difficulty: Optional[str] = None
    length: Optional[str] = None
    elevation_gain: Optional[str] = None
    high_point: Optional[str] = None
    land_manager: Optional[str] = None
    parking_permit: Optional[str] = None
    recommended_party_size: Optional[str] = None
    maximum_party_size: Optional[str] = None
    directions: Optional[str] = None
    recommended_maps: list[str] = field(default_factory=list)
    related_routes: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class CourseLeader:
    """A contact listed on a course page."""

    name: str
    role: Optional[str] = None


@dataclass(frozen=True)
class CourseDetail:
    """Full record of a course, clinic or seminar page."""

    title: str
    url: str
    category: Optional[str] = None
    description: Optional[str] = None
    dates: Optional[str] = None
    start_date: Optional[str] = None
    end_date: Optional[str] = None
    committee: Optional[str] = None
    committee_url: Optional[str] = None
    member_price: Optional[str] = None
    guest_price: Optional[str] = None
    availability: Optional[str] = None
    capacity: Optional[str] = None
    leaders: list[CourseLeader] = field(default_factory=list)
    badges_earned: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class Badge:
    """A badge shown on a member profile."""

    name: str
    earned: Optional[str] = None
    expires: Optional[str] = None


@dataclass(frozen=True)
class MemberProfile:
    """A member profile page."""

    name: str
    url: str
    member_since: Optional[str] = None
    branch: Optional[str] = None
    email: Optional[str] = None
    committees: list[str] = field(default_factory=list)
    badges: list[Badge] = field(default_factory=list)

    @property
    def slug(self) -> str:
        """Member slug (final path segment of the profile URL)."""
        return self.url.rstrip('/').split('/')[-1]


@dataclass(frozen=True)
class RosterEntry:
    """A person on an activity roster."""

    name: str = 'Unknown'
    profile_url: Optional[str] = None
    role: Optional[str] = None
    avatar: Optional[str] = None


@dataclass(frozen=True)
class MyActivity:
    """An activity from the logged-in member's activity list or history."""

    uid: str
    title: str
    url: str
    category: Optional[str] = None
    activity_type: Optional[str] = None
    start_date: Optional[str] = None  # YYYY-MM-DD
    leader: Optional[str] = None
    leader_url: Optional[str] = None
    is_leader: bool = False
    position: Optional[str] = None
    status: Optional[str] = None
    result: Optional[str] = None
    difficulty: Optional[str] = None
    leader_rating: Optional[str] = None


@dataclass(frozen=True)
class MyCourse:
    """A course from the logged-in member's course list."""

    uid: str
    title: str
    url: str
    start_date: Optional[str] = None  # YYYY-MM-DD
    dates: Optional[str] = None
    role: Optional[str] = None
    is_leader: bool = False
    status: Optional[str] = None
    result: Optional[str] = None


@dataclass(frozen=True)
class WhoAmI:
    """Identity of the logged-in member."""

    name: str
    slug: str
    profile_url: str


@dataclass(frozen=True)
class SearchResult(Generic[T]):
    """One page of search results.

    has_more is derived from page and total_count and cannot be set directly.
    """

    total_count: int
    items: list[T]
    page: int
    has_more: bool = field(init=False)

    def __post_init__(self):
        object.__setattr__(self, 'has_more', (self.page + 1) * PAGE_SIZE < self.total_count)


@dataclass(frozen=True)
class ListResult(Generic[T]):
    """A list that is not paged further by the site."""

    total_count: int
    items: list[T]
    limit: int
