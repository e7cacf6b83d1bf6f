"""HTTP client for fetching Mountaineers website pages."""

import logging
import threading
import time
from typing import Any, Optional
from urllib.parse import urlencode

import requests

from . import config
from .parsers.common import absolute_url, load_document


logger = logging.getLogger(__name__)

LOGIN_PATH = '/login'


class AuthenticationError(Exception):
    """Raised when a member-only page cannot be reached as a logged-in member."""


class MountaineersClient:
    """
    Session-based client for the Mountaineers website.

    Every request sends the project User-Agent and waits so that two requests
    are at least config.RATE_LIMIT_SECONDS apart. Member-only pages log in
    first with the Plone login form; the session keeps the auth cookies.

    Example:
        >>> client = MountaineersClient()
        >>> html = client.fetch_page('/activities/activities')
        >>> len(html) > 0
        True
    """

    def __init__(
        self,
        base_url: str = config.BASE_URL,
        username: Optional[str] = None,
        password: Optional[str] = None,
        timeout: int = config.DEFAULT_TIMEOUT,
        rate_limit: float = config.RATE_LIMIT_SECONDS,
        session: Optional[requests.Session] = None,
    ):
        self.base_url = base_url.rstrip('/')
        self.username = username if username is not None else config.MOUNTAINEERS_USERNAME
        self.password = password if password is not None else config.MOUNTAINEERS_PASSWORD
        self.timeout = timeout
        self.rate_limit = rate_limit
        self.session = session or requests.Session()
        self.session.headers['User-Agent'] = config.USER_AGENT
        self.logged_in = False

        self._lock = threading.Lock()
        self._last_request = 0.0

    @property
    def has_credentials(self) -> bool:
        return bool(self.username and self.password)

    def _wait_for_rate_limit(self) -> None:
        with self._lock:
            elapsed = time.monotonic() - self._last_request
            if elapsed < self.rate_limit:
                time.sleep(self.rate_limit - elapsed)
            self._last_request = time.monotonic()

    def _request(self, method: str, url: str, **kwargs) -> requests.Response:
        full_url = absolute_url(url, self.base_url)
        self._wait_for_rate_limit()

        logger.debug(f"{method} {full_url}")
        response = self.session.request(method, full_url, timeout=self.timeout, **kwargs)
        response.raise_for_status()
        return response

    def login(self) -> None:
        """
        Log in with the Plone login form.

        The login page is fetched first to pick up the session cookies and
        the _authenticator CSRF token.

        Raises:
            AuthenticationError: If no credentials are configured
            requests.exceptions.RequestException: If a request fails
        """
        if not self.has_credentials:
            raise AuthenticationError(
                "MOUNTAINEERS_USERNAME and MOUNTAINEERS_PASSWORD environment variables required"
            )

        logger.info(f"Logging in to {self.base_url} as {self.username}")

        login_page = self._request('GET', LOGIN_PATH)
        tokens = load_document(login_page.text).xpath("//input[@name='_authenticator']/@value")

        form = {
            '__ac_name': self.username,
            '__ac_password': self.password,
            'came_from': '',
            'buttons.login': 'Log in',
        }
        if tokens:
            form['_authenticator'] = str(tokens[0])

        self._request('POST', LOGIN_PATH, data=form)
        self.logged_in = True

        logger.info("Login complete")

    def ensure_logged_in(self) -> None:
        if not self.logged_in:
            self.login()

    def fetch_page(self, url: str, authenticated: bool = False) -> str:
        """
        Fetch an HTML page.

        Args:
            url: Absolute URL or site path
            authenticated: Log in first if not logged in yet

        Returns:
            HTML content as string

        Raises:
            requests.exceptions.RequestException: If the request fails
        """
        if authenticated:
            self.ensure_logged_in()

        return self._request('GET', url, headers={'Accept': 'text/html'}).text

    def fetch_faceted_query(self, base_path: str, params: list) -> str:
        """
        Fetch one page of a faceted search listing.

        Args:
            base_path: Listing path, e.g. '/activities/activities'
            params: (name, value) pairs for the query string

        Returns:
            The results fragment as HTML
        """
        url = f"{base_path.rstrip('/')}/@@faceted_query"
        if params:
            url = f"{url}?{urlencode(params, safe='[]')}"

        return self._request('GET', url, headers={
            'Accept': 'text/html',
            'X-Requested-With': 'XMLHttpRequest',
        }).text

    def fetch_json(self, url: str, authenticated: bool = False) -> Any:
        """
        Fetch and decode a JSON endpoint.

        Raises:
            requests.exceptions.RequestException: If the request fails
            ValueError: If the body is not valid JSON
        """
        if authenticated:
            self.ensure_logged_in()

        return self._request('GET', url, headers={
            'Accept': 'application/json',
            'X-Requested-With': 'XMLHttpRequest',
        }).json()

    def fetch_roster_tab(self, activity_url: str) -> str:
        """Fetch the roster tab fragment of an activity (members only)."""
        self.ensure_logged_in()

        url = f"{activity_url.rstrip('/')}/roster-tab"
        return self._request('GET', url, headers={
            'Accept': 'text/html',
            'X-Requested-With': 'XMLHttpRequest',
        }).text


_client: Optional[MountaineersClient] = None


def get_client() -> MountaineersClient:
    """Get or create the shared client."""
    global _client
    if _client is None:
        _client = MountaineersClient()
    return _client
