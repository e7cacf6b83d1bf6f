"""Runtime configuration read from environment variables."""

import os


# Site origin used to resolve relative links
BASE_URL = os.environ.get('MOUNTAINEERS_BASE_URL', 'https://www.mountaineers.org').rstrip('/')

# Faceted search pages always return 20 results per page
PAGE_SIZE = 20

# Version is set via environment variable or defaults to "dev"
# In production, this should be the Git SHA
VERSION = os.environ.get('APP_VERSION', 'dev')
USER_AGENT = f'mountaineers-scraper/{VERSION}'

# Default timeout for requests (in seconds)
DEFAULT_TIMEOUT = 30

# Minimum delay between two requests to the site (in seconds)
RATE_LIMIT_SECONDS = 0.5

# Site timezone, used when comparing badge expiry dates against "today"
SITE_TIMEZONE = 'America/Los_Angeles'

# Credentials for member-only pages
MOUNTAINEERS_USERNAME = os.environ.get('MOUNTAINEERS_USERNAME', '')
MOUNTAINEERS_PASSWORD = os.environ.get('MOUNTAINEERS_PASSWORD', '')
