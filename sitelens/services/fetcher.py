"""Page Fetcher contract and input validation.

The analysis core never talks to the target site itself.  Pages are fetched
through a :class:`PageFetcher`, an object owned by the caller and handed to
the analyzer at construction time.  :mod:`sitelens.services.firecrawl`
provides the production implementation.
"""

import ipaddress
from typing import List, Protocol
from urllib.parse import urlparse

from sitelens.errors import InvalidInputError
from sitelens.models.page import PageResult

ALLOWED_SCHEMES = {"http", "https"}
MAX_URL_LENGTH = 2000

# Crawl size accepted by the analyzer, whatever the caller asks for
MIN_PAGES = 1
MAX_PAGES_HARD_LIMIT = 50

_LOCAL_HOSTNAMES = {"localhost", "localhost.localdomain"}


class PageFetcher(Protocol):
    async def fetch_primary(self, url: str) -> PageResult:
        """Fetch *url* in detail: markdown, raw HTML and a screenshot.

        Raises:
            ProviderError: on any provider or transport failure.
        """
        ...

    async def fetch_secondary(
        self,
        url: str,
        max_pages: int,
        include_sitemap: bool,
        include_subdomains: bool,
    ) -> List[PageResult]:
        """Crawl up to *max_pages* pages of the same site, starting at *url*.

        Raises:
            ProviderError: on any provider or transport failure.
        """
        ...


def _is_private_literal(hostname: str) -> bool:
    """Return True if *hostname* is a literal private, loopback, link-local or reserved IP.

    No DNS lookup is made; names are resolved by the provider, not by us.
    """
    try:
        addr = ipaddress.ip_address(hostname.strip("[]").split("%")[0])
    except ValueError:
        return False
    return addr.is_private or addr.is_loopback or addr.is_link_local or addr.is_reserved


def validate_url(url: str) -> str:
    """Return *url* stripped of surrounding whitespace, or raise :class:`InvalidInputError`.

    The URL must be absolute, use http or https, carry a hostname, and not
    point at localhost or a literal private address.  Nothing here touches the
    network.
    """
    if not isinstance(url, str) or not url.strip():
        raise InvalidInputError("URL must be a non-empty string.")

    url = url.strip()
    if len(url) > MAX_URL_LENGTH:
        raise InvalidInputError(f"URL exceeds {MAX_URL_LENGTH} characters.")
    if any(ch.isspace() for ch in url):
        raise InvalidInputError("URL must not contain whitespace.")

    try:
        parsed = urlparse(url)
        hostname = parsed.hostname
        # Accessing .port validates it and raises ValueError when out of range
        parsed.port
    except ValueError as exc:
        raise InvalidInputError(f"Invalid URL: {exc}") from exc

    if parsed.scheme.lower() not in ALLOWED_SCHEMES:
        scheme = parsed.scheme or "(none)"
        raise InvalidInputError(f"Scheme '{scheme}' is not allowed. Use http or https.")

    if not hostname:
        raise InvalidInputError("URL must have a valid hostname.")

    if hostname.lower() in _LOCAL_HOSTNAMES or _is_private_literal(hostname):
        raise InvalidInputError("Requests to private/internal addresses are not allowed.")

    return url


def clamp_max_pages(max_pages: int) -> int:
    """Clamp a requested crawl size to ``[MIN_PAGES, MAX_PAGES_HARD_LIMIT]``."""
    return max(MIN_PAGES, min(int(max_pages), MAX_PAGES_HARD_LIMIT))
