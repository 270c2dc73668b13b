"""Navigation structure extraction."""

from typing import List

from bs4 import BeautifulSoup, Tag

from sitelens.models.analysis import NavigationItem, NavigationLink
from sitelens.services.sanitizer import sanitize

# Hard ceilings on the work done for a single corpus
MAX_NAV_BLOCKS = 20
MAX_LINKS_PER_NAV = 100
MAX_HREF_LENGTH = 2000


def _is_nav_block(tag: Tag) -> bool:
    return tag.name == "nav" or tag.get("role") == "navigation"


def _valid_href(href: str) -> bool:
    """Reject empty hrefs, hrefs carrying markup, and hrefs over ``MAX_HREF_LENGTH``."""
    return bool(href) and len(href) <= MAX_HREF_LENGTH and "<" not in href and ">" not in href


def extract_navigation(html: str, text: str = "") -> List[NavigationItem]:
    """Return one :class:`NavigationItem` per navigation block in *html*.

    Navigation blocks are ``<nav>`` elements and elements with
    ``role="navigation"``, numbered in document order.  At most
    ``MAX_NAV_BLOCKS`` blocks and ``MAX_LINKS_PER_NAV`` anchors per block are
    examined.  Link text is run through :func:`sanitize`.
    """
    if not html:
        return []

    soup = BeautifulSoup(html, "lxml")
    items: List[NavigationItem] = []

    for index, block in enumerate(soup.find_all(_is_nav_block, limit=MAX_NAV_BLOCKS)):
        links: List[NavigationLink] = []
        for anchor in block.find_all("a", href=True, limit=MAX_LINKS_PER_NAV):
            href = str(anchor["href"]).strip()
            if not _valid_href(href):
                continue
            links.append(NavigationLink(href=href, text=sanitize(anchor.get_text(" ", strip=True))))
        items.append(NavigationItem(index=index, type="navigation", links=links))

    return items
