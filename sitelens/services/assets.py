"""Asset reference extraction: images, stylesheets, scripts and fonts."""

import re
from itertools import islice
from typing import Iterator, List

from bs4 import BeautifulSoup

from sitelens.models.analysis import Assets
from sitelens.services.deduplicator import unique_capped

MAX_URL_LENGTH = 2000
MAX_FONT_NAME_LENGTH = 100

# Matches examined per asset kind
_SCAN_LIMITS = {
    "images": 200,
    "stylesheets": 100,
    "scripts": 100,
    "fonts": 200,
}

# Entries kept per asset kind
MAX_IMAGES = 50
MAX_STYLESHEETS = 20
MAX_SCRIPTS = 20
MAX_FONTS = 20

# The value of a ``font-family`` declaration in a stylesheet or style attribute.
# Stops at the end of the declaration, the rule, or the enclosing attribute.
_FONT_FAMILY_RE = re.compile(r"font-family\s*:\s*([^;{}<>\"\n]{1,300})", re.IGNORECASE)
_FONT_QUOTES_RE = re.compile(r"[\"']|&quot;?|&#39;?")
_IMPORTANT_RE = re.compile(r"\s*!\s*important\s*$", re.IGNORECASE)


def _valid_url(value: str) -> bool:
    return bool(value) and len(value) <= MAX_URL_LENGTH and "<" not in value and ">" not in value


def _attr_values(soup: BeautifulSoup, name: str, attr: str, limit: int, **filters) -> Iterator[str]:
    for tag in soup.find_all(name, attrs={attr: True, **filters}, limit=limit):
        value = str(tag[attr]).strip()
        if _valid_url(value):
            yield value


def _font_names(html: str) -> Iterator[str]:
    for match in islice(_FONT_FAMILY_RE.finditer(html), _SCAN_LIMITS["fonts"]):
        name = _IMPORTANT_RE.sub("", _FONT_QUOTES_RE.sub("", match.group(1))).strip()
        if name and len(name) <= MAX_FONT_NAME_LENGTH and "<" not in name and ">" not in name:
            yield name


def extract_assets(html: str, text: str = "") -> Assets:
    """Collect asset references from *html*.

    * images – ``<img src>``
    * stylesheets – ``<link rel="stylesheet" href>``
    * scripts – ``<script src>``
    * fonts – values of ``font-family:`` declarations, quotes removed

    URLs are kept as written (not resolved).  Each kind has its own scan
    limit; URLs over ``MAX_URL_LENGTH`` or containing ``<``/``>`` are
    rejected, as are font names over ``MAX_FONT_NAME_LENGTH``.
    """
    if not html:
        return Assets()

    soup = BeautifulSoup(html, "lxml")

    images = _attr_values(soup, "img", "src", _SCAN_LIMITS["images"])
    # ``rel`` is multi-valued in BeautifulSoup; a string filter matches any value.
    stylesheets = _attr_values(soup, "link", "href", _SCAN_LIMITS["stylesheets"], rel="stylesheet")
    scripts = _attr_values(soup, "script", "src", _SCAN_LIMITS["scripts"])

    return Assets(
        images=unique_capped(images, MAX_IMAGES),
        stylesheets=unique_capped(stylesheets, MAX_STYLESHEETS),
        scripts=unique_capped(scripts, MAX_SCRIPTS),
        fonts=unique_capped(_font_names(html), MAX_FONTS),
    )
