"""SEO metadata extraction: meta tags, heading outline and image alt text."""

from typing import Iterator, List

from bs4 import BeautifulSoup, Tag

from sitelens.models.analysis import Heading, SeoData
from sitelens.services.deduplicator import unique_capped
from sitelens.services.normalizer import collapse_whitespace
from sitelens.services.sanitizer import sanitize

MAX_META_TAGS = 100
MAX_META_TAG_LENGTH = 1000
MAX_HEADINGS_PER_LEVEL = 50
MAX_HEADING_SOURCE_LENGTH = 500
MAX_IMAGES_SCANNED = 100
MAX_ALT_LENGTH = 200
MAX_IMAGE_ALTS = 50

# Attributes that name a meta tag, in order of preference
_META_KEYS = ("name", "property", "http-equiv", "itemprop")


def _render_meta(tag: Tag) -> str:
    """Render a ``<meta>`` tag as ``"<key>: <content>"``, or ``""`` when it names nothing."""
    if tag.get("charset"):
        return f"charset: {sanitize(str(tag['charset']))}"
    for key in _META_KEYS:
        if tag.get(key):
            return f"{sanitize(str(tag[key]))}: {sanitize(str(tag.get('content', '')))}"
    return ""


def _meta_tags(soup: BeautifulSoup) -> List[str]:
    rendered: List[str] = []
    for tag in soup.find_all("meta", limit=MAX_META_TAGS):
        if len(str(tag)) > MAX_META_TAG_LENGTH:
            continue
        value = _render_meta(tag)
        if value:
            rendered.append(value)
    return rendered


def _headings(soup: BeautifulSoup) -> List[Heading]:
    headings: List[Heading] = []
    for level in range(1, 7):
        for tag in soup.find_all(f"h{level}", limit=MAX_HEADINGS_PER_LEVEL):
            text = sanitize(tag.get_text(" ", strip=True)[:MAX_HEADING_SOURCE_LENGTH])
            if text:
                headings.append(Heading(level=level, text=text))
    return headings


def _image_alts(soup: BeautifulSoup) -> Iterator[str]:
    for img in soup.find_all("img", alt=True, limit=MAX_IMAGES_SCANNED):
        alt = collapse_whitespace(str(img["alt"]))
        if alt and len(alt) <= MAX_ALT_LENGTH and "<" not in alt and ">" not in alt:
            yield alt


def analyze_seo(html: str, text: str = "") -> SeoData:
    """Extract SEO-relevant metadata from *html*.

    Returns:
        :class:`SeoData` with

        * ``meta_tags`` – up to ``MAX_META_TAGS`` entries such as
          ``"description: A short summary"`` or ``"og:image: https://…"``;
          tags whose markup exceeds ``MAX_META_TAG_LENGTH`` are skipped.
        * ``headings`` – h1 to h6, up to ``MAX_HEADINGS_PER_LEVEL`` per level,
          text cut to ``MAX_HEADING_SOURCE_LENGTH`` and sanitized; empty
          headings are dropped.
        * ``image_alts`` – distinct non-empty alt texts of at most
          ``MAX_ALT_LENGTH`` characters, from the first
          ``MAX_IMAGES_SCANNED`` images that carry one.
    """
    if not html:
        return SeoData()

    soup = BeautifulSoup(html, "lxml")
    return SeoData(
        meta_tags=_meta_tags(soup),
        headings=_headings(soup),
        image_alts=unique_capped(_image_alts(soup), MAX_IMAGE_ALTS),
    )
