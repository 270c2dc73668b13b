"""Result assembly: merges pages and extractor output into a WebsiteAnalysis."""

import re
from typing import Iterable, Optional, Sequence

from sitelens.models.analysis import PartialResultWarning, Performance, WebsiteAnalysis
from sitelens.models.page import PageResult
from sitelens.services.extractor import ExtractedFields
from sitelens.services.normalizer import normalize_quotes
from sitelens.services.sanitizer import sanitize

# Substring heuristics, not behavioural checks
_LAZY_LOADING_RE = re.compile(r"loading=[\"']?lazy\b|\bdata-src=", re.IGNORECASE)
_CACHING_RE = re.compile(r"service-?worker|\bcache", re.IGNORECASE)


def _metadata_text(page: PageResult, *keys: str) -> Optional[str]:
    for key in keys:
        value = page.metadata.get(key)
        if isinstance(value, list):
            value = value[0] if value else None
        if isinstance(value, str) and value.strip():
            return value
    return None


def _title(primary: PageResult) -> str:
    raw = primary.title or _metadata_text(primary, "title", "ogTitle", "og:title") or ""
    return sanitize(normalize_quotes(raw))


def _description(primary: PageResult) -> str:
    raw = _metadata_text(primary, "description", "ogDescription", "og:description") or ""
    return sanitize(normalize_quotes(raw))


def _performance(page_count: int, html: str, crawl_time_ms: float) -> Performance:
    return Performance(
        page_count=page_count,
        avg_load_time=round(crawl_time_ms / max(page_count, 1), 2),
        has_lazy_loading=bool(_LAZY_LOADING_RE.search(html)),
        has_caching=bool(_CACHING_RE.search(html)),
    )


def assemble(
    url: str,
    primary: PageResult,
    secondary: Sequence[PageResult],
    extracted: ExtractedFields,
    *,
    html: str,
    crawl_time_ms: float,
    warnings: Iterable[PartialResultWarning] = (),
) -> WebsiteAnalysis:
    """Build the final :class:`WebsiteAnalysis`.

    Args:
        url: The URL the caller asked to analyze.
        primary: The primary page.
        secondary: Secondary pages, already de-duplicated against *primary*.
        extracted: Output of the extractor pass over the combined corpus.
        html: The combined corpus HTML, for the performance heuristics.
        crawl_time_ms: Wall-clock time spent fetching, in milliseconds.
        warnings: Degradation notices to attach.

    ``avg_load_time`` is ``crawl_time_ms`` divided by the page count (a
    zero count is treated as one).
    """
    pages = [primary, *secondary]
    return WebsiteAnalysis(
        url=url,
        title=_title(primary),
        description=_description(primary),
        screenshot=primary.screenshot,
        pages=pages,
        technologies=extracted.technologies,
        layout=extracted.layout,
        color_scheme=extracted.color_scheme,
        components=extracted.components,
        design_patterns=extracted.design_patterns,
        navigation_structure=extracted.navigation_structure,
        assets=extracted.assets,
        seo=extracted.seo,
        performance=_performance(len(pages), html, crawl_time_ms),
        warnings=list(warnings),
    )
