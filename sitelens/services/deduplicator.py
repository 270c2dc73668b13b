"""De-duplication helpers shared by the extractors and the orchestrator.

Every collection in a :class:`~sitelens.models.analysis.WebsiteAnalysis` is
de-duplicated in order of first appearance and capped, so that a hostile
page cannot grow the result without bound.
"""

from typing import Hashable, Iterable, List, Optional, Sequence, TypeVar

from sitelens.models.page import PageResult
from sitelens.services.normalizer import normalize_url

T = TypeVar("T", bound=Hashable)


def unique_capped(items: Iterable[T], cap: int) -> List[T]:
    """Return the distinct values of *items* in first-seen order, at most *cap* of them.

    Stops consuming *items* as soon as the cap is reached.
    """
    seen: set = set()
    result: List[T] = []
    if cap <= 0:
        return result
    for item in items:
        if item in seen:
            continue
        seen.add(item)
        result.append(item)
        if len(result) >= cap:
            break
    return result


def dedupe_pages(
    primary: PageResult,
    secondary: Sequence[PageResult],
    max_secondary: Optional[int] = None,
) -> List[PageResult]:
    """Merge *primary* and *secondary* into one page list, primary first.

    Pages are keyed by :func:`~sitelens.services.normalizer.normalize_url`, so
    the provider echoing the start page back from a crawl (with or without a
    trailing slash or fragment) does not count it twice.  At most
    *max_secondary* secondary pages are kept.
    """
    seen = {normalize_url(primary.url)}
    pages: List[PageResult] = [primary]

    for page in secondary:
        if max_secondary is not None and len(pages) - 1 >= max_secondary:
            break
        key = normalize_url(page.url)
        if key in seen:
            continue
        seen.add(key)
        pages.append(page)

    return pages
