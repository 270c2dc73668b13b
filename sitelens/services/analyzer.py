"""Analysis orchestration: URL in, :class:`WebsiteAnalysis` out.

Pipeline:

1. Validate the URL (no network access before this passes).
2. Fetch the primary page in detail and crawl secondary pages, concurrently.
3. De-duplicate pages and build the combined corpus.
4. Run every pattern extractor over the corpus.
5. Assemble the result.

A failed primary fetch fails the analysis.  A failed or short secondary
crawl only degrades it: the result covers fewer pages and carries a
:class:`PartialResultWarning`.
"""

import asyncio
import logging
from dataclasses import dataclass
from typing import Awaitable, List, Optional, Tuple, TypeVar

from sitelens.errors import ProviderTimeoutError
from sitelens.models.analysis import PartialResultWarning, WebsiteAnalysis
from sitelens.models.page import PageResult
from sitelens.services.assembler import assemble
from sitelens.services.deduplicator import dedupe_pages
from sitelens.services.extractor import build_corpus, run_extractors
from sitelens.services.fetcher import PageFetcher, clamp_max_pages, validate_url

logger = logging.getLogger(__name__)

T = TypeVar("T")

DEFAULT_MAX_PAGES = 10


@dataclass
class AnalyzeOptions:
    max_pages: int = DEFAULT_MAX_PAGES
    include_sitemap: bool = True
    include_subdomains: bool = False
    timeout: Optional[float] = None  # seconds, applied to each provider call


async def _with_timeout(awaitable: Awaitable[T], timeout: Optional[float], what: str) -> T:
    if timeout is None:
        return await awaitable
    try:
        return await asyncio.wait_for(awaitable, timeout)
    except asyncio.TimeoutError as exc:
        raise ProviderTimeoutError(f"{what} timed out after {timeout:g}s.") from exc


class WebsiteAnalyzer:
    """Runs the website analysis pipeline over an injected :class:`PageFetcher`.

    Holds no state between calls; one instance can serve concurrent
    analyses.
    """

    def __init__(self, fetcher: PageFetcher) -> None:
        self.fetcher = fetcher

    async def analyze(self, url: str, options: Optional[AnalyzeOptions] = None) -> WebsiteAnalysis:
        """Analyze *url* and return its :class:`WebsiteAnalysis`.

        Raises:
            InvalidInputError: if *url* is not an absolute http(s) URL.
            ConfigurationError: if the fetcher is missing its credentials.
            ProviderError: if the primary page cannot be fetched.
        """
        url = validate_url(url)
        options = options or AnalyzeOptions()
        max_pages = clamp_max_pages(options.max_pages)

        logger.info(
            "Website analysis started for %s (up to %d secondary pages)",
            url,
            max_pages,
            extra={"url": url, "max_pages": max_pages},
        )

        loop = asyncio.get_running_loop()
        started = loop.time()

        secondary_task = asyncio.create_task(self._crawl_secondary(url, max_pages, options))
        try:
            primary = await _with_timeout(
                self.fetcher.fetch_primary(url), options.timeout, "Primary page fetch"
            )
        except BaseException:
            secondary_task.cancel()
            raise
        secondary, warnings = await secondary_task

        crawl_time_ms = (loop.time() - started) * 1000

        pages = dedupe_pages(primary, secondary, max_secondary=max_pages)
        corpus = build_corpus(pages)
        # Extractors are CPU-only; keep the event loop free while they run.
        extracted = await asyncio.to_thread(run_extractors, corpus)

        analysis = assemble(
            url,
            primary,
            pages[1:],
            extracted,
            html=corpus.html,
            crawl_time_ms=crawl_time_ms,
            warnings=warnings,
        )

        logger.info(
            "Website analysis completed for %s: %d pages, %d technologies%s",
            url,
            analysis.performance.page_count,
            len(analysis.technologies),
            " (degraded)" if analysis.warnings else "",
            extra={
                "url": url,
                "page_count": analysis.performance.page_count,
                "technology_count": len(analysis.technologies),
                "degraded": bool(analysis.warnings),
            },
        )
        return analysis

    async def _crawl_secondary(
        self,
        url: str,
        max_pages: int,
        options: AnalyzeOptions,
    ) -> Tuple[List[PageResult], List[PartialResultWarning]]:
        """Crawl secondary pages; failures become warnings, never exceptions."""
        try:
            pages = await _with_timeout(
                self.fetcher.fetch_secondary(
                    url, max_pages, options.include_sitemap, options.include_subdomains
                ),
                options.timeout,
                "Secondary crawl",
            )
        except Exception as exc:
            logger.warning(
                "Secondary crawl failed for %s, continuing with primary page only: %s", url, exc
            )
            return [], [
                PartialResultWarning(
                    reason=f"Secondary crawl failed ({type(exc).__name__}).",
                    requested_pages=max_pages,
                    received_pages=0,
                )
            ]

        pages = list(pages)
        warnings: List[PartialResultWarning] = []
        if len(pages) < max_pages:
            logger.info("Secondary crawl of %s returned %d of %d pages", url, len(pages), max_pages)
            warnings.append(
                PartialResultWarning(
                    reason="Secondary crawl returned fewer pages than requested.",
                    requested_pages=max_pages,
                    received_pages=len(pages),
                )
            )
        return pages, warnings
