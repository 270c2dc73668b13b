"""Firecrawl implementation of the :class:`~sitelens.services.fetcher.PageFetcher` contract.

Two provider endpoints are used:

``POST /v1/scrape``
    Detailed fetch of the primary page: markdown, raw HTML and a viewport
    screenshot, after waiting for client-side content to render.

``POST /v1/crawl`` + ``GET /v1/crawl/{id}``
    Bounded crawl of the same site.  The crawl runs as a provider-side job
    that is polled until it completes or fails.  A job that misses the poll
    deadline, or whose caller is cancelled, is stopped with
    ``DELETE /v1/crawl/{id}``.

Every request carries ``Authorization: Bearer <api key>``.  Non-2xx answers
raise :class:`~sitelens.errors.ProviderError` with the HTTP status and the
provider's error body.
"""

import asyncio
import logging
from typing import Any, Dict, Iterable, List, Optional

import httpx
from bs4 import BeautifulSoup
from markdownify import markdownify

from sitelens.config import Settings, get_settings
from sitelens.errors import ConfigurationError, ProviderError, ProviderTimeoutError
from sitelens.models.page import PageResult
from sitelens.services.normalizer import collapse_whitespace, normalize_quotes

logger = logging.getLogger(__name__)

# Elements that never contribute readable text
_NON_TEXT_TAGS = ["script", "style", "noscript", "template", "svg"]

# How much of a provider error body goes into a log line
_LOG_BODY_LIMIT = 1000

_CRAWL_DONE = "completed"
_CRAWL_FAILED = {"failed", "cancelled"}

# Seconds allowed for the cancel request of an abandoned crawl job
_CANCEL_TIMEOUT = 10.0


def _first_str(value: Any) -> Optional[str]:
    """Provider metadata fields are sometimes lists; return the first string."""
    if isinstance(value, list):
        value = value[0] if value else None
    if isinstance(value, str) and value.strip():
        return value.strip()
    return None


def _plain_text(html: str) -> str:
    soup = BeautifulSoup(html, "lxml")
    for tag in soup.find_all(_NON_TEXT_TAGS):
        tag.decompose()
    return collapse_whitespace(soup.get_text(" "))


def page_from_document(document: Dict[str, Any], fallback_url: str) -> PageResult:
    """Build a :class:`PageResult` from one Firecrawl document.

    Markdown is derived from the HTML when the provider omits it.  Titles and
    text are passed through :func:`normalize_quotes`.
    """
    metadata = document.get("metadata") or {}
    html = document.get("html") or document.get("rawHtml") or None

    markdown = document.get("markdown") or None
    if not markdown and html:
        markdown = markdownify(html, heading_style="ATX").strip() or None

    if html:
        content = _plain_text(html) or None
    else:
        content = collapse_whitespace(markdown) if markdown else None

    title = _first_str(metadata.get("title")) or _first_str(metadata.get("ogTitle"))

    screenshot = document.get("screenshot")
    if not screenshot:
        screenshots = (document.get("actions") or {}).get("screenshots") or []
        screenshot = screenshots[0] if screenshots else None

    url = _first_str(metadata.get("sourceURL")) or _first_str(metadata.get("url")) or fallback_url

    return PageResult(
        url=url,
        title=normalize_quotes(title) if title else None,
        content=normalize_quotes(content) if content else None,
        markdown=normalize_quotes(markdown) if markdown else None,
        html=html,
        metadata=metadata,
        screenshot=screenshot or None,
    )


class FirecrawlClient:
    """Async Firecrawl API client.

    Pass an ``httpx.AsyncClient`` to share a connection pool (or a mock
    transport in tests); otherwise the client creates and owns one, released
    by :meth:`aclose` or by leaving ``async with``.
    """

    def __init__(
        self,
        api_key: Optional[str],
        base_url: str = "https://api.firecrawl.dev",
        *,
        timeout: float = 60.0,
        wait_for_ms: int = 3000,
        scrape_timeout_ms: int = 30000,
        max_age_ms: int = 3_600_000,
        include_tags: Iterable[str] = (),
        exclude_tags: Iterable[str] = ("noscript", "iframe"),
        poll_interval: float = 2.0,
        crawl_timeout: float = 120.0,
        http_client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        self.api_key = api_key
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.wait_for_ms = wait_for_ms
        self.scrape_timeout_ms = scrape_timeout_ms
        self.max_age_ms = max_age_ms
        self.include_tags = list(include_tags)
        self.exclude_tags = list(exclude_tags)
        self.poll_interval = poll_interval
        self.crawl_timeout = crawl_timeout
        self._client = http_client
        self._owns_client = http_client is None

    @classmethod
    def from_settings(
        cls,
        settings: Optional[Settings] = None,
        http_client: Optional[httpx.AsyncClient] = None,
    ) -> "FirecrawlClient":
        """Build a client from :class:`~sitelens.config.Settings`.

        A missing API key is not an error here; it surfaces as
        :class:`ConfigurationError` on the first request.
        """
        settings = settings or get_settings()
        return cls(
            settings.firecrawl_api_key,
            settings.firecrawl_base_url,
            timeout=settings.http_timeout,
            wait_for_ms=settings.scrape_wait_for_ms,
            scrape_timeout_ms=settings.scrape_timeout_ms,
            max_age_ms=settings.scrape_max_age_ms,
            include_tags=settings.scrape_include_tags,
            exclude_tags=settings.scrape_exclude_tags,
            poll_interval=settings.crawl_poll_interval,
            crawl_timeout=settings.crawl_timeout,
            http_client=http_client,
        )

    async def __aenter__(self) -> "FirecrawlClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._owns_client and self._client is not None:
            await self._client.aclose()
            self._client = None

    # ------------------------------------------------------------------
    # PageFetcher
    # ------------------------------------------------------------------

    async def fetch_primary(self, url: str) -> PageResult:
        payload: Dict[str, Any] = {
            "url": url,
            "formats": ["markdown", "html", "screenshot"],
            "onlyMainContent": False,
            "waitFor": self.wait_for_ms,
            "timeout": self.scrape_timeout_ms,
            "blockAds": True,
            "maxAge": self.max_age_ms,
            "excludeTags": self.exclude_tags,
            "actions": [
                {"type": "wait", "milliseconds": 2000},
                # Visible viewport only
                {"type": "screenshot", "fullPage": False},
            ],
        }
        if self.include_tags:
            payload["includeTags"] = self.include_tags

        logger.info("Firecrawl scrape requested for %s", url)
        body = await self._request("POST", "/v1/scrape", json=payload)

        document = body.get("data")
        if not body.get("success") or not isinstance(document, dict):
            logger.error("Firecrawl scrape of %s returned no page data: %.1000s", url, body)
            raise ProviderError("Firecrawl returned no page data.", body=str(body))

        return page_from_document(document, url)

    async def fetch_secondary(
        self,
        url: str,
        max_pages: int,
        include_sitemap: bool,
        include_subdomains: bool,
    ) -> List[PageResult]:
        payload = {
            "url": url,
            "limit": max_pages,
            "ignoreSitemap": not include_sitemap,
            "allowSubdomains": include_subdomains,
            "scrapeOptions": {
                "formats": ["markdown", "html"],
                "onlyMainContent": False,
                "excludeTags": self.exclude_tags,
            },
        }

        logger.info("Firecrawl crawl requested for %s (limit %d)", url, max_pages)
        started = await self._request("POST", "/v1/crawl", json=payload)
        job_id = started.get("id")
        if not started.get("success") or not job_id:
            raise ProviderError("Firecrawl did not start a crawl job.", body=str(started))

        try:
            documents = await self._wait_for_crawl(job_id, max_pages)
        except (ProviderTimeoutError, asyncio.CancelledError):
            # The provider-side job must not outlive this call.
            await self._cancel_crawl(job_id)
            raise
        return [
            page_from_document(document, url)
            for document in documents[:max_pages]
            if isinstance(document, dict)
        ]

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    async def _wait_for_crawl(self, job_id: str, max_pages: int) -> List[Dict[str, Any]]:
        """Poll crawl job *job_id* until it completes and return its documents."""
        loop = asyncio.get_running_loop()
        deadline = loop.time() + self.crawl_timeout

        while True:
            status = await self._request("GET", f"/v1/crawl/{job_id}")
            state = status.get("status")

            if state == _CRAWL_DONE:
                break
            if state in _CRAWL_FAILED:
                raise ProviderError(f"Firecrawl crawl job {job_id} {state}.", body=str(status))
            if loop.time() >= deadline:
                raise ProviderTimeoutError(
                    f"Firecrawl crawl job {job_id} timed out after {self.crawl_timeout:g}s."
                )

            logger.debug("Firecrawl crawl job %s is %s", job_id, state)
            await asyncio.sleep(self.poll_interval)

        documents: List[Dict[str, Any]] = list(status.get("data") or [])
        # Large results are paginated; only follow links back to the provider.
        next_url = status.get("next")
        while next_url and len(documents) < max_pages and next_url.startswith(self.base_url):
            page = await self._request("GET", next_url)
            documents.extend(page.get("data") or [])
            next_url = page.get("next")

        return documents

    async def _cancel_crawl(self, job_id: str) -> None:
        """Ask the provider to stop crawl job *job_id*; failures are only logged."""
        try:
            await self._request("DELETE", f"/v1/crawl/{job_id}", timeout=_CANCEL_TIMEOUT)
        except ProviderError as exc:
            logger.warning("Could not cancel Firecrawl crawl job %s: %s", job_id, exc)
        else:
            logger.info("Firecrawl crawl job %s cancelled", job_id)

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=self.timeout)
        return self._client

    async def _request(
        self,
        method: str,
        path: str,
        json: Optional[dict] = None,
        timeout: Optional[float] = None,
    ) -> Dict[str, Any]:
        """Send one authenticated request and return the decoded JSON body.

        Raises:
            ConfigurationError: if no API key is configured.
            ProviderTimeoutError: if the request timed out.
            ProviderError: on transport errors, non-2xx responses or non-JSON bodies.
        """
        if not self.api_key:
            raise ConfigurationError("FIRECRAWL_API_KEY is not set.")

        url = path if path.startswith(("http://", "https://")) else f"{self.base_url}{path}"
        headers = {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
        }

        try:
            response = await self._get_client().request(
                method,
                url,
                headers=headers,
                json=json,
                timeout=timeout if timeout is not None else httpx.USE_CLIENT_DEFAULT,
            )
        except httpx.TimeoutException as exc:
            logger.error("Firecrawl %s %s timed out", method, path)
            raise ProviderTimeoutError(f"Firecrawl request timed out: {exc}") from exc
        except httpx.HTTPError as exc:
            logger.error("Firecrawl %s %s failed: %s", method, path, exc)
            raise ProviderError(f"Firecrawl request failed: {exc}") from exc

        if not response.is_success:
            body = response.text
            logger.error(
                "Firecrawl %s %s returned HTTP %d: %s",
                method,
                path,
                response.status_code,
                body[:_LOG_BODY_LIMIT],
            )
            raise ProviderError(
                f"Firecrawl API returned HTTP {response.status_code}.",
                status_code=response.status_code,
                body=body,
            )

        try:
            data = response.json()
        except ValueError as exc:
            raise ProviderError(
                "Firecrawl API returned a non-JSON body.",
                status_code=response.status_code,
                body=response.text,
            ) from exc

        if not isinstance(data, dict):
            raise ProviderError(
                "Firecrawl API returned an unexpected body.",
                status_code=response.status_code,
                body=response.text,
            )
        return data
