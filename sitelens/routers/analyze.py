import logging
from typing import AsyncIterator

from fastapi import APIRouter, Depends, HTTPException, Request
from slowapi import Limiter
from slowapi.util import get_remote_address

from sitelens.config import get_settings
from sitelens.errors import ConfigurationError, InvalidInputError, ProviderError, ProviderTimeoutError
from sitelens.models.analysis import WebsiteAnalysis
from sitelens.models.analyze_request import AnalyzeRequest
from sitelens.services.analyzer import AnalyzeOptions, WebsiteAnalyzer
from sitelens.services.firecrawl import FirecrawlClient

logger = logging.getLogger(__name__)

limiter = Limiter(key_func=get_remote_address)
router = APIRouter()


async def get_analyzer() -> AsyncIterator[WebsiteAnalyzer]:
    """Provide a :class:`WebsiteAnalyzer` backed by a per-request Firecrawl client."""
    async with FirecrawlClient.from_settings() as client:
        yield WebsiteAnalyzer(client)


@router.post(
    "/analyze",
    response_model=WebsiteAnalysis,
    summary="Analyze a website's structure and design",
    description=(
        "Fetches *url* through the scraping provider, crawls up to `max_pages` "
        "further pages of the same site, and returns a structured analysis: "
        "technologies, layout, colour palette, UI components, design patterns, "
        "navigation, assets, SEO metadata and performance hints."
    ),
)
@limiter.limit(lambda: get_settings().analyze_rate_limit)
async def analyze_endpoint(
    request: Request,
    body: AnalyzeRequest,
    analyzer: WebsiteAnalyzer = Depends(get_analyzer),
) -> WebsiteAnalysis:
    """Run the website analysis pipeline for *url*."""
    settings = get_settings()
    url = str(body.url)
    max_pages = body.max_pages or settings.default_max_pages
    logger.info(
        "Analyze request received for %s (max_pages=%d)", url, max_pages, extra={"url": url, "max_pages": max_pages}
    )

    options = AnalyzeOptions(
        max_pages=max_pages,
        include_sitemap=body.include_sitemap,
        include_subdomains=body.include_subdomains,
        timeout=settings.analysis_timeout,
    )

    try:
        return await analyzer.analyze(url, options)
    except InvalidInputError as exc:
        logger.warning("Invalid or blocked URL: %s – %s", url, exc)
        raise HTTPException(status_code=400, detail=str(exc))
    except ConfigurationError as exc:
        logger.error("Analyzer is not configured: %s", exc)
        raise HTTPException(status_code=503, detail="Website analysis is not configured.")
    except ProviderTimeoutError:
        logger.error("Timeout analyzing URL: %s", url)
        raise HTTPException(status_code=504, detail="The scraping provider timed out.")
    except ProviderError as exc:
        # The provider body may echo credentials or internal URLs; log it, never return it.
        logger.error(
            "Provider error analyzing URL %s: %s (status=%s, body=%.1000s)",
            url,
            exc,
            exc.status_code,
            exc.body,
        )
        raise HTTPException(status_code=502, detail="The page could not be fetched for analysis.")
