from typing import Optional

from pydantic import BaseModel, Field, HttpUrl


class AnalyzeRequest(BaseModel):
    url: HttpUrl
    max_pages: Optional[int] = Field(
        default=None,
        ge=1,
        le=50,
        description="Maximum number of secondary pages to crawl (1–50). Defaults to DEFAULT_MAX_PAGES.",
    )
    include_sitemap: bool = Field(
        default=True,
        description="Let the provider seed the crawl from the site's sitemap.",
    )
    include_subdomains: bool = Field(
        default=False,
        description="Follow links onto subdomains of the target host.",
    )
