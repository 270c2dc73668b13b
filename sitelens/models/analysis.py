from datetime import datetime, timezone
from typing import List, Literal

from pydantic import BaseModel, Field

from sitelens.models.page import PageResult

LayoutType = Literal[
    "CSS Grid",
    "Flexbox",
    "Bootstrap Grid",
    "Absolute Positioning",
    "Flow Layout",
]


class NavigationLink(BaseModel):
    href: str
    text: str


class NavigationItem(BaseModel):
    """One ``<nav>`` block, numbered in document order."""

    index: int
    type: str = "navigation"
    links: List[NavigationLink] = []


class Assets(BaseModel):
    images: List[str] = []
    stylesheets: List[str] = []
    scripts: List[str] = []
    fonts: List[str] = []


class Heading(BaseModel):
    level: int = Field(ge=1, le=6)
    text: str


class SeoData(BaseModel):
    meta_tags: List[str] = []
    headings: List[Heading] = []
    image_alts: List[str] = []


class Performance(BaseModel):
    page_count: int
    avg_load_time: float  # milliseconds per page
    has_lazy_loading: bool
    has_caching: bool


class PartialResultWarning(BaseModel):
    """Degradation notice: the crawl of secondary pages failed or came up short.

    The analysis is still valid; it simply covers fewer pages.
    """

    reason: str
    requested_pages: int
    received_pages: int


class WebsiteAnalysis(BaseModel):
    """Structured fingerprint of a website, one per analyzed URL."""

    url: str
    title: str
    description: str
    screenshot: str | None = None
    pages: List[PageResult]
    technologies: List[str]
    layout: LayoutType
    color_scheme: List[str]
    components: List[str]
    design_patterns: List[str]
    navigation_structure: List[NavigationItem]
    assets: Assets
    seo: SeoData
    performance: Performance
    warnings: List[PartialResultWarning] = []
    analyzed_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
