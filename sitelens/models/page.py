from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field


class PageResult(BaseModel):
    """One page as returned by the scraping provider.

    Immutable once built.  ``html`` is kept for the extractors only and is
    never serialised into API responses.
    """

    model_config = ConfigDict(frozen=True)

    url: str
    title: Optional[str] = None
    content: Optional[str] = None  # plain text of the page
    markdown: Optional[str] = None
    html: Optional[str] = Field(default=None, exclude=True)
    metadata: Dict[str, Any] = Field(default_factory=dict)
    screenshot: Optional[str] = None  # URL or data URI
