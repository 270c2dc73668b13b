"""Corpus building and the extractor pass.

The corpus is the concatenated HTML and plain text of every fetched page.
Each pattern extractor reads the same corpus and none depends on another's
output, so they may run in any order.
"""

from typing import List, NamedTuple, Sequence

from sitelens.models.analysis import Assets, LayoutType, NavigationItem, SeoData
from sitelens.models.page import PageResult
from sitelens.services.assets import extract_assets
from sitelens.services.design import (
    classify_layout,
    detect_design_patterns,
    extract_colors,
    identify_components,
)
from sitelens.services.detector import detect_technologies
from sitelens.services.navigation import extract_navigation
from sitelens.services.seo import analyze_seo


class Corpus(NamedTuple):
    html: str
    text: str


class ExtractedFields(NamedTuple):
    technologies: List[str]
    layout: LayoutType
    color_scheme: List[str]
    components: List[str]
    design_patterns: List[str]
    navigation_structure: List[NavigationItem]
    assets: Assets
    seo: SeoData


def build_corpus(pages: Sequence[PageResult]) -> Corpus:
    """Concatenate the HTML and the text (content, else markdown) of *pages* in order."""
    html = "\n".join(page.html for page in pages if page.html)
    text = "\n\n".join(
        page.content or page.markdown for page in pages if page.content or page.markdown
    )
    return Corpus(html=html, text=text)


def run_extractors(corpus: Corpus) -> ExtractedFields:
    """Run every pattern extractor over *corpus*.

    Extractors do not raise for string input; an exception here is a bug and
    is left to propagate.
    """
    html, text = corpus
    return ExtractedFields(
        technologies=detect_technologies(html, text),
        layout=classify_layout(html, text),
        color_scheme=extract_colors(html, text),
        components=identify_components(html, text),
        design_patterns=detect_design_patterns(html, text),
        navigation_structure=extract_navigation(html, text),
        assets=extract_assets(html, text),
        seo=analyze_seo(html, text),
    )
