"""Visual design signals: layout style, colour palette, UI components and design patterns.

Every function here takes the combined HTML (and, where useful, the combined
plain text) of the analyzed pages and returns one field of the analysis.
They are independent of each other and hold no state.
"""

import re
from itertools import islice
from typing import List, Pattern, Tuple

from sitelens.models.analysis import LayoutType
from sitelens.services.deduplicator import unique_capped

# ---------------------------------------------------------------------------
# Layout
# ---------------------------------------------------------------------------
DEFAULT_LAYOUT: LayoutType = "Flow Layout"

# Checked in order; the first rule that matches decides the label.
_LAYOUT_RULES: Tuple[Tuple[LayoutType, Pattern[str]], ...] = (
    (
        "CSS Grid",
        re.compile(
            r"display\s*:\s*(?:inline-)?grid\b"
            r"|grid-template-(?:columns|rows|areas)\s*:"
            # Tailwind-style utility classes: grid, grid-cols-3
            r"|class=[\"'](?:grid|grid-cols-\d+)[\s\"']"
            r"|\sgrid-cols-\d+\b",
            re.IGNORECASE,
        ),
    ),
    (
        "Flexbox",
        re.compile(
            r"display\s*:\s*(?:inline-)?flex\b"
            r"|class=[\"'](?:flex|inline-flex)[\s\"']"
            r"|\s(?:flex-row|flex-col|d-flex)\b",
            re.IGNORECASE,
        ),
    ),
    (
        "Bootstrap Grid",
        re.compile(
            r"class=[\"'](?:container(?:-fluid)?|row)[\s\"']"
            r"|\bcol-(?:(?:xs|sm|md|lg|xl|xxl)-)?\d{1,2}\b",
            re.IGNORECASE,
        ),
    ),
    (
        "Absolute Positioning",
        re.compile(r"position\s*:\s*(?:absolute|fixed)\b", re.IGNORECASE),
    ),
)

# ---------------------------------------------------------------------------
# Colours
# ---------------------------------------------------------------------------
MAX_COLORS = 20

# Stop scanning after this many literal matches, distinct or not.
_MAX_COLOR_MATCHES = 5000

# ``&#160;`` and friends are numeric entities, not colours.
_COLOR_RE = re.compile(
    r"(?<![&\w])#(?:[0-9a-fA-F]{6}|[0-9a-fA-F]{3})\b"
    r"|\brgba?\(\s*[\d.%\s,/]{1,60}\)",
    re.IGNORECASE,
)

# ---------------------------------------------------------------------------
# Components
# ---------------------------------------------------------------------------
_COMPONENT_RULES: Tuple[Tuple[str, Pattern[str]], ...] = tuple(
    (name, re.compile(pattern, re.IGNORECASE))
    for name, pattern in (
        ("Navigation Bar", r"<nav\b|role=[\"']navigation[\"']|\bnavbar\b|\bnav-menu\b"),
        ("Header", r"<header\b|role=[\"']banner[\"']|\bsite-header\b"),
        ("Footer", r"<footer\b|role=[\"']contentinfo[\"']|\bsite-footer\b"),
        ("Sidebar", r"<aside\b|\bsidebar\b|\bside-bar\b"),
        ("Carousel/Slider", r"\bcarousel\b|\bslider\b|\bswiper\b|\bslick-slide\b|\bsplide\b"),
        ("Modal/Dialog", r"<dialog\b|\bmodal\b|role=[\"'](?:alert)?dialog[\"']|aria-modal="),
        ("Dropdown", r"\bdropdown\b|aria-haspopup=|<select\b"),
        ("Accordion", r"\baccordion\b|<details\b|\bcollapsible\b"),
        ("Tabs", r"role=[\"']tab(?:list)?[\"']|\btabs?-(?:nav|list|panel)\b|\bnav-tabs\b"),
        ("Forms", r"<form\b"),
        ("Search", r"type=[\"']search[\"']|role=[\"']search[\"']|\bsearch-(?:form|bar|box|input)\b"),
        ("Cards", r"\bcard\b|\bcards\b|\bcard-(?:body|title|grid)\b"),
        ("Tables", r"<table\b"),
        ("Image Gallery", r"\bgallery\b|\blightbox\b|\bmasonry\b"),
        ("Testimonials", r"\btestimonials?\b|<blockquote\b"),
        ("Pricing Tables", r"\bpricing\b|\bprice-(?:table|card|plan)\b|\bplans?-(?:card|table)\b"),
    )
)

# ---------------------------------------------------------------------------
# Design patterns
# ---------------------------------------------------------------------------
_DESIGN_PATTERN_RULES: Tuple[Tuple[str, Pattern[str]], ...] = tuple(
    (name, re.compile(pattern, re.IGNORECASE))
    for name, pattern in (
        ("Hero Section", r"\bhero\b|\bjumbotron\b|\bbanner-(?:main|hero)\b|\bmasthead\b"),
        (
            "Call to Action",
            r"\bcta\b|\bbtn-(?:primary|cta)\b|\bget started\b|\bsign up\b|\bstart (?:free )?trial\b"
            r"|\bbook a demo\b",
        ),
        ("Feature Grid", r"\bfeatures?-(?:grid|list|section|cards?)\b|id=[\"']features[\"']"),
        (
            "Social Proof",
            r"\btestimonials?\b|\breviews?\b|\btrusted by\b|\bcustomer-logos?\b|\blogo-(?:cloud|wall)\b"
            r"|\bstar-rating\b",
        ),
        ("Newsletter Signup", r"\bnewsletter\b|\bsubscribe\b|\bmailchimp\b"),
        ("Sticky Elements", r"position\s*:\s*sticky\b|\bsticky\b|\bfixed-top\b"),
        ("Parallax", r"\bparallax\b|background-attachment\s*:\s*fixed\b"),
        ("Gradients", r"\b(?:linear|radial|conic)-gradient\(|\bbg-gradient-"),
        ("Shadows", r"\bbox-shadow\s*:|\bshadow(?:-(?:sm|md|lg|xl|2xl))?\b"),
        ("Rounded Corners", r"\bborder-radius\s*:|\brounded(?:-(?:sm|md|lg|xl|2xl|3xl|full))?\b"),
    )
)


def classify_layout(html: str, text: str = "") -> LayoutType:
    """Return the layout label of the first rule that matches *html*.

    Order: CSS Grid, Flexbox, Bootstrap Grid, Absolute Positioning.  When
    nothing matches, ``"Flow Layout"``.  Exactly one label is ever returned.
    """
    for label, pattern in _LAYOUT_RULES:
        if pattern.search(html):
            return label
    return DEFAULT_LAYOUT


def extract_colors(html: str, text: str = "") -> List[str]:
    """Return up to ``MAX_COLORS`` distinct colour literals in order of first appearance.

    Recognises ``#rgb``, ``#rrggbb``, ``rgb(...)`` and ``rgba(...)``.  Values are
    kept verbatim; ``#FFF`` and ``#fff`` count as two colours.
    """
    matches = (m.group(0) for m in islice(_COLOR_RE.finditer(html), _MAX_COLOR_MATCHES))
    return unique_capped(matches, MAX_COLORS)


def identify_components(html: str, text: str = "") -> List[str]:
    """Return the UI component categories whose markers occur in *html*."""
    return [name for name, pattern in _COMPONENT_RULES if pattern.search(html)]


def detect_design_patterns(html: str, text: str = "") -> List[str]:
    """Return the design patterns whose markers occur in *html* or *text*.

    Call-to-action and social-proof phrases often live only in the visible
    copy, so the plain text is searched as well.
    """
    return [
        name
        for name, pattern in _DESIGN_PATTERN_RULES
        if pattern.search(html) or (text and pattern.search(text))
    ]
