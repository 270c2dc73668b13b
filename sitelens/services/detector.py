"""Technology detection from page HTML.

:func:`detect_technologies` tests an ordered list of signature rules against
the combined HTML of the analyzed pages and returns the names of every
technology whose signature is present.

Detection is presence-only: no version sniffing, and no promise that a
technology in use will be found.  A site that self-hosts a renamed React
bundle will simply not be reported as React.
"""

import re
from typing import List, Pattern, Tuple

# ---------------------------------------------------------------------------
# Signature rules, evaluated in order.  The result keeps this order.
# ---------------------------------------------------------------------------
_TECHNOLOGY_RULES: Tuple[Tuple[str, Pattern[str]], ...] = tuple(
    (name, re.compile(pattern, re.IGNORECASE))
    for name, pattern in (
        # JavaScript frameworks
        (
            "React",
            r"data-reactroot"
            r"|data-reactid"
            r"|react-dom"
            r"|__REACT_DEVTOOLS_GLOBAL_HOOK__"
            r"|/react(?:\.production)?(?:\.min)?\.js"
            # React / Next.js mount target
            r'|<div\s[^>]{0,200}\bid=["\'](?:root|__next)["\']',
        ),
        ("Next.js", r"__NEXT_DATA__|/_next/static/|next\.js"),
        (
            "Vue.js",
            r"\bdata-v-[0-9a-f]{6,8}\b"
            r"|__VUE__"
            r"|/vue(?:\.runtime)?(?:\.global)?(?:\.prod)?(?:\.min)?\.js",
        ),
        ("Nuxt.js", r"window\.__NUXT__|/_nuxt/|<div\s[^>]{0,200}\bid=[\"']__nuxt[\"']"),
        ("Angular", r"\bng-version=|\bng-app\b|angular(?:\.min)?\.js"),
        ("Svelte", r"\bsvelte-[a-z0-9]{5,}\b|__sveltekit|<svelte:"),
        ("Gatsby", r"___gatsby|gatsby-image|/page-data/"),
        ("Remix", r"__remixContext|__remixManifest"),
        ("Astro", r"<astro-island|\bastro-[a-z0-9]{8}\b"),
        # Libraries
        ("jQuery", r"jquery(?:[.-]\d[\w.]*)?(?:\.min)?\.js|\bjQuery\("),
        ("Alpine.js", r"\bx-data=|alpinejs"),
        ("htmx", r"\bhx-(?:get|post|swap|target)="),
        ("Three.js", r"three(?:\.module)?(?:\.min)?\.js"),
        ("GSAP", r"\bgsap(?:\.min)?\.js|greensock"),
        # CSS frameworks and icon/font services
        ("Bootstrap", r"bootstrap(?:\.bundle)?(?:\.min)?\.(?:css|js)|\bbtn-primary\b|\bnavbar-expand"),
        (
            "Tailwind CSS",
            r"tailwind"
            # Palette utility classes such as bg-slate-900 or text-indigo-500
            r"|\b(?:text|bg|border)-(?:slate|gray|zinc|neutral|stone|red|orange|amber|yellow"
            r"|lime|green|emerald|teal|cyan|sky|blue|indigo|violet|purple|fuchsia|pink|rose)"
            r"-(?:50|[1-9]00|950)\b",
        ),
        ("Bulma", r"bulma(?:\.min)?\.css"),
        ("Font Awesome", r"font-?awesome|\bfa-(?:solid|regular|brands)\b"),
        ("Google Fonts", r"fonts\.googleapis\.com|fonts\.gstatic\.com"),
        # CMS / site builders
        (
            "WordPress",
            r"/wp-content/"
            r"|/wp-includes/"
            r'|<meta[^>]{1,200}name=["\']generator["\'][^>]{1,200}content=["\']WordPress',
        ),
        ("Shopify", r"cdn\.shopify\.com|Shopify\.theme"),
        ("Webflow", r"\bdata-wf-page=|webflow\.js|assets\.website-files\.com"),
        ("Wix", r"static\.wixstatic\.com|wix-warmup-data"),
        ("Squarespace", r"static1\.squarespace\.com|Static\.SQUARESPACE_CONTEXT"),
        ("Framer", r"framerusercontent\.com|data-framer-"),
        # Bundlers
        ("Webpack", r"webpackJsonp|__webpack_require__|webpackChunk"),
        ("Vite", r"/@vite/client|\bvite-plugin|/assets/index-[\w-]{8}\.js"),
        # Analytics, tags, payments
        ("Google Analytics", r"google-analytics\.com|\bgtag\(|googletagmanager\.com/gtag/js"),
        ("Google Tag Manager", r"googletagmanager\.com/gtm\.js|GTM-[A-Z0-9]{4,}"),
        ("Segment", r"cdn\.segment\.com|analytics\.load\("),
        ("Hotjar", r"static\.hotjar\.com|\bhjid\b"),
        ("Plausible", r"plausible\.io/js"),
        ("Stripe", r"js\.stripe\.com"),
        ("Cloudflare", r"cdnjs\.cloudflare\.com|/cdn-cgi/"),
    )
)


def detect_technologies(html: str, text: str = "") -> List[str]:
    """Return the names of all technologies whose signature occurs in *html*.

    Args:
        html: Combined raw HTML of the analyzed pages.
        text: Combined plain text; unused, accepted for a uniform extractor
            signature.

    Returns:
        Matched technology names, deduplicated, in rule order.
    """
    return [name for name, pattern in _TECHNOLOGY_RULES if pattern.search(html)]
