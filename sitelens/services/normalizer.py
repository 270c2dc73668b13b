"""Normalisation utilities: URL keys for de-duplication and provider text clean-up."""

import re
from urllib.parse import urlparse

# Typographic characters the provider passes through from page copy, mapped
# to plain ASCII so downstream prompt text stays predictable.
_QUOTE_TRANSLATION = str.maketrans(
    {
        "\u2018": "'",
        "\u2019": "'",
        "\u201a": "'",
        "\u201b": "'",
        "\u201c": '"',
        "\u201d": '"',
        "\u201e": '"',
        "\u201f": '"',
        "\u00ab": '"',  # guillemets
        "\u00bb": '"',
        "\u2039": "'",
        "\u203a": "'",
        "\u2013": "-",  # en dash
        "\u2014": "-",  # em dash
        "\u2026": "...",
        "\u00a0": " ",  # non-breaking space
    }
)

_WHITESPACE_RE = re.compile(r"\s+")


def normalize_url(url: str) -> str:
    """Return a comparison key for *url*.

    Lower-cases scheme and host, drops the fragment and any trailing slash on
    the path, so ``https://Example.com/about/#team`` and
    ``https://example.com/about`` map to the same key.
    """
    parsed = urlparse(url.strip())
    path = parsed.path.rstrip("/")
    return parsed._replace(
        scheme=parsed.scheme.lower(),
        netloc=parsed.netloc.lower(),
        path=path,
        fragment="",
    ).geturl()


def normalize_quotes(text: str) -> str:
    """Replace smart quotes, guillemets, dashes, ellipses and NBSP with ASCII equivalents."""
    return text.translate(_QUOTE_TRANSLATION)


def collapse_whitespace(text: str) -> str:
    """Collapse every run of whitespace in *text* to one space and trim the ends."""
    return _WHITESPACE_RE.sub(" ", text).strip()
