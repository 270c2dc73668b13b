"""Plain-text sanitisation for fragments pulled out of third-party HTML.

:func:`sanitize` turns an arbitrary string (link text, heading text, meta
content, …) into safe, length-bounded plain text.  It is a pure function and
never raises for ``str`` input.
"""

import re

# Longest sanitized output.
MAX_TEXT_LENGTH = 500

# Raw input is cut to this length before any regex runs over it.
MAX_INPUT_LENGTH = 10_000

# <script>/<style> elements including their bodies, so embedded code is never
# mistaken for text.  Non-greedy body, bounded by the closing tag.
_CODE_BLOCK_RE = re.compile(
    r"<(script|style)\b[^>]*>.*?</\1\s*>",
    re.IGNORECASE | re.DOTALL,
)

# A <script>/<style> element whose closing tag was cut off by the input limit.
# Everything from its opening tag to the end of the text is code.
_UNTERMINATED_BLOCK_RE = re.compile(r"<(?:script|style)(?=[\s/>]|\Z).*\Z", re.IGNORECASE | re.DOTALL)

# Any remaining tag, comment or doctype.
_TAG_RE = re.compile(r"<[^<>]*>")

_ENTITIES = {
    "&amp;": "&",
    "&lt;": "<",
    "&gt;": ">",
    "&quot;": '"',
    "&#39;": "'",
    "&nbsp;": " ",
}
_ENTITY_RE = re.compile("|".join(re.escape(e) for e in _ENTITIES), re.IGNORECASE)

_ANGLE_RE = re.compile(r"[<>]")
_WHITESPACE_RE = re.compile(r"\s+")


def _decode_entities(text: str) -> str:
    return _ENTITY_RE.sub(lambda m: _ENTITIES[m.group(0).lower()], text)


def _clean_once(text: str) -> str:
    text = _CODE_BLOCK_RE.sub(" ", text)
    text = _UNTERMINATED_BLOCK_RE.sub(" ", text)
    text = _TAG_RE.sub(" ", text)
    text = _decode_entities(text)
    # Whatever angle brackets are left (stray or freshly decoded) are dropped.
    text = _ANGLE_RE.sub("", text)
    return _WHITESPACE_RE.sub(" ", text)


def sanitize(raw: str) -> str:
    """Strip markup from *raw* and return at most ``MAX_TEXT_LENGTH`` characters.

    Script and style bodies are removed before generic tag stripping, then a
    small fixed set of entities (``&amp;``, ``&lt;``, ``&gt;``, ``&quot;``,
    ``&#39;``, ``&nbsp;``) is decoded.  The cleaning pass is repeated until
    the text stops changing, so decoded markup such as ``&amp;lt;script&amp;gt;``
    cannot survive and ``sanitize(sanitize(x)) == sanitize(x)``.
    """
    if not raw:
        return ""

    text = raw[:MAX_INPUT_LENGTH]
    # A pass either shortens the text or only normalises whitespace.
    while True:
        cleaned = _clean_once(text)
        if cleaned == text:
            break
        text = cleaned

    return text.strip()[:MAX_TEXT_LENGTH].rstrip()
