"""Tests for sanitizer.sanitize."""

import pytest

from sitelens.services.sanitizer import MAX_TEXT_LENGTH, sanitize


_SAMPLES = [
    "",
    "plain text",
    "<p>Hello <b>world</b></p>",
    "<script>alert('xss')</script>Visible",
    "<style>body { color: red; }</style>Styled",
    "&lt;script&gt;alert(1)&lt;/script&gt;",
    "&amp;lt;b&amp;gt;double encoded&amp;lt;/b&amp;gt;",
    "&am<p>p;",
    "a < b and c > d",
    "unclosed <div class='x' tag",
    "<<<>>>",
    "   \t\n  spaced   out \n ",
    "x" * 2000,
    "<script>" + "a" * 20000 + "</script>tail",
    "<p>" + "word " * 300 + "</p>",
    "Tom &amp; Jerry &quot;cartoon&quot; &#39;classic&#39;&nbsp;show",
]


class TestSanitize:
    def test_strips_tags(self):
        assert sanitize("<p>Hello <b>world</b></p>") == "Hello world"

    def test_removes_script_body(self):
        result = sanitize("<p>Text</p><script>alert('xss')</script>")
        assert "alert" not in result
        assert result == "Text"

    def test_removes_style_body(self):
        result = sanitize("<style>body { color: red; }</style><p>Text</p>")
        assert "color" not in result
        assert result == "Text"

    def test_script_with_attributes_and_uppercase(self):
        result = sanitize('<SCRIPT type="text/javascript">var x = 1;</SCRIPT>After')
        assert result == "After"

    def test_script_longer_than_input_limit(self):
        result = sanitize("<script>" + "a" * 20000 + "</script>tail")
        assert "a" not in result
        assert result == ""

    def test_text_before_cut_off_style_is_kept(self):
        result = sanitize("<p>Intro</p><style>" + "b{c:d}" * 5000 + "</style>")
        assert result == "Intro"

    def test_decodes_common_entities(self):
        result = sanitize("Tom &amp; Jerry &quot;cartoon&quot; &#39;classic&#39;&nbsp;show")
        assert result == "Tom & Jerry \"cartoon\" 'classic' show"

    def test_decoded_markup_is_not_kept(self):
        result = sanitize("&lt;script&gt;alert(1)&lt;/script&gt;")
        assert "<" not in result
        assert ">" not in result

    def test_trims_and_collapses_whitespace(self):
        assert sanitize("   \t\n  spaced   out \n ") == "spaced out"

    def test_truncates_to_limit(self):
        result = sanitize("x" * 2000)
        assert len(result) == MAX_TEXT_LENGTH

    def test_empty_string(self):
        assert sanitize("") == ""

    def test_markup_only_becomes_empty(self):
        assert sanitize("<div><span></span></div>") == ""


class TestSanitizeProperties:
    @pytest.mark.parametrize("raw", _SAMPLES)
    def test_idempotent(self, raw):
        once = sanitize(raw)
        assert sanitize(once) == once

    @pytest.mark.parametrize("raw", _SAMPLES)
    def test_no_angle_brackets_and_bounded(self, raw):
        result = sanitize(raw)
        assert "<" not in result
        assert ">" not in result
        assert len(result) <= MAX_TEXT_LENGTH
