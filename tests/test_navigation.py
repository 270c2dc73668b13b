"""Tests for navigation.extract_navigation."""

from sitelens.services.navigation import MAX_LINKS_PER_NAV, MAX_NAV_BLOCKS, extract_navigation


class TestExtractNavigation:
    def test_single_nav_block(self):
        items = extract_navigation('<nav><a href="/a">A</a></nav>')
        assert len(items) == 1
        item = items[0]
        assert item.index == 0
        assert item.type == "navigation"
        assert [(link.href, link.text) for link in item.links] == [("/a", "A")]

    def test_blocks_numbered_in_document_order(self):
        html = (
            '<header><nav><a href="/">Home</a></nav></header>'
            '<div role="navigation"><a href="/docs">Docs</a></div>'
            '<footer><nav><a href="/privacy">Privacy</a></nav></footer>'
        )
        items = extract_navigation(html)
        assert [item.index for item in items] == [0, 1, 2]
        assert [item.links[0].href for item in items] == ["/", "/docs", "/privacy"]

    def test_link_text_is_sanitized(self):
        items = extract_navigation('<nav><a href="/p">  Pricing &amp; <b>Plans</b>  </a></nav>')
        assert items[0].links[0].text == "Pricing & Plans"

    def test_rejects_overlong_href(self):
        long_href = "/" + "a" * 2001
        items = extract_navigation(f'<nav><a href="{long_href}">Long</a><a href="/ok">Ok</a></nav>')
        assert [link.href for link in items[0].links] == ["/ok"]

    def test_rejects_href_with_markup(self):
        html = '<nav><a href="/x&lt;script&gt;">Bad</a><a href="/ok">Ok</a></nav>'
        items = extract_navigation(html)
        assert [link.href for link in items[0].links] == ["/ok"]

    def test_anchors_without_href_are_skipped(self):
        items = extract_navigation('<nav><a name="top">Top</a><a href="/a">A</a></nav>')
        assert len(items[0].links) == 1

    def test_link_cap_per_block(self):
        anchors = "".join(f'<a href="/p{i}">P{i}</a>' for i in range(MAX_LINKS_PER_NAV + 50))
        items = extract_navigation(f"<nav>{anchors}</nav>")
        assert len(items[0].links) == MAX_LINKS_PER_NAV

    def test_block_cap(self):
        html = "".join(f'<nav><a href="/{i}">{i}</a></nav>' for i in range(MAX_NAV_BLOCKS + 5))
        assert len(extract_navigation(html)) == MAX_NAV_BLOCKS

    def test_no_nav(self):
        assert extract_navigation('<div><a href="/a">A</a></div>') == []

    def test_empty_html(self):
        assert extract_navigation("") == []
