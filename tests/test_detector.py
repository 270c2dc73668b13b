"""Tests for detector.detect_technologies."""

from sitelens.services.detector import detect_technologies


class TestDetectFrameworks:
    def test_react_root_attribute(self):
        assert "React" in detect_technologies('<div data-reactroot=""></div>')

    def test_next_data_script(self):
        html = '<div id="__next"></div><script id="__NEXT_DATA__" type="application/json">{}</script>'
        techs = detect_technologies(html)
        assert "Next.js" in techs
        assert "React" in techs

    def test_vue_scoped_attribute(self):
        assert "Vue.js" in detect_technologies('<div data-v-7ba5bd90 class="card"></div>')

    def test_nuxt_window_var(self):
        assert "Nuxt.js" in detect_technologies("<script>window.__NUXT__={}</script>")

    def test_angular_ng_version(self):
        assert "Angular" in detect_technologies('<app-root ng-version="17.0.0"></app-root>')


class TestDetectLibrariesAndServices:
    def test_jquery_script(self):
        html = '<script src="https://code.jquery.com/jquery-3.7.1.min.js"></script>'
        assert "jQuery" in detect_technologies(html)

    def test_bootstrap_stylesheet(self):
        html = '<link rel="stylesheet" href="/css/bootstrap.min.css">'
        assert "Bootstrap" in detect_technologies(html)

    def test_tailwind_palette_classes(self):
        html = '<div class="bg-slate-900 text-indigo-500 px-4">Hi</div>'
        assert "Tailwind CSS" in detect_technologies(html)

    def test_wordpress_content_path(self):
        html = '<img src="/wp-content/uploads/2024/photo.jpg">'
        assert "WordPress" in detect_technologies(html)

    def test_wordpress_generator_meta(self):
        html = '<meta name="generator" content="WordPress 6.4.2">'
        assert "WordPress" in detect_technologies(html)

    def test_google_analytics_snippet(self):
        html = "<script>window.dataLayer=[];function gtag(){dataLayer.push(arguments);}gtag('js', new Date());</script>"
        assert "Google Analytics" in detect_technologies(html)

    def test_webpack_chunk(self):
        assert "Webpack" in detect_technologies("(self.webpackChunk_N_E=self.webpackChunk_N_E||[])")

    def test_case_insensitive(self):
        assert "Shopify" in detect_technologies('<script src="//CDN.SHOPIFY.COM/s/files/1/theme.js">')


class TestDetectResultShape:
    def test_plain_page_has_no_technologies(self):
        assert detect_technologies("<html><body><p>Hello</p></body></html>") == []

    def test_empty_html(self):
        assert detect_technologies("") == []

    def test_each_name_reported_once_in_rule_order(self):
        html = (
            '<script src="/js/jquery.min.js"></script>'
            '<div data-reactroot></div>'
            '<script src="/js/jquery.min.js"></script>'
        )
        techs = detect_technologies(html)
        assert techs.count("jQuery") == 1
        assert techs.index("React") < techs.index("jQuery")
