"""Tests for the POST /analyze endpoint.

The analyzer dependency is overridden with a stub so the router's request
validation, option mapping and error translation are tested without a
scraping provider.
"""

from unittest.mock import AsyncMock

import pytest
from fastapi.testclient import TestClient

from sitelens.config import get_settings
from sitelens.errors import ConfigurationError, InvalidInputError, ProviderError, ProviderTimeoutError
from sitelens.main import app
from sitelens.models.analysis import Assets, Performance, SeoData, WebsiteAnalysis
from sitelens.models.page import PageResult
from sitelens.routers.analyze import get_analyzer

client = TestClient(app)


@pytest.fixture(autouse=True)
def reset_rate_limits():
    """Clear the slowapi in-memory counter before every test."""
    app.state.limiter._storage.reset()
    yield


def _analysis(url: str = "https://example.com/") -> WebsiteAnalysis:
    return WebsiteAnalysis(
        url=url,
        title="Example",
        description="An example site",
        pages=[PageResult(url=url, title="Example", html="<html><nav></nav></html>")],
        technologies=["React"],
        layout="Flexbox",
        color_scheme=["#ffffff"],
        components=["Navigation Bar"],
        design_patterns=[],
        navigation_structure=[],
        assets=Assets(images=["/x.png"]),
        seo=SeoData(),
        performance=Performance(
            page_count=1, avg_load_time=120.0, has_lazy_loading=False, has_caching=False
        ),
    )


@pytest.fixture
def analyzer():
    """Install a stub analyzer for the duration of one test."""
    stub = AsyncMock()
    stub.analyze = AsyncMock(return_value=_analysis())
    app.dependency_overrides[get_analyzer] = lambda: stub
    yield stub
    app.dependency_overrides.pop(get_analyzer, None)


class TestAnalyzeEndpoint:
    def test_success(self, analyzer):
        resp = client.post("/analyze", json={"url": "https://example.com"})
        assert resp.status_code == 200
        data = resp.json()
        assert data["title"] == "Example"
        assert data["layout"] == "Flexbox"
        assert data["technologies"] == ["React"]
        assert data["performance"]["page_count"] == 1
        assert data["warnings"] == []

    def test_html_not_in_response(self, analyzer):
        resp = client.post("/analyze", json={"url": "https://example.com"})
        assert resp.status_code == 200
        assert "html" not in resp.json()["pages"][0]
        assert "<nav>" not in resp.text

    def test_options_are_forwarded(self, analyzer):
        resp = client.post(
            "/analyze",
            json={
                "url": "https://example.com",
                "max_pages": 3,
                "include_sitemap": False,
                "include_subdomains": True,
            },
        )
        assert resp.status_code == 200
        url, options = analyzer.analyze.await_args.args
        assert url == "https://example.com/"
        assert options.max_pages == 3
        assert options.include_sitemap is False
        assert options.include_subdomains is True

    def test_default_options(self, analyzer):
        client.post("/analyze", json={"url": "https://example.com"})
        _, options = analyzer.analyze.await_args.args
        assert options.max_pages == 10
        assert options.include_sitemap is True
        assert options.include_subdomains is False

    def test_missing_url_is_422(self, analyzer):
        resp = client.post("/analyze", json={})
        assert resp.status_code == 422

    def test_malformed_url_is_422(self, analyzer):
        resp = client.post("/analyze", json={"url": "not a url"})
        assert resp.status_code == 422
        analyzer.analyze.assert_not_awaited()

    @pytest.mark.parametrize("max_pages", [0, 51])
    def test_max_pages_out_of_range_is_422(self, analyzer, max_pages):
        resp = client.post("/analyze", json={"url": "https://example.com", "max_pages": max_pages})
        assert resp.status_code == 422

    def test_invalid_input_is_400(self, analyzer):
        analyzer.analyze.side_effect = InvalidInputError(
            "Requests to private/internal addresses are not allowed."
        )
        resp = client.post("/analyze", json={"url": "http://localhost:8000"})
        assert resp.status_code == 400
        assert "private" in resp.json()["detail"]

    def test_provider_error_is_502_and_hides_body(self, analyzer):
        analyzer.analyze.side_effect = ProviderError(
            "Firecrawl API returned HTTP 401.", status_code=401, body='{"error": "bad key fc-secret"}'
        )
        resp = client.post("/analyze", json={"url": "https://example.com"})
        assert resp.status_code == 502
        assert "fc-secret" not in resp.text
        assert resp.json()["detail"] == "The page could not be fetched for analysis."

    def test_provider_timeout_is_504(self, analyzer):
        analyzer.analyze.side_effect = ProviderTimeoutError("Firecrawl request timed out")
        resp = client.post("/analyze", json={"url": "https://example.com"})
        assert resp.status_code == 504

    def test_missing_configuration_is_503(self, analyzer):
        analyzer.analyze.side_effect = ConfigurationError("FIRECRAWL_API_KEY is not set.")
        resp = client.post("/analyze", json={"url": "https://example.com"})
        assert resp.status_code == 503
        assert "FIRECRAWL_API_KEY" not in resp.text

    def test_rate_limit(self, analyzer):
        for _ in range(5):
            assert client.post("/analyze", json={"url": "https://example.com"}).status_code == 200
        resp = client.post("/analyze", json={"url": "https://example.com"})
        assert resp.status_code == 429

    def test_rate_limit_follows_current_settings(self, analyzer, monkeypatch):
        monkeypatch.setenv("ANALYZE_RATE_LIMIT", "2/minute")
        get_settings.cache_clear()
        try:
            for _ in range(2):
                assert client.post("/analyze", json={"url": "https://example.com"}).status_code == 200
            resp = client.post("/analyze", json={"url": "https://example.com"})
            assert resp.status_code == 429
        finally:
            get_settings.cache_clear()


class TestRoot:
    def test_root(self):
        resp = client.get("/")
        assert resp.status_code == 200
        assert resp.json() == {"message": "Hello from SiteLens"}
