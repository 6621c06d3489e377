import pytest
from datetime import datetime, timezone

import httpx

from src.news.services.sources.registry import SourceRegistry, create_adapter


@pytest.fixture
def registry(test_settings):
    return SourceRegistry.from_settings(test_settings)


@pytest.fixture
def make_adapter(registry, http_client, test_settings, fake_clock):
    def _make(name):
        return create_adapter(registry.get(name), http_client, test_settings, clock=fake_clock)
    return _make


class TestNewsAPIAdapter:
    async def test_query_parameters(self, make_adapter, upstream):
        adapter = make_adapter("NewsAPI")

        await adapter.fetch_news(["ae"], ["economy", "media"])

        request = upstream.calls_for("NewsAPI")[0]
        assert request.url.path == "/v2/top-headlines"
        assert request.url.params["country"] == "ae"
        assert request.url.params["q"] == "economy OR media"
        assert request.url.params["apiKey"] == "newsapi-key"

    async def test_normalizes_articles(self, make_adapter, upstream, payloads):
        upstream.set("NewsAPI", "ae", {"articles": [
            payloads.newsapi("Dubai economy expands", "Media and tourism lead growth", url="https://n.example/1"),
        ]})
        adapter = make_adapter("NewsAPI")

        items = await adapter.fetch_news(["ae"], ["economy", "sports"])

        assert len(items) == 1
        item = items[0]
        assert item.title == "Dubai economy expands"
        assert item.url == "https://n.example/1"
        assert item.source == "Gulf News"
        assert item.country == "ae"
        assert item.category == "general"
        assert item.image_url == "https://news.example/image.jpg"
        assert item.published_at == datetime(2026, 10, 1, 8, 0, tzinfo=timezone.utc)
        assert item.relevance_score == 0.5
        assert item.keywords[:3] == ["dubai", "economy", "expands"]
        assert item.title_ar is None

    async def test_skips_records_without_title_or_url(self, make_adapter, upstream, payloads):
        missing_url = payloads.newsapi("No url")
        missing_url["url"] = None
        missing_title = payloads.newsapi("")
        upstream.set("NewsAPI", "sa", {"articles": [missing_url, missing_title, payloads.newsapi("Kept")]})
        adapter = make_adapter("NewsAPI")

        items = await adapter.fetch_news(["sa"], [])

        assert [item.title for item in items] == ["Kept"]

    async def test_skips_records_with_non_string_title_or_url(self, make_adapter, upstream, payloads):
        numeric_title = payloads.newsapi("placeholder")
        numeric_title["title"] = 12345
        numeric_url = payloads.newsapi("Numeric url")
        numeric_url["url"] = 999
        upstream.set("NewsAPI", "ae", {"articles": [
            numeric_title,
            numeric_url,
            payloads.newsapi("Real headline about economy"),
        ]})
        adapter = make_adapter("NewsAPI")

        items = await adapter.fetch_news(["ae"], ["economy"])

        assert [item.title for item in items] == ["Real headline about economy"]
        assert all(isinstance(item.url, str) for item in items)
        assert adapter.health.failures == 0

    async def test_non_string_optional_fields_fall_back_to_defaults(self, make_adapter, upstream, fake_clock):
        upstream.set("NewsAPI", "eg", {"articles": [{
            "title": "Cairo media forum",
            "url": "https://n.example/cairo",
            "description": {"text": "nested"},
            "source": {"name": 42},
            "urlToImage": ["https://n.example/a.jpg"],
            "publishedAt": 1727769600,
        }]})
        adapter = make_adapter("NewsAPI")

        items = await adapter.fetch_news(["eg"], [])

        assert items[0].description == ""
        assert items[0].source == "NewsAPI"
        assert items[0].image_url is None
        assert items[0].published_at == fake_clock.now

    async def test_defaults_missing_fields(self, make_adapter, upstream, fake_clock):
        upstream.set("NewsAPI", "eg", {"articles": [{"title": "Bare", "url": "https://n.example/bare"}]})
        adapter = make_adapter("NewsAPI")

        items = await adapter.fetch_news(["eg"], [])

        assert items[0].description == ""
        assert items[0].published_at == fake_clock.now
        assert items[0].source == "NewsAPI"
        assert items[0].relevance_score == 0.5

    async def test_only_supported_countries_are_queried(self, make_adapter, upstream):
        adapter = make_adapter("NewsAPI")

        await adapter.fetch_news(["ae", "ly", "sa"], [])

        countries = [request.url.params["country"] for request in upstream.calls_for("NewsAPI")]
        assert countries == ["ae", "sa"]


class TestGNewsAdapter:
    async def test_query_parameters(self, make_adapter, upstream):
        await make_adapter("GNews").fetch_news(["kw"], ["media", "press"])

        params = upstream.calls_for("GNews")[0].url.params
        assert params["q"] == "media press"
        assert params["lang"] == "en"
        assert params["max"] == "10"
        assert params["apikey"] == "gnews-key"

    async def test_default_query_without_keywords(self, make_adapter, upstream, payloads):
        upstream.set("GNews", "qa", {"articles": [payloads.gnews("Doha forum opens")]})

        items = await make_adapter("GNews").fetch_news(["qa"], [])

        assert upstream.calls_for("GNews")[0].url.params["q"] == "news"
        assert items[0].source == "Arab News"
        assert items[0].image_url == "https://gnews.example/image.jpg"


class TestMediaStackAdapter:
    async def test_query_and_category(self, make_adapter, upstream, payloads):
        upstream.set("MediaStack", "sd", {"data": [payloads.mediastack("Khartoum markets", category="business")]})

        items = await make_adapter("MediaStack").fetch_news(["sd"], ["markets", "trade"])

        params = upstream.calls_for("MediaStack")[0].url.params
        assert params["keywords"] == "markets,trade"
        assert params["access_key"] == "mediastack-key"
        assert params["limit"] == "25"
        assert items[0].category == "business"
        assert items[0].source == "Khaleej Times"
        assert items[0].country == "sd"

    async def test_non_string_category_falls_back_to_general(self, make_adapter, upstream, payloads):
        article = payloads.mediastack("Khartoum newsroom reopens", category=None)
        article["category"] = 7
        article["source"] = ["Sudan Tribune"]
        upstream.set("MediaStack", "sd", {"data": [article]})
        adapter = make_adapter("MediaStack")

        items = await adapter.fetch_news(["sd"], [])

        assert items[0].category == "general"
        assert items[0].source == "MediaStack"


class TestNewsDataAdapter:
    async def test_maps_link_and_first_category(self, make_adapter, upstream, payloads):
        upstream.set("NewsData", "bh", {"results": [payloads.newsdata("Manama tech week", link="https://nd.example/1")]})

        items = await make_adapter("NewsData").fetch_news(["bh"], ["tech"])

        params = upstream.calls_for("NewsData")[0].url.params
        assert params["q"] == "tech"
        assert params["language"] == "ar,en"
        assert items[0].url == "https://nd.example/1"
        assert items[0].category == "technology"
        assert items[0].source == "thenational"
        assert items[0].published_at == datetime(2026, 10, 1, 11, 0, tzinfo=timezone.utc)


class TestFailureHandling:
    async def test_http_error_for_one_country_does_not_stop_others(self, make_adapter, upstream, payloads):
        upstream.set("GNews", "sa", 500)
        upstream.set("GNews", "ae", {"articles": [payloads.gnews("Abu Dhabi summit")]})
        adapter = make_adapter("GNews")

        items = await adapter.fetch_news(["sa", "ae"], [])

        assert [item.title for item in items] == ["Abu Dhabi summit"]
        assert adapter.health.failures == 1
        assert adapter.health.requests == 2
        assert "500" in adapter.health.last_error

    async def test_network_error_is_swallowed(self, make_adapter, upstream):
        upstream.set("NewsAPI", "ae", httpx.ConnectError("connection refused"))
        adapter = make_adapter("NewsAPI")

        assert await adapter.fetch_news(["ae"], []) == []
        assert adapter.health.consecutive_failures == 1
        assert adapter.health.status == "degraded"

    async def test_malformed_json_is_swallowed(self, registry, test_settings, fake_clock):
        def handler(request):
            return httpx.Response(200, content=b"<html>not json</html>")

        async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
            adapter = create_adapter(registry.get("NewsAPI"), client, test_settings, clock=fake_clock)
            items = await adapter.fetch_news(["ae"], [])

        assert items == []
        assert adapter.health.failures == 1

    async def test_repeated_failures_mark_source_unhealthy(self, make_adapter, upstream):
        for country in ("ae", "eg", "sa"):
            upstream.set("NewsAPI", country, 429)
        adapter = make_adapter("NewsAPI")

        await adapter.fetch_news(["ae", "eg", "sa"], [])

        assert adapter.health.status == "unhealthy"

    async def test_success_resets_consecutive_failures(self, make_adapter, upstream):
        upstream.set("NewsAPI", "ae", 503)
        adapter = make_adapter("NewsAPI")

        await adapter.fetch_news(["ae", "sa"], [])

        assert adapter.health.failures == 1
        assert adapter.health.consecutive_failures == 0
        assert adapter.health.status == "healthy"


class TestRequestDelay:
    async def test_pauses_between_countries_only(self, registry, http_client, fake_clock, monkeypatch):
        from src.config import Settings
        from src.news.services.sources import base

        sleeps = []

        async def fake_sleep(seconds):
            if seconds:
                sleeps.append(seconds)

        monkeypatch.setattr(base.asyncio, "sleep", fake_sleep)
        settings = Settings(_env_file=None, gnews_api_key="k", gnews_request_delay_seconds=2.0)
        adapter = create_adapter(registry.get("GNews"), http_client, settings, clock=fake_clock)

        await adapter.fetch_news(["ae", "sa", "qa"], [])

        assert sleeps == [2.0, 2.0]

    async def test_delay_comes_from_declared_setting(self, registry, http_client, test_settings):
        adapter = create_adapter(registry.get("NewsData"), http_client, test_settings)

        assert adapter.delay_setting == "newsdata_request_delay_seconds"
        assert adapter.request_delay == test_settings.newsdata_request_delay_seconds

    async def test_misspelled_delay_setting_is_not_masked(self, registry, http_client, test_settings):
        from src.news.services.sources.gnews_adapter import GNewsAdapter

        class MisconfiguredAdapter(GNewsAdapter):
            delay_setting = "gnews_request_dealy_seconds"

        adapter = MisconfiguredAdapter(registry.get("GNews"), http_client, test_settings)

        with pytest.raises(AttributeError):
            adapter.request_delay
