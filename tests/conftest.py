import pytest
from datetime import datetime, timedelta, timezone
from types import SimpleNamespace
from typing import Dict, List

import httpx

from src.config import Settings


class FakeClock:
    def __init__(self, start: datetime):
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> datetime:
        self.now = self.now + timedelta(**kwargs)
        return self.now


def newsapi_article(title: str, description: str = "", url: str = None, published_at: str = "2026-10-01T08:00:00Z", source: str = "Gulf News") -> Dict:
    return {
        "source": {"id": None, "name": source},
        "title": title,
        "description": description,
        "url": url or f"https://news.example/{abs(hash(title))}",
        "urlToImage": "https://news.example/image.jpg",
        "publishedAt": published_at,
    }


def gnews_article(title: str, description: str = "", url: str = None, published_at: str = "2026-10-01T09:00:00Z") -> Dict:
    return {
        "title": title,
        "description": description,
        "url": url or f"https://gnews.example/{abs(hash(title))}",
        "image": "https://gnews.example/image.jpg",
        "publishedAt": published_at,
        "source": {"name": "Arab News", "url": "https://arabnews.example"},
    }


def mediastack_article(title: str, description: str = "", url: str = None, published_at: str = "2026-10-01T10:00:00+00:00", category: str = "business") -> Dict:
    return {
        "title": title,
        "description": description,
        "url": url or f"https://mediastack.example/{abs(hash(title))}",
        "source": "Khaleej Times",
        "image": None,
        "category": category,
        "country": "ae",
        "published_at": published_at,
    }


def newsdata_article(title: str, description: str = "", link: str = None, pub_date: str = "2026-10-01 11:00:00") -> Dict:
    return {
        "article_id": str(abs(hash(title))),
        "title": title,
        "link": link or f"https://newsdata.example/{abs(hash(title))}",
        "description": description,
        "pubDate": pub_date,
        "image_url": None,
        "source_id": "thenational",
        "category": ["technology"],
    }


class UpstreamRouter:
    """
    httpx MockTransport handler routing by provider host and country.
    `responses[(host, country)]` is either a JSON-able payload or an int status code.
    """

    HOSTS = {
        "newsapi.org": "NewsAPI",
        "gnews.io": "GNews",
        "api.mediastack.com": "MediaStack",
        "newsdata.io": "NewsData",
    }

    def __init__(self):
        self.responses: Dict = {}
        self.requests: List[httpx.Request] = []

    def set(self, source: str, country: str, response) -> None:
        self.responses[(source, country)] = response

    def calls_for(self, source: str) -> List[httpx.Request]:
        return [request for request in self.requests if self.HOSTS.get(request.url.host) == source]

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        source = self.HOSTS.get(request.url.host)
        params = request.url.params
        country = params.get("country") or params.get("countries")

        response = self.responses.get((source, country))
        if response is None:
            return httpx.Response(200, json={"articles": [], "data": [], "results": []})
        if isinstance(response, int):
            return httpx.Response(response, json={"status": "error"})
        if isinstance(response, Exception):
            raise response
        return httpx.Response(200, json=response)


@pytest.fixture
def test_settings():
    return Settings(
        _env_file=None,
        news_api_key="newsapi-key",
        gnews_api_key="gnews-key",
        mediastack_api_key="mediastack-key",
        newsdata_api_key="newsdata-key",
        authentication_enabled=True,
        admin_api_token="test-admin-token",
        scheduler_enabled=False,
        newsapi_request_delay_seconds=0,
        gnews_request_delay_seconds=0,
        mediastack_request_delay_seconds=0,
        newsdata_request_delay_seconds=0,
        log_format="text",
    )


@pytest.fixture
def fake_clock():
    return FakeClock(datetime(2026, 10, 1, 12, 0, tzinfo=timezone.utc))


@pytest.fixture
def upstream():
    return UpstreamRouter()


@pytest.fixture
async def http_client(upstream):
    client = httpx.AsyncClient(transport=httpx.MockTransport(upstream))
    yield client
    await client.aclose()


@pytest.fixture
def aggregator(test_settings, http_client, fake_clock):
    from src.news.services.aggregator import NewsAggregator
    from src.news.services.sources.registry import SourceRegistry

    registry = SourceRegistry.from_settings(test_settings)
    return NewsAggregator(test_settings, registry=registry, http_client=http_client, clock=fake_clock)


@pytest.fixture
def admin_headers():
    return {"Authorization": "Bearer test-admin-token"}


@pytest.fixture
def app(test_settings, aggregator):
    from src.main import create_application

    application = create_application(app_settings=test_settings, aggregator=aggregator)
    # ASGITransport does not run the lifespan; attach the aggregator directly
    application.state.aggregator = aggregator
    application.state.scheduler = None
    return application


@pytest.fixture
async def async_client(app):
    from httpx import AsyncClient, ASGITransport

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as c:
        yield c


@pytest.fixture
def payloads():
    return SimpleNamespace(
        newsapi=newsapi_article,
        gnews=gnews_article,
        mediastack=mediastack_article,
        newsdata=newsdata_article,
    )
