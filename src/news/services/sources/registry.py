"""
News Source Registry - the fixed provider catalogue and the adapters that query it
"""

from datetime import datetime
from typing import Callable, Dict, Iterable, List, Optional, Type

import httpx
import structlog

from ....config import Settings
from ....utils.date_utils import utc_now
from ...models.news_source import NewsSource, SourceHealth
from .base import NewsSourceAdapter
from .gnews_adapter import GNewsAdapter
from .mediastack_adapter import MediaStackAdapter
from .newsapi_adapter import NewsAPIAdapter
from .newsdata_adapter import NewsDataAdapter

logger = structlog.get_logger(__name__)

ADAPTER_TYPES: Dict[str, Type[NewsSourceAdapter]] = {
    adapter.source_name: adapter
    for adapter in (NewsAPIAdapter, GNewsAdapter, MediaStackAdapter, NewsDataAdapter)
}


def default_catalogue(settings: Settings) -> List[NewsSource]:
    """Providers known to the aggregator, with keys taken from settings"""
    return [
        NewsSource(
            name="NewsAPI",
            base_url="https://newsapi.org/v2",
            api_key=settings.news_api_key,
            supported_countries=frozenset({"ae", "eg", "sa"}),
            supported_languages=frozenset({"en", "ar"}),
            rate_limit=1000,
        ),
        NewsSource(
            name="GNews",
            base_url="https://gnews.io/api/v4",
            api_key=settings.gnews_api_key,
            supported_countries=frozenset({"ae", "eg", "sa", "kw", "qa", "bh", "om"}),
            supported_languages=frozenset({"en", "ar"}),
            rate_limit=100,
        ),
        NewsSource(
            name="MediaStack",
            base_url="http://api.mediastack.com/v1",
            api_key=settings.mediastack_api_key,
            supported_countries=frozenset({"ae", "eg", "sa", "kw", "qa", "bh", "om", "ly", "sy", "sd"}),
            supported_languages=frozenset({"en", "ar"}),
            rate_limit=1000,
        ),
        NewsSource(
            name="NewsData",
            base_url="https://newsdata.io/api/1",
            api_key=settings.newsdata_api_key,
            supported_countries=frozenset({"ae", "sa", "eg", "qa", "bh"}),
            supported_languages=frozenset({"en", "ar"}),
            rate_limit=8,
        ),
    ]


class SourceRegistry:
    """Immutable catalogue of providers, in catalogue order"""

    def __init__(self, sources: Iterable[NewsSource]):
        self._sources: Dict[str, NewsSource] = {}
        for source in sources:
            self._sources[source.name] = source

    @classmethod
    def from_settings(cls, settings: Settings) -> "SourceRegistry":
        registry = cls(default_catalogue(settings))
        configured = [source.name for source in registry.all() if source.is_configured]
        missing = [source.name for source in registry.all() if not source.is_configured]
        logger.info("source_registry_loaded", configured=configured, missing_keys=missing)
        return registry

    def sources_for_countries(self, countries: Iterable[str]) -> List[str]:
        """Names of sources that have a key and cover at least one of `countries`"""
        countries = list(countries)
        return [
            source.name
            for source in self._sources.values()
            if source.is_configured and source.covers_any(countries)
        ]

    def get(self, name: str) -> Optional[NewsSource]:
        return self._sources.get(name)

    def all(self) -> List[NewsSource]:
        return list(self._sources.values())

    def names(self) -> List[str]:
        return list(self._sources.keys())

    def __contains__(self, name: str) -> bool:
        return name in self._sources

    def __len__(self) -> int:
        return len(self._sources)


def create_adapter(
    source: NewsSource,
    client: httpx.AsyncClient,
    settings: Settings,
    health: Optional[SourceHealth] = None,
    clock: Callable[[], datetime] = utc_now,
) -> Optional[NewsSourceAdapter]:
    adapter_type = ADAPTER_TYPES.get(source.name)
    if adapter_type is None:
        return None
    return adapter_type(source, client, settings, health=health, clock=clock)
