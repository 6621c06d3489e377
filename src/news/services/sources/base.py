"""
Base class for news source adapters
Each adapter queries one provider per country and normalizes its records into NewsItems
"""

import asyncio
from abc import ABC, abstractmethod
from datetime import datetime
from typing import Any, Callable, Dict, List, Optional, Sequence, Tuple

import httpx
import structlog

from ....config import Settings
from ....exceptions import SourceFetchError
from ....utils.date_utils import parse_published_at, utc_now
from ...models.news_item import NewsItem
from ...models.news_source import NewsSource, SourceHealth
from ..processing import calculate_relevance_score, extract_keywords

logger = structlog.get_logger(__name__)


def _text(value: Any) -> Optional[str]:
    """Upstream string field, or None when missing, blank or not a string"""
    if isinstance(value, str) and value.strip():
        return value.strip()
    return None


class NewsSourceAdapter(ABC):
    """Base adapter for country-scoped news APIs"""

    source_name: str = ""
    delay_setting: str = ""

    def __init__(
        self,
        source: NewsSource,
        client: httpx.AsyncClient,
        settings: Settings,
        health: Optional[SourceHealth] = None,
        clock: Callable[[], datetime] = utc_now,
    ):
        self.source = source
        self.client = client
        self.settings = settings
        self.health = health or SourceHealth(source=source.name, configured=source.is_configured)
        self.clock = clock

    @property
    def name(self) -> str:
        return self.source.name

    @property
    def request_delay(self) -> float:
        return getattr(self.settings, self.delay_setting)

    @abstractmethod
    def build_request(self, country: str, keywords: Sequence[str]) -> Tuple[str, Dict[str, Any]]:
        """Return the path (relative to base_url) and query params for one country"""
        pass

    @abstractmethod
    def extract_records(self, payload: Dict[str, Any]) -> List[Any]:
        """Pull the list of raw article records out of a response payload"""
        pass

    @abstractmethod
    def map_record(self, record: Dict[str, Any]) -> Dict[str, Any]:
        """
        Map one raw record to the standard field names:
        title, url, description, source, published_at, image_url, category
        """
        pass

    async def fetch_news(self, countries: Sequence[str], keywords: Sequence[str]) -> List[NewsItem]:
        """Fetch every supported country in turn. A failed country yields no articles."""
        targets = [country for country in countries if country in self.source.supported_countries]
        articles: List[NewsItem] = []

        for index, country in enumerate(targets):
            if index > 0 and self.request_delay > 0:
                await asyncio.sleep(self.request_delay)

            try:
                payload = await self._get_json(country, keywords)
                records = self.extract_records(payload)
            except (httpx.HTTPError, SourceFetchError) as e:
                self.health.record_failure(str(e) or e.__class__.__name__, self.clock())
                logger.warning("source_request_failed", source=self.name, country=country, error=str(e))
                continue

            batch = []
            for record in records:
                item = self.normalize(record, country, keywords)
                if item:
                    batch.append(item)

            self.health.record_success(len(batch), self.clock())
            articles.extend(batch)
            logger.debug("source_country_fetched", source=self.name, country=country, articles=len(batch))

        logger.info("source_fetch_completed", source=self.name, countries=targets, articles=len(articles))
        return articles

    async def _get_json(self, country: str, keywords: Sequence[str]) -> Dict[str, Any]:
        path, params = self.build_request(country, keywords)
        response = await self.client.get(f"{self.source.base_url}{path}", params=params)

        if not response.is_success:
            raise SourceFetchError(
                self.name,
                f"HTTP {response.status_code} {response.reason_phrase}".strip(),
                country=country,
                status_code=response.status_code,
            )

        try:
            payload = response.json()
        except ValueError:
            raise SourceFetchError(self.name, "Invalid JSON payload", country=country)

        if not isinstance(payload, dict):
            raise SourceFetchError(self.name, "Unexpected payload shape", country=country)
        return payload

    def normalize(self, record: Any, country: str, keywords: Sequence[str]) -> Optional[NewsItem]:
        """Build a NewsItem from a raw record; records without a string title and url are skipped."""
        if not isinstance(record, dict):
            return None

        fields = self.map_record(record)
        title = _text(fields.get("title"))
        url = _text(fields.get("url"))
        if not title or not url:
            return None

        description = _text(fields.get("description")) or ""
        text = f"{title} {description}"

        return NewsItem(
            title=title,
            url=url,
            description=description,
            source=_text(fields.get("source")) or self.name,
            country=country,
            published_at=parse_published_at(fields.get("published_at")) or self.clock(),
            image_url=_text(fields.get("image_url")),
            category=_text(fields.get("category")) or "general",
            keywords=extract_keywords(
                text,
                max_keywords=self.settings.max_extracted_keywords,
                min_length=self.settings.min_keyword_length,
            ),
            relevance_score=calculate_relevance_score(
                text, keywords, default_score=self.settings.no_keyword_relevance_score
            ),
        )

    @staticmethod
    def records_under(payload: Dict[str, Any], key: str) -> List[Any]:
        records = payload.get(key)
        return records if isinstance(records, list) else []
