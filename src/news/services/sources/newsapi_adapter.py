"""
NewsAPI.org adapter
Top headlines per country, keywords OR-joined into `q`
"""

from typing import Any, Dict, List, Sequence, Tuple

from .base import NewsSourceAdapter


class NewsAPIAdapter(NewsSourceAdapter):
    source_name = "NewsAPI"
    delay_setting = "newsapi_request_delay_seconds"

    def build_request(self, country: str, keywords: Sequence[str]) -> Tuple[str, Dict[str, Any]]:
        return "/top-headlines", {
            "country": country,
            "q": " OR ".join(keywords) if keywords else "",
            "apiKey": self.source.api_key,
        }

    def extract_records(self, payload: Dict[str, Any]) -> List[Any]:
        return self.records_under(payload, "articles")

    def map_record(self, record: Dict[str, Any]) -> Dict[str, Any]:
        source = record.get("source")
        return {
            "title": record.get("title"),
            "url": record.get("url"),
            "description": record.get("description"),
            "source": source.get("name") if isinstance(source, dict) else None,
            "published_at": record.get("publishedAt"),
            "image_url": record.get("urlToImage"),
        }
