"""
GNews adapter
Search endpoint per country; GNews has no OR syntax so keywords are space-joined
"""

from typing import Any, Dict, List, Sequence, Tuple

from .base import NewsSourceAdapter


class GNewsAdapter(NewsSourceAdapter):
    source_name = "GNews"
    delay_setting = "gnews_request_delay_seconds"
    max_results = 10

    def build_request(self, country: str, keywords: Sequence[str]) -> Tuple[str, Dict[str, Any]]:
        return "/search", {
            "q": " ".join(keywords) if keywords else "news",
            "country": country,
            "lang": "en",
            "max": self.max_results,
            "apikey": self.source.api_key,
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
            "image_url": record.get("image"),
        }
