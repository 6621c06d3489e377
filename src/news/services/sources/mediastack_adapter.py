"""
MediaStack adapter
Keywords are comma-joined; the provider category is kept when present
"""

from typing import Any, Dict, List, Sequence, Tuple

from .base import NewsSourceAdapter


class MediaStackAdapter(NewsSourceAdapter):
    source_name = "MediaStack"
    delay_setting = "mediastack_request_delay_seconds"
    max_results = 25

    def build_request(self, country: str, keywords: Sequence[str]) -> Tuple[str, Dict[str, Any]]:
        return "/news", {
            "access_key": self.source.api_key,
            "countries": country,
            "keywords": ",".join(keywords),
            "limit": self.max_results,
        }

    def extract_records(self, payload: Dict[str, Any]) -> List[Any]:
        return self.records_under(payload, "data")

    def map_record(self, record: Dict[str, Any]) -> Dict[str, Any]:
        return {
            "title": record.get("title"),
            "url": record.get("url"),
            "description": record.get("description"),
            "source": record.get("source"),
            "published_at": record.get("published_at"),
            "image_url": record.get("image"),
            "category": record.get("category"),
        }
