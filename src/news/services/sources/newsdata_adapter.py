"""
NewsData.io adapter
Latest news per country; NewsData reports categories as a list, the first one is kept
"""

from typing import Any, Dict, List, Sequence, Tuple

from .base import NewsSourceAdapter


class NewsDataAdapter(NewsSourceAdapter):
    source_name = "NewsData"
    delay_setting = "newsdata_request_delay_seconds"

    def build_request(self, country: str, keywords: Sequence[str]) -> Tuple[str, Dict[str, Any]]:
        params: Dict[str, Any] = {
            "apikey": self.source.api_key,
            "country": country,
            "language": ",".join(sorted(self.source.supported_languages)),
        }
        if keywords:
            params["q"] = " OR ".join(keywords)
        return "/news", params

    def extract_records(self, payload: Dict[str, Any]) -> List[Any]:
        return self.records_under(payload, "results")

    def map_record(self, record: Dict[str, Any]) -> Dict[str, Any]:
        categories = record.get("category")
        if isinstance(categories, list):
            category = categories[0] if categories else None
        else:
            category = categories
        return {
            "title": record.get("title"),
            "url": record.get("link"),
            "description": record.get("description"),
            "source": record.get("source_id"),
            "published_at": record.get("pubDate"),
            "image_url": record.get("image_url"),
            "category": category,
        }
