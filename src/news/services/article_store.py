from typing import Iterable, List

from ..models.news_item import NewsItem


class ArticleStore:
    """In-memory article list, kept sorted newest-first and capped at `capacity`."""

    def __init__(self, capacity: int = 1000):
        self.capacity = capacity
        self._items: List[NewsItem] = []

    def add(self, articles: Iterable[NewsItem]) -> int:
        """Append, re-sort the whole store and evict the oldest overflow. Returns the number evicted."""
        merged = self._items + list(articles)
        merged.sort(key=lambda item: item.published_at, reverse=True)
        evicted = max(0, len(merged) - self.capacity)
        self._items = merged[:self.capacity]
        return evicted

    def page(self, limit: int = 50, offset: int = 0) -> List[NewsItem]:
        if limit <= 0 or offset < 0:
            return []
        return self._items[offset:offset + limit]

    def clear(self) -> None:
        self._items = []

    def __len__(self) -> int:
        return len(self._items)
