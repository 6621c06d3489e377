"""
Text processing shared by every source and job run:
keyword extraction, relevance scoring, deduplication and relevance filtering.
"""

import re
from typing import Iterable, List, Sequence

from ..models.news_item import NewsItem

_PUNCTUATION = re.compile(r"[^\w\s]")


def extract_keywords(text: str, max_keywords: int = 10, min_length: int = 4) -> List[str]:
    """Lowercase, strip punctuation, keep distinct tokens of at least `min_length` characters."""
    words = _PUNCTUATION.sub("", text.lower()).split()

    keywords = []
    for word in words:
        if len(word) >= min_length and word not in keywords:
            keywords.append(word)
            if len(keywords) >= max_keywords:
                break
    return keywords


def calculate_relevance_score(text: str, keywords: Sequence[str], default_score: float = 0.5) -> float:
    """Fraction of job keywords found as substrings of the lowercased text."""
    if not keywords:
        return default_score

    lowered = text.lower()
    matched = [keyword for keyword in keywords if keyword.lower() in lowered]
    return len(matched) / len(keywords)


def deduplicate_articles(articles: Iterable[NewsItem], prefix_length: int = 50) -> List[NewsItem]:
    """Keep the first article for every distinct lowercased title prefix."""
    seen = set()
    unique = []
    for article in articles:
        key = article.title.lower()[:prefix_length]
        if key in seen:
            continue
        seen.add(key)
        unique.append(article)
    return unique


def filter_relevant_articles(articles: List[NewsItem], keywords: Sequence[str], threshold: float = 0.2) -> List[NewsItem]:
    if not keywords:
        return list(articles)
    return [article for article in articles if article.relevance_score > threshold]
