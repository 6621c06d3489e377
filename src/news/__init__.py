"""
News Module
===========

Scheduled multi-source news aggregation:
- Provider catalogue and per-country adapters (NewsAPI, GNews, MediaStack, NewsData)
- Aggregation jobs with hourly/daily/weekly frequencies
- Title-prefix deduplication and keyword relevance filtering
- Bounded, newest-first in-memory article feed
"""
