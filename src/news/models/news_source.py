"""
Provider catalogue entries and their runtime health counters
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, FrozenSet, Optional


@dataclass(frozen=True)
class NewsSource:
    """Static provider configuration, built once at startup"""
    name: str
    base_url: str
    supported_countries: FrozenSet[str]
    supported_languages: FrozenSet[str]
    rate_limit: int  # nominal requests per hour, advisory only
    api_key: Optional[str] = field(default=None, repr=False)

    @property
    def is_configured(self) -> bool:
        return bool(self.api_key)

    def covers_any(self, countries) -> bool:
        return any(country in self.supported_countries for country in countries)


@dataclass
class SourceHealth:
    """Request/failure counters for one provider"""
    source: str
    configured: bool = True
    requests: int = 0
    failures: int = 0
    consecutive_failures: int = 0
    articles: int = 0
    last_error: Optional[str] = None
    last_success_at: Optional[datetime] = None
    last_failure_at: Optional[datetime] = None

    def record_success(self, articles: int, at: datetime) -> None:
        self.requests += 1
        self.articles += articles
        self.consecutive_failures = 0
        self.last_success_at = at

    def record_failure(self, error: str, at: datetime) -> None:
        self.requests += 1
        self.failures += 1
        self.consecutive_failures += 1
        self.last_error = error
        self.last_failure_at = at

    @property
    def status(self) -> str:
        if not self.configured:
            return "unconfigured"
        if self.consecutive_failures >= 3:
            return "unhealthy"
        if self.consecutive_failures > 0:
            return "degraded"
        return "healthy"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "source": self.source,
            "status": self.status,
            "configured": self.configured,
            "requests": self.requests,
            "failures": self.failures,
            "consecutive_failures": self.consecutive_failures,
            "articles": self.articles,
            "last_error": self.last_error,
            "last_success_at": self.last_success_at,
            "last_failure_at": self.last_failure_at,
        }
