from dataclasses import dataclass, field
from datetime import datetime, timedelta
from enum import Enum
from typing import List, Optional

from .news_item import generate_id


class JobStatus(str, Enum):
    IDLE = "idle"
    RUNNING = "running"
    ERROR = "error"


class JobFrequency(str, Enum):
    HOURLY = "hourly"
    DAILY = "daily"
    WEEKLY = "weekly"

    @property
    def interval(self) -> timedelta:
        return FREQUENCY_INTERVALS[self]


FREQUENCY_INTERVALS = {
    JobFrequency.HOURLY: timedelta(hours=1),
    JobFrequency.DAILY: timedelta(hours=24),
    JobFrequency.WEEKLY: timedelta(hours=168),
}


@dataclass
class AggregationJob:
    """A named, schedulable description of what to fetch and how often"""
    name: str
    countries: List[str]
    keywords: List[str]
    sources: List[str]
    frequency: JobFrequency
    is_active: bool = True
    last_run: Optional[datetime] = None
    next_run: Optional[datetime] = None
    articles_found: int = 0
    status: JobStatus = JobStatus.IDLE
    id: str = field(default_factory=generate_id)

    def is_due(self, now: datetime) -> bool:
        """Coarse due check: enough wall-clock time has passed since the last run."""
        if not self.is_active or self.status == JobStatus.RUNNING:
            return False
        if self.last_run is None:
            return True
        return now - self.last_run >= self.frequency.interval
