"""
Normalized article record produced by every source adapter
"""

import uuid
from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Optional


def generate_id() -> str:
    return uuid.uuid4().hex


@dataclass(frozen=True)
class NewsItem:
    """Standardized news item format for all sources"""
    title: str
    url: str
    description: str
    source: str
    country: str
    published_at: datetime
    relevance_score: float
    category: str = "general"
    image_url: Optional[str] = None
    keywords: List[str] = field(default_factory=list)
    title_ar: Optional[str] = None
    description_ar: Optional[str] = None
    id: str = field(default_factory=generate_id)
