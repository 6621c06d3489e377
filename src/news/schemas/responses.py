"""Aggregation API response schemas"""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict

from ..models.aggregation_job import JobFrequency, JobStatus


class JobResponse(BaseModel):
    id: str
    name: str
    countries: List[str]
    keywords: List[str]
    sources: List[str]
    is_active: bool
    frequency: JobFrequency
    status: JobStatus
    articles_found: int
    last_run: Optional[datetime] = None
    next_run: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class JobRunResponse(BaseModel):
    job: JobResponse
    started: bool
    message: str


class NewsItemResponse(BaseModel):
    id: str
    title: str
    title_ar: Optional[str] = None
    description: str
    description_ar: Optional[str] = None
    url: str
    source: str
    country: str
    published_at: datetime
    image_url: Optional[str] = None
    category: str
    keywords: List[str]
    relevance_score: float

    model_config = ConfigDict(from_attributes=True)


class NewsItemListResponse(BaseModel):
    articles: List[NewsItemResponse]
    limit: int
    offset: int
    total: int
    has_more: bool


class ManualFetchResponse(BaseModel):
    articles: List[NewsItemResponse]
    count: int


class SourceStatusResponse(BaseModel):
    source: str
    status: str
    configured: bool
    base_url: str
    supported_countries: List[str]
    supported_languages: List[str]
    rate_limit: int
    requests: int
    failures: int
    consecutive_failures: int
    articles: int
    last_error: Optional[str] = None
    last_success_at: Optional[datetime] = None
    last_failure_at: Optional[datetime] = None
