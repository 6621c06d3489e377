"""
News Aggregator
Owns the aggregation jobs and the in-memory article store, and runs the
fetch -> dedupe -> relevance filter -> store pipeline for a job:
1. Mark the job running and stamp last_run
2. Fetch from every applicable source, per country
3. Deduplicate by title prefix
4. Drop low-relevance articles (only when the job has keywords)
5. Merge into the store (sorted newest-first, capped)
6. Update the job's bookkeeping
"""

import asyncio
from datetime import datetime
from typing import Any, Callable, Dict, Iterable, List, Optional, Sequence

import httpx
import structlog

from ...config import Settings
from ...exceptions import ConfigurationError
from ...utils.date_utils import utc_now
from ..models.aggregation_job import AggregationJob, JobFrequency, JobStatus
from ..models.news_item import NewsItem
from ..models.news_source import NewsSource, SourceHealth
from .article_store import ArticleStore
from .processing import deduplicate_articles, filter_relevant_articles
from .sources.base import NewsSourceAdapter
from .sources.registry import SourceRegistry, create_adapter

logger = structlog.get_logger(__name__)

USER_AGENT = "media-news-aggregator/0.1"


def _ordered_unique(values: Optional[Iterable[str]]) -> List[str]:
    return list(dict.fromkeys(values or []))


class NewsAggregator:
    """
    Single owner of the job collection and the article store.

    Build one per process and hand it to the HTTP layer and the scheduler.
    Mutations of jobs and of the store happen under one asyncio lock.
    """

    UPDATABLE_FIELDS = ("name", "countries", "keywords", "sources", "is_active", "frequency")

    def __init__(
        self,
        settings: Settings,
        registry: Optional[SourceRegistry] = None,
        http_client: Optional[httpx.AsyncClient] = None,
        clock: Callable[[], datetime] = utc_now,
    ):
        self.settings = settings
        if self.settings.default_job_frequency not in {frequency.value for frequency in JobFrequency}:
            raise ConfigurationError(
                f"Unknown default job frequency: {self.settings.default_job_frequency}",
                error_code="INVALID_DEFAULT_FREQUENCY",
            )
        self.registry = registry or SourceRegistry.from_settings(settings)
        self.clock = clock
        self._client = http_client
        self._owns_client = http_client is None
        self._lock = asyncio.Lock()
        self._jobs: Dict[str, AggregationJob] = {}
        self._store = ArticleStore(capacity=settings.article_store_capacity)
        self._adapters: Dict[str, NewsSourceAdapter] = {}
        self._health: Dict[str, SourceHealth] = {
            source.name: SourceHealth(source=source.name, configured=source.is_configured)
            for source in self.registry.all()
        }
        self._missing_key_warned = set()

    @property
    def client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(
                timeout=self.settings.request_timeout_seconds,
                headers={"User-Agent": USER_AGENT},
            )
        return self._client

    async def aclose(self) -> None:
        if self._client is not None and self._owns_client:
            await self._client.aclose()
            self._client = None
            self._adapters.clear()

    # ------------------------------------------------------------------
    # Jobs
    # ------------------------------------------------------------------

    async def create_job(
        self,
        name: Optional[str] = None,
        countries: Optional[Sequence[str]] = None,
        keywords: Optional[Sequence[str]] = None,
        sources: Optional[Sequence[str]] = None,
        is_active: Optional[bool] = None,
        frequency: Optional[str] = None,
    ) -> AggregationJob:
        countries = _ordered_unique(countries)
        job = AggregationJob(
            name=name or self.settings.default_job_name,
            countries=countries,
            keywords=_ordered_unique(keywords),
            sources=list(sources) if sources is not None else self.registry.sources_for_countries(countries),
            is_active=True if is_active is None else is_active,
            frequency=JobFrequency(frequency or self.settings.default_job_frequency),
        )

        async with self._lock:
            self._jobs[job.id] = job

        logger.info(
            "job_created",
            job_id=job.id,
            name=job.name,
            countries=job.countries,
            sources=job.sources,
            frequency=job.frequency.value,
        )
        return job

    def get_job(self, job_id: str) -> Optional[AggregationJob]:
        return self._jobs.get(job_id)

    def list_jobs(self) -> List[AggregationJob]:
        return list(self._jobs.values())

    async def update_job(self, job_id: str, updates: Dict[str, Any]) -> Optional[AggregationJob]:
        """Shallow-merge `updates` into the job. Unknown and bookkeeping fields are ignored."""
        async with self._lock:
            job = self._jobs.get(job_id)
            if job is None:
                return None

            changes = {name: value for name, value in updates.items() if name in self.UPDATABLE_FIELDS}
            if "frequency" in changes:
                changes["frequency"] = JobFrequency(changes["frequency"])

            for field_name, value in changes.items():
                setattr(job, field_name, value)

        logger.info("job_updated", job_id=job_id, fields=list(changes))
        return job

    async def delete_job(self, job_id: str) -> bool:
        async with self._lock:
            removed = self._jobs.pop(job_id, None) is not None

        if removed:
            logger.info("job_deleted", job_id=job_id)
        return removed

    # ------------------------------------------------------------------
    # Running
    # ------------------------------------------------------------------

    async def run_job(self, job: AggregationJob) -> bool:
        """
        Run one aggregation cycle for `job`.

        Returns False without doing anything if the job is already running,
        and False after a failed run (the job is left in the error state).
        """
        async with self._lock:
            if job.status == JobStatus.RUNNING:
                logger.warning("job_already_running", job_id=job.id)
                return False
            job.status = JobStatus.RUNNING
            job.last_run = self.clock()

        logger.info("job_run_started", job_id=job.id, name=job.name)

        try:
            articles = await self.fetch_news(job.countries, job.keywords, sources=job.sources)
            relevant = filter_relevant_articles(articles, job.keywords, self.settings.relevance_threshold)

            async with self._lock:
                evicted = self._store.add(relevant)
                job.articles_found += len(relevant)
                job.status = JobStatus.IDLE
                job.next_run = self.clock() + job.frequency.interval

        except asyncio.CancelledError:
            job.status = JobStatus.ERROR
            logger.warning("job_run_cancelled", job_id=job.id)
            raise
        except Exception as e:
            job.status = JobStatus.ERROR
            logger.error("job_run_failed", job_id=job.id, error=str(e), exc_info=True)
            return False

        logger.info(
            "job_run_completed",
            job_id=job.id,
            fetched=len(articles),
            relevant=len(relevant),
            evicted=evicted,
            store_size=len(self._store),
            next_run=job.next_run.isoformat(),
        )
        return True

    async def run_job_by_id(self, job_id: str) -> Optional[bool]:
        job = self.get_job(job_id)
        if job is None:
            return None
        return await self.run_job(job)

    async def fetch_news(
        self,
        countries: Sequence[str],
        keywords: Sequence[str] = (),
        sources: Optional[Sequence[str]] = None,
    ) -> List[NewsItem]:
        """
        Query every keyed source covering at least one of `countries`
        (restricted to `sources` when given) and return the deduplicated merge.
        A failing source contributes nothing; it never aborts its siblings.
        """
        countries = _ordered_unique(countries)
        keywords = list(keywords)
        collected: List[NewsItem] = []

        for source in self.registry.all():
            if not source.is_configured:
                self._warn_missing_key(source)
                continue
            if sources is not None and source.name not in sources:
                continue
            if not source.covers_any(countries):
                continue

            adapter = self._adapter_for(source)
            if adapter is None:
                logger.warning("source_has_no_adapter", source=source.name)
                continue

            try:
                collected.extend(await adapter.fetch_news(countries, keywords))
            except Exception as e:
                self._health[source.name].record_failure(str(e), self.clock())
                logger.error("source_fetch_failed", source=source.name, error=str(e), exc_info=True)

        unique = deduplicate_articles(collected, self.settings.dedup_prefix_length)
        logger.info(
            "news_fetch_completed",
            countries=countries,
            keywords=keywords,
            fetched=len(collected),
            unique=len(unique),
        )
        return unique

    async def manual_fetch(self, countries: Sequence[str], keywords: Optional[Sequence[str]] = None) -> List[NewsItem]:
        """On-demand fetch outside the schedule. Touches neither jobs nor the store."""
        logger.info("manual_fetch_requested", countries=list(countries), keywords=list(keywords or []))
        return await self.fetch_news(countries, keywords or [])

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def get_news_items(self, limit: int = 50, offset: int = 0) -> List[NewsItem]:
        return self._store.page(limit=limit, offset=offset)

    def source_health(self) -> List[Dict[str, Any]]:
        report = []
        for source in self.registry.all():
            entry = self._health[source.name].to_dict()
            entry.update({
                "base_url": source.base_url,
                "supported_countries": sorted(source.supported_countries),
                "supported_languages": sorted(source.supported_languages),
                "rate_limit": source.rate_limit,
            })
            report.append(entry)
        return report

    def stats(self) -> Dict[str, Any]:
        by_status = {status.value: 0 for status in JobStatus}
        for job in self._jobs.values():
            by_status[job.status.value] += 1
        return {
            "jobs": len(self._jobs),
            "active_jobs": sum(1 for job in self._jobs.values() if job.is_active),
            "jobs_by_status": by_status,
            "stored_articles": len(self._store),
            "store_capacity": self._store.capacity,
        }

    # ------------------------------------------------------------------

    def _adapter_for(self, source: NewsSource) -> Optional[NewsSourceAdapter]:
        adapter = self._adapters.get(source.name)
        if adapter is None:
            adapter = create_adapter(
                source,
                self.client,
                self.settings,
                health=self._health[source.name],
                clock=self.clock,
            )
            if adapter is not None:
                self._adapters[source.name] = adapter
        return adapter

    def _warn_missing_key(self, source: NewsSource) -> None:
        if source.name in self._missing_key_warned:
            return
        self._missing_key_warned.add(source.name)
        logger.warning("source_skipped_no_api_key", source=source.name)
