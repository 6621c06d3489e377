from typing import List

import structlog
from fastapi import APIRouter, Depends, HTTPException, status

from src.api.dependencies import get_aggregator, require_admin
from src.exceptions import JobNotFoundError
from src.news.schemas.requests import CreateJobRequest, ManualFetchRequest, UpdateJobRequest
from src.news.schemas.responses import (
    JobResponse,
    JobRunResponse,
    ManualFetchResponse,
    NewsItemResponse,
    SourceStatusResponse,
)
from src.news.models.aggregation_job import JobStatus
from src.news.services.aggregator import NewsAggregator

logger = structlog.get_logger(__name__)

router = APIRouter()


def _not_found(job_id: str) -> HTTPException:
    error = JobNotFoundError(job_id)
    return HTTPException(status_code=404, detail=error.to_dict())


@router.get("/jobs", response_model=List[JobResponse])
async def list_jobs(aggregator: NewsAggregator = Depends(get_aggregator)):
    """List every aggregation job (unordered)"""
    return [JobResponse.model_validate(job) for job in aggregator.list_jobs()]


@router.post(
    "/jobs",
    response_model=JobResponse,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(require_admin)],
)
async def create_job(
    request: CreateJobRequest,
    aggregator: NewsAggregator = Depends(get_aggregator)
):
    """Create a job; sources default to every keyed source covering the countries"""
    job = await aggregator.create_job(**request.model_dump(exclude_unset=True))
    return JobResponse.model_validate(job)


@router.get("/jobs/{job_id}", response_model=JobResponse)
async def get_job(job_id: str, aggregator: NewsAggregator = Depends(get_aggregator)):
    job = aggregator.get_job(job_id)
    if job is None:
        raise _not_found(job_id)
    return JobResponse.model_validate(job)


@router.patch("/jobs/{job_id}", response_model=JobResponse, dependencies=[Depends(require_admin)])
async def update_job(
    job_id: str,
    request: UpdateJobRequest,
    aggregator: NewsAggregator = Depends(get_aggregator)
):
    job = await aggregator.update_job(job_id, request.model_dump(exclude_unset=True))
    if job is None:
        raise _not_found(job_id)
    return JobResponse.model_validate(job)


@router.delete("/jobs/{job_id}", status_code=status.HTTP_204_NO_CONTENT, dependencies=[Depends(require_admin)])
async def delete_job(job_id: str, aggregator: NewsAggregator = Depends(get_aggregator)):
    if not await aggregator.delete_job(job_id):
        raise _not_found(job_id)


@router.post("/jobs/{job_id}/run", response_model=JobRunResponse, dependencies=[Depends(require_admin)])
async def run_job_now(job_id: str, aggregator: NewsAggregator = Depends(get_aggregator)):
    """Run one job immediately through the scheduled pipeline"""
    job = aggregator.get_job(job_id)
    if job is None:
        raise _not_found(job_id)

    if job.status == JobStatus.RUNNING:
        return JobRunResponse(job=JobResponse.model_validate(job), started=False, message="Job is already running")

    succeeded = await aggregator.run_job(job)
    message = "Job run completed" if succeeded else "Job run failed"
    logger.info("job_run_requested", job_id=job_id, succeeded=succeeded)
    return JobRunResponse(job=JobResponse.model_validate(job), started=True, message=message)


@router.post("/fetch", response_model=ManualFetchResponse, dependencies=[Depends(require_admin)])
async def manual_fetch(
    request: ManualFetchRequest,
    aggregator: NewsAggregator = Depends(get_aggregator)
):
    """Fetch now for the given countries/keywords; results are returned, not stored"""
    articles = await aggregator.manual_fetch(request.countries, request.keywords)
    return ManualFetchResponse(
        articles=[NewsItemResponse.model_validate(article) for article in articles],
        count=len(articles),
    )


@router.get("/sources", response_model=List[SourceStatusResponse])
async def list_sources(aggregator: NewsAggregator = Depends(get_aggregator)):
    """Provider catalogue with request/failure counters"""
    return [SourceStatusResponse(**entry) for entry in aggregator.source_health()]
