"""Aggregation API request schemas"""

from typing import List, Optional

from pydantic import BaseModel, Field, field_validator

from ..models.aggregation_job import JobFrequency


def _lower_codes(values):
    if not isinstance(values, list):
        return values
    return [
        value.strip().lower() if isinstance(value, str) else value
        for value in values
        if not isinstance(value, str) or value.strip()
    ]


class CreateJobRequest(BaseModel):
    """Request model for creating an aggregation job. Omitted fields get defaults."""
    name: Optional[str] = Field(None, max_length=200)
    countries: List[str] = Field(default_factory=list, description="ISO country codes, e.g. ['ae', 'sa']")
    keywords: List[str] = Field(default_factory=list, description="Search terms; empty means no keyword filter")
    sources: Optional[List[str]] = Field(
        None,
        description="Source names to use; omitted means every keyed source covering the countries"
    )
    is_active: Optional[bool] = None
    frequency: Optional[JobFrequency] = None

    @field_validator("countries", mode="before")
    @classmethod
    def normalize_countries(cls, value):
        return _lower_codes(value)


class UpdateJobRequest(BaseModel):
    """Partial update; only the fields sent are merged into the job"""
    name: Optional[str] = Field(None, max_length=200)
    countries: Optional[List[str]] = None
    keywords: Optional[List[str]] = None
    sources: Optional[List[str]] = None
    is_active: Optional[bool] = None
    frequency: Optional[JobFrequency] = None

    @field_validator("countries", mode="before")
    @classmethod
    def normalize_countries(cls, value):
        return _lower_codes(value)


class ManualFetchRequest(BaseModel):
    """Request model for an on-demand fetch outside the schedule"""
    countries: List[str] = Field(..., min_length=1)
    keywords: List[str] = Field(default_factory=list)

    @field_validator("countries", mode="before")
    @classmethod
    def normalize_countries(cls, value):
        return _lower_codes(value)
