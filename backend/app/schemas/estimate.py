"""
Bodies for the project cost estimator (/api/estimate).

Estimator results are serialized in camelCase (`totalCost`,
`estimatedWeeks`, ...) because the calculator widget on the public site
reads them under those names. Request bodies stay snake_case like every
other endpoint.
"""

import uuid
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field
from pydantic.alias_generators import to_camel

from app.models.enums import SubmissionStatus
from app.schemas.common import UtcDatetime


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ContactInfo(BaseModel):
    name: Optional[str] = Field(default=None, max_length=255)
    email: Optional[EmailStr] = None
    company: Optional[str] = Field(default=None, max_length=255)


class EstimateRequest(BaseModel):
    project_type: str = Field(min_length=1, max_length=100, examples=["business-website"])
    features: List[str] = Field(examples=[["responsive-design", "cms-integration"]])
    timeline: str = Field(min_length=1, max_length=100, examples=["standard-1-month"])
    budget_range: str = Field(min_length=1, max_length=100)
    additional_requirements: Optional[str] = None
    contact_info: Optional[ContactInfo] = None


class CostBreakdown(_CamelModel):
    project_type: int
    features: int
    timeline_adjustment: int
    complexity_adjustment: int


class CostEstimate(_CamelModel):
    base_cost: int
    feature_cost: int
    timeline_multiplier: float
    complexity_multiplier: float
    total_cost: int
    estimated_weeks: int
    breakdown: CostBreakdown


class ProjectData(BaseModel):
    project_type: str
    features: List[str]
    timeline: str
    budget_range: str


class EstimateData(_CamelModel):
    estimate: CostEstimate
    project_data: ProjectData
    submission_id: uuid.UUID


class CatalogEntry(BaseModel):
    id: str
    name: str
    cost: int
    description: str


class TimelineOption(BaseModel):
    id: str
    name: str
    multiplier: float
    weeks: int


class EstimateCatalog(_CamelModel):
    project_types: List[CatalogEntry]
    features: List[CatalogEntry]
    timelines: List[TimelineOption]


class SubmissionRead(BaseModel):
    """Admin view of a recorded calculator run."""
    id: uuid.UUID
    project_type: str
    features: List[str]
    timeline: str
    budget_range: str
    additional_requirements: Optional[str] = None
    contact_name: Optional[str] = None
    contact_email: Optional[str] = None
    contact_company: Optional[str] = None
    total_cost: int
    estimated_weeks: int
    status: SubmissionStatus
    created_at: UtcDatetime

    model_config = {"from_attributes": True}


class SubmissionStatusUpdate(BaseModel):
    status: SubmissionStatus
