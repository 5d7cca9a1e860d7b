"""
Project cost estimator: POST /api/estimate, GET /api/estimate/features.
"""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.database import get_db_session
from app.schemas.common import ApiResponse, ErrorResponse
from app.schemas.estimate import EstimateCatalog, EstimateData, EstimateRequest, ProjectData
from app.services import estimate_service

router = APIRouter(prefix="/api/estimate", tags=["Estimate"])


@router.post(
    "",
    response_model=ApiResponse[EstimateData],
    responses={400: {"description": "Validation error", "model": ErrorResponse}},
    summary="Calculate a project cost estimate",
    description=(
        "Prices the project from its type, features and timeline. Unknown "
        "catalog keys are priced with defaults rather than rejected. The "
        "run is recorded for follow-up by the sales team."
    ),
)
async def calculate_estimate(
    payload: EstimateRequest,
    db: AsyncSession = Depends(get_db_session),
):
    estimate = estimate_service.calculate_project_cost(
        project_type=payload.project_type,
        features=payload.features,
        timeline=payload.timeline,
        additional_requirements=payload.additional_requirements,
    )
    submission = await estimate_service.record_submission(db, payload, estimate)
    return ApiResponse(
        message="Cost estimate calculated successfully",
        data=EstimateData(
            estimate=estimate,
            project_data=ProjectData(
                project_type=payload.project_type,
                features=payload.features,
                timeline=payload.timeline,
                budget_range=payload.budget_range,
            ),
            submission_id=submission.id,
        ),
    )


@router.get(
    "/features",
    response_model=ApiResponse[EstimateCatalog],
    summary="Project types, features and timelines with prices",
)
async def get_features():
    return ApiResponse(data=estimate_service.get_catalog())
