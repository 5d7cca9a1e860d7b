"""
Pixeloria Backend — Project Cost Estimator
============================================

What:  Prices a prospective project from its type, features, timeline and
       free-text requirements, and records each run for sales follow-up.
Why:   The public calculator shows a ballpark figure instantly; the agency
       reviews the recorded submissions in the dashboard.

Formula:
    subtotal   = base cost (project type) + Σ feature costs
    total      = subtotal × timeline multiplier × complexity multiplier
    complexity = 1.2 when additional requirements exceed 100 characters

    Unknown keys never fail the request: an unknown project type costs the
    DEFAULT_BASE_COST, unknown features cost nothing, an unknown timeline
    uses ×1.0 and four weeks.

Rounding:
    Totals and adjustments are rounded half up (toward +inf) to whole
    currency units; round() would give banker's rounding.
"""

import logging
import math
from typing import Dict, List, NamedTuple, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.exceptions import DatabaseError
from app.models.inquiry import EstimateSubmission
from app.schemas.estimate import (
    CatalogEntry,
    CostBreakdown,
    CostEstimate,
    EstimateCatalog,
    EstimateRequest,
    TimelineOption,
)
from app.services.resource_service import ResourceService

logger = logging.getLogger(__name__)

COMPLEXITY_THRESHOLD = 100
COMPLEXITY_MULTIPLIER = 1.2
DEFAULT_BASE_COST = 5000
DEFAULT_TIMELINE_MULTIPLIER = 1.0
DEFAULT_TIMELINE_WEEKS = 4


class PricedItem(NamedTuple):
    name: str
    cost: int
    description: str


class Timeline(NamedTuple):
    name: str
    multiplier: float
    weeks: int


# ── Price Catalogs ────────────────────────────────────────────────────────
PROJECT_TYPES: Dict[str, PricedItem] = {
    "landing-page": PricedItem("Landing Page", 2000, "Single high-converting marketing page"),
    "business-website": PricedItem("Business Website", 5000, "Multi-page company website"),
    "e-commerce": PricedItem("E-commerce Store", 10000, "Online store with catalog and checkout"),
    "web-app": PricedItem("Web Application", 15000, "Custom interactive web application"),
    "mobile-app": PricedItem("Mobile App", 20000, "Native or cross-platform mobile application"),
    "custom-solution": PricedItem("Custom Solution", 25000, "Bespoke software for complex needs"),
}

FEATURES: Dict[str, PricedItem] = {
    "responsive-design": PricedItem("Responsive Design", 500, "Mobile-friendly design that works on all devices"),
    "cms-integration": PricedItem("CMS Integration", 1500, "Content management system for easy updates"),
    "payment-gateway": PricedItem("Payment Gateway", 2000, "Secure online payment processing"),
    "user-authentication": PricedItem("User Authentication", 1000, "User login and registration system"),
    "api-integration": PricedItem("API Integration", 1500, "Third-party service integrations"),
    "seo-optimization": PricedItem("SEO Optimization", 800, "Search engine optimization setup"),
    "analytics-setup": PricedItem("Analytics Setup", 500, "Google Analytics and tracking setup"),
    "social-media-integration": PricedItem("Social Media Integration", 300, "Social media sharing and feeds"),
    "multi-language": PricedItem("Multi-language Support", 1200, "Multiple language versions"),
    "advanced-animations": PricedItem("Advanced Animations", 1000, "Custom animations and interactions"),
    "database-design": PricedItem("Database Design", 2000, "Custom database architecture"),
    "admin-dashboard": PricedItem("Admin Dashboard", 2500, "Administrative control panel"),
    "real-time-features": PricedItem("Real-time Features", 3000, "Live chat, notifications and similar"),
    "third-party-integrations": PricedItem("Third-party Integrations", 1500, "External service connections"),
}

TIMELINES: Dict[str, Timeline] = {
    "rush-1-week": Timeline("Rush (1 week)", 2.0, 1),
    "urgent-2-weeks": Timeline("Urgent (2 weeks)", 1.5, 2),
    "standard-1-month": Timeline("Standard (1 month)", 1.0, 4),
    "relaxed-2-months": Timeline("Relaxed (2 months)", 0.9, 8),
    "flexible-3-months": Timeline("Flexible (3 months)", 0.8, 12),
}


def _round(value: float) -> int:
    return math.floor(value + 0.5)


def calculate_project_cost(
    project_type: str,
    features: List[str],
    timeline: str,
    additional_requirements: Optional[str] = None,
) -> CostEstimate:
    """
    Price a project. Pure function; no I/O.

    Example:
        >>> calculate_project_cost("business-website", ["responsive-design"], "standard-1-month").total_cost
        5500
    """
    base_cost = PROJECT_TYPES[project_type].cost if project_type in PROJECT_TYPES else DEFAULT_BASE_COST
    feature_cost = sum(FEATURES[f].cost for f in features if f in FEATURES)

    chosen = TIMELINES.get(timeline)
    timeline_multiplier = chosen.multiplier if chosen else DEFAULT_TIMELINE_MULTIPLIER
    estimated_weeks = chosen.weeks if chosen else DEFAULT_TIMELINE_WEEKS

    complexity_multiplier = 1.0
    if additional_requirements and len(additional_requirements) > COMPLEXITY_THRESHOLD:
        complexity_multiplier = COMPLEXITY_MULTIPLIER

    subtotal = base_cost + feature_cost
    total = subtotal * timeline_multiplier * complexity_multiplier

    return CostEstimate(
        base_cost=base_cost,
        feature_cost=feature_cost,
        timeline_multiplier=timeline_multiplier,
        complexity_multiplier=complexity_multiplier,
        total_cost=_round(total),
        estimated_weeks=estimated_weeks,
        breakdown=CostBreakdown(
            project_type=base_cost,
            features=feature_cost,
            timeline_adjustment=_round(subtotal * (timeline_multiplier - 1)),
            complexity_adjustment=_round(subtotal * timeline_multiplier * (complexity_multiplier - 1)),
        ),
    )


def get_catalog() -> EstimateCatalog:
    """Everything the calculator widget needs to render its options."""
    return EstimateCatalog(
        project_types=[
            CatalogEntry(id=key, name=item.name, cost=item.cost, description=item.description)
            for key, item in PROJECT_TYPES.items()
        ],
        features=[
            CatalogEntry(id=key, name=item.name, cost=item.cost, description=item.description)
            for key, item in FEATURES.items()
        ],
        timelines=[
            TimelineOption(id=key, name=t.name, multiplier=t.multiplier, weeks=t.weeks)
            for key, t in TIMELINES.items()
        ],
    )


submission_service = ResourceService(EstimateSubmission, display_name="Estimate submission")


async def record_submission(
    db: AsyncSession,
    request: EstimateRequest,
    estimate: CostEstimate,
) -> EstimateSubmission:
    """Persist a calculator run with its computed price."""
    contact = request.contact_info
    submission = EstimateSubmission(
        project_type=request.project_type,
        features=list(request.features),
        timeline=request.timeline,
        budget_range=request.budget_range,
        additional_requirements=request.additional_requirements,
        contact_name=contact.name if contact else None,
        contact_email=str(contact.email).lower() if contact and contact.email else None,
        contact_company=contact.company if contact else None,
        total_cost=estimate.total_cost,
        estimated_weeks=estimate.estimated_weeks,
    )
    db.add(submission)
    try:
        await db.flush()
        await db.refresh(submission)
    except SQLAlchemyError as e:
        logger.error("Failed to record estimate submission: %s", e, exc_info=True)
        raise DatabaseError(context={"operation": "record_submission"}) from e

    logger.info(
        "Estimate recorded: %s (%s, %d features, total=%d)",
        submission.id,
        request.project_type,
        len(request.features),
        estimate.total_cost,
    )
    return submission
