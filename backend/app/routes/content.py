"""
Public site content: /api/portfolio, /api/blogs, /api/services, /api/labs.

Reads are public (published / active records only, unless the caller is a
dashboard user); writes need an editor or admin token.
"""

from app.models.enums import PublicationStatus, ServiceStatus
from app.routes.crud import CrudResource, build_crud_router
from app.schemas.content import (
    BlogCreate,
    BlogRead,
    BlogUpdate,
    LabCreate,
    LabRead,
    LabUpdate,
    PortfolioCreate,
    PortfolioRead,
    PortfolioUpdate,
    ServiceCreate,
    ServiceRead,
    ServiceUpdate,
)
from app.services.content_service import (
    blog_service,
    lab_service,
    offering_service,
    portfolio_service,
)

portfolio_router = build_crud_router(
    "/api/portfolio",
    "Portfolio",
    CrudResource(
        service=portfolio_service,
        create_schema=PortfolioCreate,
        update_schema=PortfolioUpdate,
        read_schema=PortfolioRead,
        status_enum=PublicationStatus,
        public_status=PublicationStatus.PUBLISHED,
        noun="Project",
    ),
)

blogs_router = build_crud_router(
    "/api/blogs",
    "Blogs",
    CrudResource(
        service=blog_service,
        create_schema=BlogCreate,
        update_schema=BlogUpdate,
        read_schema=BlogRead,
        status_enum=PublicationStatus,
        public_status=PublicationStatus.PUBLISHED,
        noun="Post",
    ),
)

services_router = build_crud_router(
    "/api/services",
    "Services",
    CrudResource(
        service=offering_service,
        create_schema=ServiceCreate,
        update_schema=ServiceUpdate,
        read_schema=ServiceRead,
        status_enum=ServiceStatus,
        public_status=ServiceStatus.ACTIVE,
        noun="Service",
    ),
)

labs_router = build_crud_router(
    "/api/labs",
    "Labs",
    CrudResource(
        service=lab_service,
        create_schema=LabCreate,
        update_schema=LabUpdate,
        read_schema=LabRead,
        status_enum=PublicationStatus,
        public_status=PublicationStatus.PUBLISHED,
        noun="Lab project",
    ),
)
