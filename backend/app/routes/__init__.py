# Routes package init
"""
Pixeloria Backend — API Routes Package
========================================

What:  HTTP route handlers, one router per resource.
How:   `build_router_registry()` returns the ordered list of routers that
       `create_app()` mounts. The list is explicit: adding a resource means
       adding it here, and tests can build an app with a reduced registry.

Route Inventory:
    - health.py:   GET  /health
    - auth.py:     /api/auth       register, login, me
    - content.py:  /api/portfolio, /api/blogs, /api/services, /api/labs
                   (CRUD via crud.py)
    - contact.py:  /api/contact    inquiry, newsletter
    - estimate.py: /api/estimate   calculator, catalog
    - admin.py:    /api/admin      dashboard and management endpoints

Design Principle:
    Routes are THIN: extract input, call a service, wrap the result in the
    response envelope. Business rules live in services.
"""

from typing import List

from fastapi import APIRouter


def build_router_registry() -> List[APIRouter]:
    from app.routes import admin, auth, contact, content, estimate, health

    return [
        health.router,
        auth.router,
        content.portfolio_router,
        content.blogs_router,
        contact.router,
        content.services_router,
        content.labs_router,
        estimate.router,
        admin.router,
    ]
