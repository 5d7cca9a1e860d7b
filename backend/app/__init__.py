"""
Pixeloria Backend — Application Package Initializer
=====================================================

What: REST API behind the Pixeloria agency website and its admin dashboard.
Who:  Imported by uvicorn (`app.main:app`), `python -m app`, the serverless
      adapter (api/index.py) and pytest.

Architecture Note:
    ┌─────────────────────────────────────┐
    │   Middleware (security, CORS, ids,  │  ← cross-cutting, per request
    │   logging, body limit, rate limit)  │
    ├─────────────────────────────────────┤
    │           Routes (API Layer)        │  ← HTTP concerns only
    ├─────────────────────────────────────┤
    │         Services (Business Logic)   │  ← authorization rules, pricing
    ├─────────────────────────────────────┤
    │       Models & Schemas (Data)       │  ← SQLAlchemy ORM + Pydantic
    ├─────────────────────────────────────┤
    │        Database (Persistence)       │  ← Database lifecycle object
    └─────────────────────────────────────┘
"""

__version__ = "1.0.0"
