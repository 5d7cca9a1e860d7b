"""
Pixeloria Backend — Middleware Package
========================================

What:  Cross-cutting concerns applied to every request.
Why:   Handled once here instead of in each route handler.

Middleware Chain (outermost first, order matters!):
    Request → [Security Headers] → [Origin Allow-List] → [CORS]
            → [Request ID] → [Access Log] → [Body Size Limit]
            → [Rate Limit] → [GZip] → [Unhandled Errors] → Router

    1. Security headers outermost: every response carries them, including
       early rejections below.
    2. Origin allow-list: foreign origins get 403 before any work is done.
    3. CORS: answers preflights, decorates allowed responses.
    4. Request ID before logging so log lines carry it.
    5. Access log sees rejections by body limit and rate limit.
    6. Body size and rate limit reject before the router and the database.
    7. Unhandled errors innermost: a crashing route still becomes the 500
       envelope that every outer layer decorates.

    Starlette wraps in reverse order of `add_middleware`, so `create_app()`
    adds them from the innermost outwards.
"""
