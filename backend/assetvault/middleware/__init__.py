# Middleware package init
"""
AssetVault Backend — Middleware Package
========================================

What:  Cross-cutting concerns applied to every request.

Middleware Chain (order matters!):
    Request → [Request ID] → [Logging] → [CORS] → Route Handler

    1. Request ID: Generate correlation ID for logging and error bodies
    2. Logging: Log method, path, status, duration with the request ID
    3. CORS: Applied by FastAPI's CORSMiddleware (handles preflight)

    Authentication is NOT middleware: it is a router-level dependency on
    /api/v1, so unauthenticated requests are rejected before any asset
    handler or store call runs.
"""
