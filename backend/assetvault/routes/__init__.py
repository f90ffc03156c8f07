# Routes package init
"""
AssetVault Backend — Route Handlers
=====================================

Routers:
    - auth:   POST /register, POST /login (public)
    - assets: /api/v1/assets CRUD (bearer token required)
    - health: GET /health (public, not access-logged)
"""
