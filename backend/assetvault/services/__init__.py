# Services package init
"""
AssetVault Backend — Services Layer
=====================================

What:  Business logic layer sitting between routes (HTTP) and database (persistence).
Why:   Routes handle HTTP; services handle validation, auth rules, and CRUD.

Service Inventory:
    - update_document: Pure flatten/expand helpers for dot-path update documents
    - validation:      Runs the Pydantic schemas and reports field violations
    - asset_service:   AssetStore (persistence contract) + AssetService (orchestration)
    - auth_service:    UserStore, TokenService (PyJWT), AuthService (register/login/authenticate)
"""
