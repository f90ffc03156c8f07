"""
AssetVault Backend — Application Package Initializer
=====================================================

What: Marks the `assetvault` directory as a Python package.
Why:  Enables module imports like `from assetvault.config import settings`.
Who:  Used implicitly by Python's import system and explicitly by Alembic, pytest, and uvicorn.

Architecture Note:
    This backend follows a layered architecture:

    ┌─────────────────────────────────────┐
    │           Routes (API Layer)        │  ← HTTP concerns only
    ├─────────────────────────────────────┤
    │   Services (Validation, Auth, CRUD) │  ← Rules, orchestration
    ├─────────────────────────────────────┤
    │       Models & Schemas (Data)       │  ← SQLAlchemy ORM + Pydantic
    ├─────────────────────────────────────┤
    │        Database (Persistence)       │  ← Async SQLAlchemy sessions
    └─────────────────────────────────────┘

    Routes never touch the database directly. They receive an AssetService or
    AuthService through FastAPI dependencies, and those services talk to the
    stores (AssetStore, UserStore) that wrap a per-request AsyncSession.
"""

__version__ = "1.0.0"
