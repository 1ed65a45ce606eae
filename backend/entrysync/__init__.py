"""
EntrySync Backend — Application Package Initializer
====================================================

What: Marks the `entrysync` directory as a Python package.
Who:  Used implicitly by Python's import system and explicitly by Alembic, pytest, and uvicorn.

Architecture Note:
    The backend is split into thin layers:

    ┌─────────────────────────────────────┐
    │           Routes (API Layer)        │  ← HTTP concerns only
    ├─────────────────────────────────────┤
    │   Services (CRUD + Sync Reconciler) │  ← Business rules
    ├─────────────────────────────────────┤
    │   Entry Codec & Persistence Gateway │  ← Wire ⇄ row mapping, bound SQL
    ├─────────────────────────────────────┤
    │   Models, Schemas & Database        │  ← SQLAlchemy ORM + Pydantic
    └─────────────────────────────────────┘

    Routes receive a request-scoped gateway through FastAPI dependencies, so
    every layer below the routes can be exercised against an in-memory database.
"""

__version__ = "1.0.0"
