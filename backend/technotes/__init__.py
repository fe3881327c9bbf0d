"""
TechNotes Backend — Application Package Initializer
====================================================

What: Marks the `technotes` directory as a Python package.
Why:  Enables module imports like `from technotes.config import settings`.
Who:  Used implicitly by Python's import system and explicitly by Alembic, pytest, and uvicorn.

Architecture Note:
    This backend follows a clean layered architecture:

    ┌─────────────────────────────────────┐
    │           Routes (API Layer)        │  ← HTTP concerns only
    ├─────────────────────────────────────┤
    │   Services (User / Note Handlers)   │  ← Validation, uniqueness, writes
    ├─────────────────────────────────────┤
    │       Models & Schemas (Data)       │  ← SQLAlchemy ORM + Pydantic
    ├─────────────────────────────────────┤
    │        Database (Persistence)       │  ← Async SQLAlchemy sessions
    └─────────────────────────────────────┘

    Cross-cutting stages (request id, access log, bearer auth) live in
    `technotes.middleware` and wrap every request before it reaches a route.
"""

__version__ = "1.0.0"
