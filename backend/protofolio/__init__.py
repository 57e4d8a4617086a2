"""
Protofolio Backend — Application Package Initializer
======================================================

A catalog of design prototype links: a FastAPI record store plus an async
catalog controller that drives it.

Architecture Note:
    ┌─────────────────────────────────────┐
    │     Client (catalog controller)     │  ← modal state, filters, notifications
    ├─────────────────────────────────────┤
    │           Routes (API Layer)        │  ← HTTP concerns only
    ├─────────────────────────────────────┤
    │   Services + Validation (Logic)     │  ← record rules, query contract
    ├─────────────────────────────────────┤
    │       Models & Schemas (Data)       │  ← SQLAlchemy ORM + Pydantic
    ├─────────────────────────────────────┤
    │        Database (Persistence)       │  ← Database context object
    └─────────────────────────────────────┘
"""

__version__ = "1.0.0"
