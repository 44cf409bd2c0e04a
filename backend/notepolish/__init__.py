"""
NotePolish Backend - Application Package
==========================================

FastAPI service that reformats raw class notes and summarizes them into a
short summary plus takeaways, using a hosted chat-completion model.

Layers:

    ┌─────────────────────────────────────┐
    │           Routes (API Layer)        │  ← HTTP concerns only
    ├─────────────────────────────────────┤
    │   Services (pipeline, notes, auth)  │  ← completion attempts, rules
    ├─────────────────────────────────────┤
    │       Models & Schemas (Data)       │  ← SQLAlchemy ORM + Pydantic
    ├─────────────────────────────────────┤
    │        Database (Persistence)       │  ← Async SQLAlchemy sessions
    └─────────────────────────────────────┘
"""

__version__ = "1.0.0"
