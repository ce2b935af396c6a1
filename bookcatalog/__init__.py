"""
Book Catalog API: Package Initializer
=====================================

What: A small personal-library service: books with append-only comments,
      stored in MongoDB and exposed over a REST API.

Layering:

    ┌─────────────────────────────────────┐
    │        Routes (API Layer)           │  ← status codes, text vs JSON bodies
    ├─────────────────────────────────────┤
    │        BookService                  │  ← presence checks, id parsing,
    │                                     │    store error translation
    ├─────────────────────────────────────┤
    │        Schemas (Pydantic)           │  ← request and response contracts
    ├─────────────────────────────────────┤
    │        MongoConnection              │  ← client lifecycle, collection handle
    └─────────────────────────────────────┘

The store handle is owned by the application lifespan and handed to the
routes through a FastAPI dependency, so nothing below the routes reads
global state.
"""

__version__ = "1.0.0"
