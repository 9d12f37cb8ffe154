"""
Blog API — Package Initializer
================================

A small blog post CRUD service built on FastAPI and async SQLAlchemy.

Layers:
    Routes (HTTP)        → blogapi.routes
    Services (logic)     → blogapi.services
    Models & Schemas     → blogapi.models, blogapi.schemas
    Database (handle)    → blogapi.database
"""

__version__ = "1.0.0"
