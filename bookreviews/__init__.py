"""
Book Reviews API Application Package

Review lifecycle, review interactions (likes and comments) and reading
statistics for a book community.

Package Structure:
- config.py: Application configuration using Pydantic Settings
- database.py: SQLAlchemy database connection and session management
- main.py: FastAPI application factory and configuration
- dependencies.py: Dependency injection functions (db session, caller identity)
- models/: SQLAlchemy ORM models
- schemas/: Pydantic request/response schemas
- routers/: API route handlers
- services/: Business logic (review lifecycle, interactions, statistics)
"""

__version__ = "0.1.0"
