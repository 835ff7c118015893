"""
Library API Application Package

A GraphQL backend for a small library: books, their authors and the users
allowed to add them, with a real-time feed of newly added books.

Package Structure:
- config.py: Application configuration using Pydantic Settings
- database.py: SQLAlchemy engine, session factory and request dependency
- repositories.py: Per-entity persistence helpers over a session
- main.py: FastAPI application factory and configuration
- models/: SQLAlchemy ORM models
- graphql/: Strawberry schema, resolvers and request context
- services/: Security primitives and the in-process event bus
"""

__version__ = "0.1.0"
