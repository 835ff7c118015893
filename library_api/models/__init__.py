"""
SQLAlchemy Models Package

This package contains all database models for the Library API.

Model Relationships:
- Author <- Book: Many-to-One (every book references the author row
                  created alongside it)
- Book -> BookGenre: One-to-Many, ordered (a book's genre strings)

Import all models here to:
1. Make them available as: from library_api.models import Book, Author
2. Ensure Alembic discovers them for migrations
"""

# The order matters for SQLAlchemy to resolve relationships
from library_api.models.author import Author
from library_api.models.genre import BookGenre
from library_api.models.book import Book
from library_api.models.user import User

__all__ = [
    "Author",
    "BookGenre",
    "Book",
    "User",
]
