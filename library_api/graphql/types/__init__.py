"""
GraphQL Types Package

GraphQL type definitions that map to our SQLAlchemy models, defined with
Strawberry's decorator syntax. Python class names end in "Type"; the
GraphQL schema names are Book, Author, User and Token.
"""

from library_api.graphql.types.author import AuthorType
from library_api.graphql.types.book import BookType
from library_api.graphql.types.user import TokenType, UserType

__all__ = [
    "AuthorType",
    "BookType",
    "TokenType",
    "UserType",
]
