"""
GraphQL Book Type

Defines the Book type for GraphQL queries and the bookAdded feed.
"""

import strawberry

from library_api.graphql.types.author import AuthorType


@strawberry.type(name="Book")
class BookType:
    """
    GraphQL type representing a book.

    The author is always populated with the full Author entity.
    """

    title: str
    published: int
    author: AuthorType
    genres: list[str]
    id: strawberry.ID
