"""
GraphQL Author Type

Defines the Author type for GraphQL queries.
"""

import logging

import strawberry
from sqlalchemy.orm import Session
from strawberry.types import Info

from library_api.graphql.context import GraphQLContext
from library_api.repositories import AuthorRepository, BookRepository

logger = logging.getLogger(__name__)


def count_books_for_author_name(db: Session, name: str) -> int:
    """
    Count books for the author with this name.

    The author is looked up again by name, so when several author rows
    share a name the count belongs to the oldest of them. A missing row
    means the data is inconsistent and is reported, not hidden.

    Raises:
        LookupError: If no author has this name
    """
    author = AuthorRepository(db).find_by_name(name)
    if author is None:
        logger.error(f"No author row found for name '{name}'")
        raise LookupError(f"author '{name}' not found")

    return BookRepository(db).count_by_author(author.id)


@strawberry.type(name="Author")
class AuthorType:
    """
    GraphQL type representing a book author.

    Maps to the Author SQLAlchemy model.
    """

    id: strawberry.ID
    name: str
    born: int | None = None

    @strawberry.field(description="Number of books written by this author")
    def book_count(self, info: Info[GraphQLContext, None]) -> int | None:
        return count_books_for_author_name(info.context.db, self.name)
