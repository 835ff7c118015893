"""
GraphQL Query Resolvers

Defines all read operations (queries) for the GraphQL API.
Each resolver fetches data from the database using the context.
"""

import logging

import strawberry
from strawberry.types import Info

from library_api.graphql.context import GraphQLContext
from library_api.graphql.types.author import AuthorType
from library_api.graphql.types.book import BookType
from library_api.graphql.types.user import UserType
from library_api.models import Author, Book, User
from library_api.repositories import AuthorRepository, BookRepository

logger = logging.getLogger(__name__)


def author_to_graphql(author: Author) -> AuthorType:
    """Convert SQLAlchemy Author model to GraphQL AuthorType."""
    return AuthorType(
        id=strawberry.ID(str(author.id)),
        name=author.name,
        born=author.born,
    )


def book_to_graphql(book: Book) -> BookType:
    """Convert SQLAlchemy Book model to GraphQL BookType."""
    return BookType(
        id=strawberry.ID(str(book.id)),
        title=book.title,
        published=book.published,
        author=author_to_graphql(book.author),
        genres=list(book.genres),
    )


def user_to_graphql(user: User) -> UserType:
    """Convert SQLAlchemy User model to GraphQL UserType."""
    return UserType(
        id=strawberry.ID(str(user.id)),
        username=user.username,
        favorite_genre=user.favorite_genre,
    )


@strawberry.type
class Query:
    """
    GraphQL Query type containing all read operations.

    None of these require authentication.
    """

    @strawberry.field(description="Total number of books")
    def book_count(self, info: Info[GraphQLContext, None]) -> int:
        return BookRepository(info.context.db).count()

    @strawberry.field(description="Total number of authors")
    def author_count(self, info: Info[GraphQLContext, None]) -> int:
        return AuthorRepository(info.context.db).count()

    @strawberry.field(description="List books, optionally filtered by author name and/or genre")
    def all_books(
        self,
        info: Info[GraphQLContext, None],
        author: str | None = None,
        genre: str | None = None,
    ) -> list[BookType]:
        """
        Get books with optional filtering.

        Args:
            author: Only books whose author has exactly this name
            genre: Only books whose genres contain exactly this string

        Both filters may be combined. Without arguments every book is
        returned, oldest first.
        """
        books = BookRepository(info.context.db).find_books(author_name=author, genre=genre)
        return [book_to_graphql(b) for b in books]

    @strawberry.field(description="List all authors")
    def all_authors(self, info: Info[GraphQLContext, None]) -> list[AuthorType]:
        authors = AuthorRepository(info.context.db).find()
        return [author_to_graphql(a) for a in authors]

    @strawberry.field(description="The currently authenticated user")
    def me(self, info: Info[GraphQLContext, None]) -> UserType | None:
        user = info.context.current_user
        logger.debug(f"Current user: {user}")
        if user is None:
            return None
        return user_to_graphql(user)
