"""
GraphQL Mutation Resolvers

Defines all write operations (mutations) for the GraphQL API.
addBook and editAuthor require authentication; createUser and login
do not.
"""

import logging

import strawberry
from fastapi.concurrency import run_in_threadpool
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from strawberry.types import Info

from library_api.graphql.context import GraphQLContext
from library_api.graphql.errors import AuthenticationError, InputValidationError
from library_api.graphql.queries import (
    author_to_graphql,
    book_to_graphql,
    user_to_graphql,
)
from library_api.graphql.types.author import AuthorType
from library_api.graphql.types.book import BookType
from library_api.graphql.types.user import TokenType, UserType
from library_api.models import Author, Book, User
from library_api.repositories import AuthorRepository, BookRepository, UserRepository
from library_api.services.events import EventType
from library_api.services.security import (
    create_user_token,
    hash_password,
    verify_password,
)

logger = logging.getLogger(__name__)

MIN_TITLE_LENGTH = 2
MIN_AUTHOR_NAME_LENGTH = 4
# bcrypt ignores everything past the first 72 bytes
MAX_PASSWORD_BYTES = 72


def require_auth(info: Info[GraphQLContext, None]) -> User:
    """Helper to require authentication and return the user."""
    user = info.context.current_user
    if user is None:
        raise AuthenticationError("not authenticated")
    return user


def store_error_message(exc: SQLAlchemyError) -> str:
    """Driver message for a failed write, without SQLAlchemy's SQL dump."""
    orig = getattr(exc, "orig", None)
    return str(orig) if orig is not None else str(exc)


def save_new_book(db: Session, new_author: Author, book: Book) -> BookType:
    """Write the author and book in one commit and convert the result."""
    BookRepository(db).save(new_author, book)
    return book_to_graphql(book)


def validate_password(password: str, args: dict) -> None:
    if not password:
        raise InputValidationError("password must not be empty", invalid_args=args)
    if len(password.encode("utf-8")) > MAX_PASSWORD_BYTES:
        raise InputValidationError(
            f"password longer than {MAX_PASSWORD_BYTES} bytes",
            invalid_args=args,
        )


@strawberry.type
class Mutation:
    """
    GraphQL Mutation type containing all write operations.
    """

    # =========================================================================
    # Book Mutations
    # =========================================================================

    @strawberry.mutation(description="Add a book, creating a new author record for it")
    async def add_book(
        self,
        info: Info[GraphQLContext, None],
        title: str,
        author: str,
        published: int,
        genres: list[str],
    ) -> BookType | None:
        """
        Create a book together with a brand-new author row.

        A new Author is written even when one with the same name already
        exists. On success the book is published to bookAdded subscribers.
        The database work runs in a worker thread so open subscriptions
        keep streaming while the write is in flight.
        """
        require_auth(info)
        args = {"title": title, "author": author, "published": published, "genres": genres}

        if len(title) < MIN_TITLE_LENGTH:
            raise InputValidationError("book title too short", invalid_args=args)
        if len(author) < MIN_AUTHOR_NAME_LENGTH:
            raise InputValidationError("author name too short", invalid_args=args)

        new_author = Author(name=author, born=None)
        book = Book(title=title, published=published, author=new_author, genres=genres)

        try:
            result = await run_in_threadpool(save_new_book, info.context.db, new_author, book)
        except SQLAlchemyError as e:
            logger.warning(f"Failed to save book '{title}': {e}")
            raise InputValidationError(store_error_message(e), invalid_args=args)

        logger.info(f"Saved author {new_author!r} and book {book!r}")

        await info.context.pubsub.publish(EventType.BOOK_ADDED, result)
        return result

    # =========================================================================
    # Author Mutations
    # =========================================================================

    @strawberry.mutation(description="Set an author's birth year, looked up by name")
    def edit_author(
        self,
        info: Info[GraphQLContext, None],
        name: str,
        set_born_to: int,
    ) -> AuthorType | None:
        """
        Replace the author document with {name, born: setBornTo}.

        Returns null when no author has this name.
        """
        require_auth(info)

        authors = AuthorRepository(info.context.db)
        author = authors.find_by_name(name)
        if author is None:
            return None

        try:
            authors.overwrite(author, {"name": name, "born": set_born_to})
        except SQLAlchemyError as e:
            raise InputValidationError(
                store_error_message(e),
                invalid_args={"name": name, "setBornTo": set_born_to},
            )

        logger.info(f"Updated author {author!r}")
        return author_to_graphql(author)

    # =========================================================================
    # User Mutations
    # =========================================================================

    @strawberry.mutation(description="Register a new user")
    def create_user(
        self,
        info: Info[GraphQLContext, None],
        username: str,
        favorite_genre: str,
        password: str | None = None,
    ) -> UserType | None:
        """
        Create a user account.

        Usernames are unique in the database; a duplicate is reported as
        invalid input. Without a password the account exists but cannot
        log in. A given password must be non-empty and fit in bcrypt's
        72-byte input.
        """
        if password is not None:
            validate_password(
                password,
                {"username": username, "favoriteGenre": favorite_genre},
            )

        user = User(
            username=username,
            favorite_genre=favorite_genre,
            hashed_password=hash_password(password) if password is not None else None,
        )

        try:
            UserRepository(info.context.db).save(user)
        except SQLAlchemyError as e:
            logger.warning(f"Failed to create user '{username}': {e}")
            raise InputValidationError(
                store_error_message(e),
                invalid_args={"username": username, "favoriteGenre": favorite_genre},
            )

        logger.info(f"Created user {user!r}")
        return user_to_graphql(user)

    @strawberry.mutation(description="Log in and receive a bearer token")
    def login(
        self,
        info: Info[GraphQLContext, None],
        username: str,
        password: str,
    ) -> TokenType | None:
        """
        Authenticate with username and password.

        Unknown users, users without a password and wrong passwords all
        get the same error.
        """
        user = UserRepository(info.context.db).find_by_username(username)

        if (
            user is None
            or not user.has_password
            or not verify_password(password, user.hashed_password)
        ):
            logger.info(f"Failed login for '{username}'")
            raise InputValidationError("wrong credentials")

        return TokenType(value=create_user_token(user.id, user.username, info.context.settings))
