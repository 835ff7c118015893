"""
Repositories

Thin persistence helpers over a SQLAlchemy session, one per entity.
Resolvers only talk to the database through these classes.

Every repository offers the same small set of operations:
- count(): number of rows
- find(*criteria): all rows matching SQLAlchemy criteria, oldest first
- find_one(*criteria): first matching row or None
- get(id): row by primary key or None
- save(*objects): insert/update and commit (rollback on failure)
- overwrite(obj, values): replace every document field, then save

Usage:
    books = BookRepository(db)
    tech_books = books.find_books(genre="tech")
"""

import logging
from typing import Any, Generic, TypeVar

from sqlalchemy import Select, func, select
from sqlalchemy import inspect as sa_inspect
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, selectinload

from library_api.database import Base
from library_api.models import Author, Book, BookGenre, User

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=Base)


class Repository(Generic[ModelT]):
    """Generic repository for a single mapped model."""

    model: type[ModelT]

    def __init__(self, db: Session):
        self.db = db

    def _select(self, *criteria) -> Select:
        """Base SELECT, ordered by insertion (primary key)."""
        return select(self.model).where(*criteria).order_by(self.model.id)

    def count(self, *criteria) -> int:
        stmt = select(func.count()).select_from(self.model).where(*criteria)
        return self.db.execute(stmt).scalar_one()

    def find(self, *criteria) -> list[ModelT]:
        return list(self.db.execute(self._select(*criteria)).scalars().all())

    def find_one(self, *criteria) -> ModelT | None:
        return self.db.execute(self._select(*criteria).limit(1)).scalars().first()

    def get(self, id: int) -> ModelT | None:
        return self.db.get(self.model, id)

    def save(self, *objects: Base) -> None:
        """
        Persist objects in a single transaction.

        Raises:
            SQLAlchemyError: After rolling back, if the commit fails.
                Nothing from this call is persisted in that case.
        """
        self.db.add_all(objects)
        try:
            self.db.commit()
        except SQLAlchemyError:
            self.db.rollback()
            raise
        for obj in objects:
            self.db.refresh(obj)

    def overwrite(self, obj: ModelT, values: dict[str, Any]) -> ModelT:
        """
        Replace the whole document with `values`.

        Every column that is neither the primary key nor server-managed is
        set from `values`; columns missing from `values` fall back to their
        default (or NULL). This is a full replace, not a patch.
        """
        for attr in sa_inspect(self.model).column_attrs:
            column = attr.columns[0]
            if column.primary_key or column.server_default is not None:
                continue
            if attr.key in values:
                value = values[attr.key]
            elif column.default is not None and column.default.is_scalar:
                value = column.default.arg
            else:
                value = None
            setattr(obj, attr.key, value)

        self.save(obj)
        return obj


class AuthorRepository(Repository[Author]):
    model = Author

    def find_by_name(self, name: str) -> Author | None:
        """Oldest author row with exactly this name."""
        return self.find_one(Author.name == name)


class BookRepository(Repository[Book]):
    model = Book

    def _select(self, *criteria) -> Select:
        # Books are always returned with their author and genres loaded
        return (
            super()
            ._select(*criteria)
            .options(selectinload(Book.author), selectinload(Book.genre_entries))
        )

    def find_books(
        self,
        author_name: str | None = None,
        genre: str | None = None,
    ) -> list[Book]:
        """
        Books filtered by author name and/or genre.

        Args:
            author_name: Exact name of the referenced author row
            genre: Exact, case-sensitive genre string contained in the list

        Returns:
            Matching books in insertion order (all books without filters)
        """
        criteria = []
        if author_name is not None:
            criteria.append(Book.author.has(Author.name == author_name))
        if genre is not None:
            criteria.append(Book.genre_entries.any(BookGenre.name == genre))
        return self.find(*criteria)

    def count_by_author(self, author_id: int) -> int:
        return self.count(Book.author_id == author_id)


class UserRepository(Repository[User]):
    model = User

    def find_by_username(self, username: str) -> User | None:
        return self.find_one(User.username == username)
