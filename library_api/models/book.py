"""
Book Model

The central model of the Library API.

A book references exactly one author row by id. Its genres are an
ordered list of strings stored in book_genres (see genre.py).
"""

from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import DateTime, ForeignKey, Integer, String, func
from sqlalchemy.ext.associationproxy import AssociationProxy, association_proxy
from sqlalchemy.ext.orderinglist import ordering_list
from sqlalchemy.orm import Mapped, mapped_column, relationship

from library_api.database import Base
from library_api.models.genre import BookGenre

if TYPE_CHECKING:
    from library_api.models.author import Author


class Book(Base):
    """
    Book model representing books in the library.

    Table: books

    Fields:
    - title: Book title (required, at least 2 characters when added)
    - published: Publication year (required)
    - author_id: Reference to the author row written with the book
    - genres: Ordered list of genre names

    Relationships:
    - author: Many-to-One
    - genre_entries: One-to-Many, ordered by position

    Example:
        book = Book(
            title="Clean Code",
            published=2008,
            author=Author(name="Robert Martin"),
            genres=["tech", "refactoring"],
        )
    """

    __tablename__ = "books"

    id: Mapped[int] = mapped_column(primary_key=True)

    # -------------------------------------------------------------------------
    # Document Fields
    # -------------------------------------------------------------------------
    title: Mapped[str] = mapped_column(
        String(500),
        index=True,
        nullable=False,
        comment="Book title"
    )

    published: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        comment="Year of publication"
    )

    author_id: Mapped[int] = mapped_column(
        ForeignKey("authors.id"),
        index=True,
        nullable=False,
        comment="Author row this book was added with"
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
        comment="When the book record was created"
    )

    # -------------------------------------------------------------------------
    # Relationships
    # -------------------------------------------------------------------------
    author: Mapped["Author"] = relationship(
        "Author",
        back_populates="books",
    )

    # ordering_list rewrites `position` whenever the list changes,
    # so the stored order always matches the Python list order.
    genre_entries: Mapped[list[BookGenre]] = relationship(
        BookGenre,
        back_populates="book",
        order_by=BookGenre.position,
        collection_class=ordering_list("position"),
        cascade="all, delete-orphan",
    )

    genres: AssociationProxy[list[str]] = association_proxy(
        "genre_entries",
        "name",
        creator=lambda name: BookGenre(name=name),
    )

    def __repr__(self) -> str:
        return f"Book(id={self.id}, title='{self.title}', published={self.published})"
