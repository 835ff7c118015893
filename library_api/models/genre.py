"""
Book Genre Model

Genres are plain strings attached to a book in a fixed order, e.g.
["refactoring", "design", "classic"]. Each string is one row in
book_genres; `position` keeps the list order the client sent.

Book.genres exposes these rows as a list of strings through an
association proxy, so application code never handles BookGenre directly.
"""

from typing import TYPE_CHECKING

from sqlalchemy import ForeignKey, Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from library_api.database import Base

if TYPE_CHECKING:
    from library_api.models.book import Book


class BookGenre(Base):
    """
    One genre entry of a book.

    Table: book_genres

    Indexes:
    - Composite primary key (book_id, position)
    - name: For the allBooks(genre:) filter
    """

    __tablename__ = "book_genres"

    book_id: Mapped[int] = mapped_column(
        ForeignKey("books.id", ondelete="CASCADE"),
        primary_key=True,
    )
    position: Mapped[int] = mapped_column(Integer, primary_key=True)

    name: Mapped[str] = mapped_column(
        String(100),
        index=True,
        nullable=False,
        comment="Genre name, matched exactly and case-sensitively"
    )

    book: Mapped["Book"] = relationship("Book", back_populates="genre_entries")

    def __repr__(self) -> str:
        return f"BookGenre(book_id={self.book_id}, position={self.position}, name='{self.name}')"
