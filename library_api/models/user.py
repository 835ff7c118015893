"""
User Model

Represents a user who can log in and add books.

Each user carries their own bcrypt password hash. Users created without
a password have hashed_password = NULL and cannot log in.
"""

from datetime import datetime

from sqlalchemy import DateTime, String, func
from sqlalchemy.orm import Mapped, mapped_column

from library_api.database import Base


class User(Base):
    """
    User model representing registered users in the system.

    Table: users

    Indexes:
    - Primary key on id (automatic)
    - username: Unique index for login lookups

    Example:
        user = User(
            username="mluukkai",
            favorite_genre="refactoring",
            hashed_password=hash_password("s3cret-pass"),
        )
    """

    __tablename__ = "users"

    id: Mapped[int] = mapped_column(primary_key=True)

    # -------------------------------------------------------------------------
    # Profile Fields
    # -------------------------------------------------------------------------
    # The unique constraint is the only duplicate check; a second
    # createUser with the same name fails at commit time.
    username: Mapped[str] = mapped_column(
        String(100),
        unique=True,
        index=True,
        nullable=False,
        comment="Login name"
    )

    favorite_genre: Mapped[str] = mapped_column(
        String(100),
        nullable=False,
        comment="Genre used for recommendations on the client"
    )

    # -------------------------------------------------------------------------
    # Credentials
    # -------------------------------------------------------------------------
    hashed_password: Mapped[str | None] = mapped_column(
        String(255),
        nullable=True,
        comment="Bcrypt hash of the password (NULL = cannot log in)"
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
    )

    @property
    def has_password(self) -> bool:
        return self.hashed_password is not None

    def __repr__(self) -> str:
        return f"User(id={self.id}, username='{self.username}')"
