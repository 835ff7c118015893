#!/usr/bin/env python3
"""
Database Seed Script

Populates the database with sample data for development.

USAGE:
    # From the project root with the virtualenv active
    python scripts/seed_data.py

This script:
1. Connects to the database using app settings
2. Clears existing data (optional)
3. Creates sample authors and books, one author row per person
4. Creates a demo user that can log in
"""

import sys
from pathlib import Path

# Add project root to Python path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from sqlalchemy import delete
from sqlalchemy.orm import Session

from library_api.config import get_settings
from library_api.database import create_db_engine, create_session_factory, create_tables
from library_api.models import Author, Book, BookGenre, User
from library_api.services.security import hash_password

DEMO_USERNAME = "mluukkai"
DEMO_PASSWORD = "library-demo-pass"


def clear_data(db: Session) -> None:
    """Clear all existing data from the database."""
    print("Clearing existing data...")
    db.execute(delete(BookGenre))
    db.execute(delete(Book))
    db.execute(delete(Author))
    db.execute(delete(User))
    db.commit()
    print("Data cleared.")


def create_authors(db: Session) -> dict[str, Author]:
    """Create sample authors."""
    print("Creating authors...")
    authors_data = [
        {"name": "Robert Martin", "born": 1952},
        {"name": "Martin Fowler", "born": 1963},
        {"name": "Fyodor Dostoevsky", "born": 1821},
        {"name": "Joshua Kerievsky", "born": None},
        {"name": "Sandi Metz", "born": None},
    ]

    authors = {}
    for data in authors_data:
        author = Author(**data)
        db.add(author)
        authors[data["name"]] = author

    db.commit()
    print(f"Created {len(authors)} authors.")
    return authors


def create_books(db: Session, authors: dict[str, Author]) -> list[Book]:
    """Create sample books referencing the authors above."""
    print("Creating books...")
    books_data = [
        ("Clean Code", 2008, "Robert Martin", ["refactoring"]),
        ("Agile software development", 2002, "Robert Martin", ["agile", "patterns", "design"]),
        ("Refactoring, edition 2", 2018, "Martin Fowler", ["refactoring"]),
        ("Refactoring to patterns", 2008, "Joshua Kerievsky", ["refactoring", "patterns"]),
        ("Practical Object-Oriented Design, An Agile Primer Using Ruby", 2012, "Sandi Metz", ["refactoring", "design"]),
        ("Crime and punishment", 1866, "Fyodor Dostoevsky", ["classic", "crime"]),
        ("The Demon", 1872, "Fyodor Dostoevsky", ["classic", "revolution"]),
    ]

    books = []
    for title, published, author_name, genres in books_data:
        book = Book(
            title=title,
            published=published,
            author=authors[author_name],
            genres=genres,
        )
        db.add(book)
        books.append(book)

    db.commit()
    print(f"Created {len(books)} books.")
    return books


def create_demo_user(db: Session) -> User:
    """Create a user that can log in with DEMO_PASSWORD."""
    print("Creating demo user...")
    user = User(
        username=DEMO_USERNAME,
        favorite_genre="refactoring",
        hashed_password=hash_password(DEMO_PASSWORD),
    )
    db.add(user)
    db.commit()
    return user


def seed_database(clear_existing: bool = True) -> None:
    """
    Main function to seed the database.

    Args:
        clear_existing: If True, clears existing data before seeding.
    """
    print("=" * 60)
    print("Starting database seed...")
    print("=" * 60)

    settings = get_settings()
    engine = create_db_engine(settings)
    create_tables(engine)

    db = create_session_factory(engine)()

    try:
        if clear_existing:
            clear_data(db)

        authors = create_authors(db)
        books = create_books(db, authors)
        user = create_demo_user(db)

        print("=" * 60)
        print("Database seeding completed successfully!")
        print("=" * 60)
        print("\nSummary:")
        print(f"  - Authors: {len(authors)}")
        print(f"  - Books: {len(books)}")
        print(f"  - Demo login: {user.username} / {DEMO_PASSWORD}")
        print(f"\nGraphQL IDE at http://localhost:{settings.port}/graphql")

    except Exception as e:
        print(f"Error seeding database: {e}")
        db.rollback()
        raise
    finally:
        db.close()
        engine.dispose()


if __name__ == "__main__":
    seed_database()
