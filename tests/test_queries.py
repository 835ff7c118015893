"""
GraphQL Query Tests

Tests for the read operations:
- bookCount / authorCount
- allBooks with genre and author filters
- allAuthors and the Author.bookCount field
- me
"""

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import Session

from library_api.graphql.types.author import count_books_for_author_name
from library_api.models import Author, Book, User

# =============================================================================
# Helper Functions
# =============================================================================


def graphql_query(client: TestClient, query: str, variables: dict = None, token: str = None):
    """Execute a GraphQL query and return the response."""
    headers = {"Content-Type": "application/json"}
    if token:
        headers["Authorization"] = f"Bearer {token}"

    payload = {"query": query}
    if variables:
        payload["variables"] = variables

    response = client.post("/graphql", json=payload, headers=headers)
    return response.json()


ALL_BOOKS = """
query($author: String, $genre: String) {
    allBooks(author: $author, genre: $genre) {
        id
        title
        published
        genres
        author {
            name
            born
        }
    }
}
"""


# =============================================================================
# Counts
# =============================================================================


class TestCounts:
    """Tests for bookCount and authorCount."""

    def test_counts_empty(self, client: TestClient):
        """Test counts on an empty database."""
        result = graphql_query(client, "query { bookCount authorCount }")

        assert "errors" not in result
        assert result["data"] == {"bookCount": 0, "authorCount": 0}

    def test_counts_with_data(self, client: TestClient, sample_books: list[Book]):
        """Test counts with three books by two authors."""
        result = graphql_query(client, "query { bookCount authorCount }")

        assert "errors" not in result
        assert result["data"]["bookCount"] == 3
        assert result["data"]["authorCount"] == 2


# =============================================================================
# allBooks
# =============================================================================


class TestAllBooks:
    """Tests for the allBooks query."""

    def test_all_books_without_filters(self, client: TestClient, sample_books: list[Book]):
        """Test that every book is returned, oldest first, with its author."""
        result = graphql_query(client, ALL_BOOKS)

        assert "errors" not in result
        books = result["data"]["allBooks"]
        assert [b["title"] for b in books] == [b.title for b in sample_books]
        assert books[0]["author"] == {"name": "Robert Martin", "born": 1952}
        assert books[0]["id"] == str(sample_books[0].id)

    def test_genres_keep_their_order(self, client: TestClient, sample_books: list[Book]):
        """Test that the genre list comes back in the order it was stored."""
        result = graphql_query(client, ALL_BOOKS)

        agile = next(b for b in result["data"]["allBooks"] if b["title"].startswith("Agile"))
        assert agile["genres"] == ["agile", "patterns", "design"]

    def test_filter_by_genre(self, client: TestClient, sample_books: list[Book]):
        """Test that only books containing the genre are returned."""
        result = graphql_query(client, ALL_BOOKS, variables={"genre": "patterns"})

        assert "errors" not in result
        titles = [b["title"] for b in result["data"]["allBooks"]]
        assert titles == ["Agile software development"]

    def test_filter_by_genre_is_case_sensitive(self, client: TestClient, sample_books: list[Book]):
        """Test that genre matching is exact."""
        result = graphql_query(client, ALL_BOOKS, variables={"genre": "Classic"})

        assert "errors" not in result
        assert result["data"]["allBooks"] == []

    def test_filter_by_unknown_genre(self, client: TestClient, sample_books: list[Book]):
        """Test that an unknown genre yields an empty list, not an error."""
        result = graphql_query(client, ALL_BOOKS, variables={"genre": "poetry"})

        assert "errors" not in result
        assert result["data"]["allBooks"] == []

    def test_filter_by_author(self, client: TestClient, sample_books: list[Book]):
        """Test that the author argument filters by author name."""
        result = graphql_query(client, ALL_BOOKS, variables={"author": "Robert Martin"})

        assert "errors" not in result
        titles = {b["title"] for b in result["data"]["allBooks"]}
        assert titles == {"Clean Code", "Agile software development"}

    def test_filter_by_author_and_genre(self, client: TestClient, sample_books: list[Book]):
        """Test that both filters combine."""
        result = graphql_query(
            client,
            ALL_BOOKS,
            variables={"author": "Robert Martin", "genre": "refactoring"},
        )

        assert "errors" not in result
        assert [b["title"] for b in result["data"]["allBooks"]] == ["Clean Code"]

    def test_genre_filter_spans_duplicate_author_rows(
        self,
        client: TestClient,
        db_session: Session,
        sample_books: list[Book],
    ):
        """Test that books by separate author rows sharing a name are all found."""
        duplicate = Author(name="Robert Martin", born=None)
        db_session.add(
            Book(title="Clean Architecture", published=2017, author=duplicate, genres=["refactoring"])
        )
        db_session.commit()

        result = graphql_query(client, ALL_BOOKS, variables={"genre": "refactoring"})

        titles = [b["title"] for b in result["data"]["allBooks"]]
        assert titles == ["Clean Code", "Clean Architecture"]

        result = graphql_query(client, ALL_BOOKS, variables={"author": "Robert Martin"})
        assert len(result["data"]["allBooks"]) == 3


# =============================================================================
# allAuthors / bookCount
# =============================================================================


class TestAllAuthors:
    """Tests for the allAuthors query and Author.bookCount."""

    def test_list_authors(self, client: TestClient, sample_books: list[Book]):
        """Test listing authors with their book counts."""
        query = """
        query {
            allAuthors {
                id
                name
                born
                bookCount
            }
        }
        """
        result = graphql_query(client, query)

        assert "errors" not in result
        authors = result["data"]["allAuthors"]
        assert [(a["name"], a["born"], a["bookCount"]) for a in authors] == [
            ("Robert Martin", 1952, 2),
            ("Fyodor Dostoevsky", 1821, 1),
        ]

    def test_book_count_uses_oldest_author_with_name(
        self,
        client: TestClient,
        db_session: Session,
        sample_books: list[Book],
    ):
        """Test that duplicate author rows all report the oldest row's count."""
        duplicate = Author(name="Robert Martin", born=None)
        db_session.add(
            Book(title="Clean Architecture", published=2017, author=duplicate, genres=["design"])
        )
        db_session.commit()

        result = graphql_query(client, "query { allAuthors { name bookCount } }")

        martins = [a for a in result["data"]["allAuthors"] if a["name"] == "Robert Martin"]
        assert len(martins) == 2
        assert [a["bookCount"] for a in martins] == [2, 2]

    def test_book_count_without_author_row_raises(self, db_session: Session):
        """Test that a name with no author row is an error, not zero."""
        with pytest.raises(LookupError):
            count_books_for_author_name(db_session, "Nobody Atall")

    def test_book_count_zero_for_author_without_books(
        self,
        db_session: Session,
        sample_author: Author,
    ):
        """Test that an existing author without books counts zero."""
        assert count_books_for_author_name(db_session, sample_author.name) == 0


# =============================================================================
# me
# =============================================================================


class TestMeQuery:
    """Tests for the me query."""

    def test_me_unauthenticated(self, client: TestClient):
        """Test that me is null without a token."""
        result = graphql_query(client, "query { me { username } }")

        assert "errors" not in result
        assert result["data"]["me"] is None

    def test_me_authenticated(self, client: TestClient, sample_user: User, auth_token: str):
        """Test that me returns the token's user."""
        query = """
        query {
            me {
                id
                username
                favoriteGenre
            }
        }
        """
        result = graphql_query(client, query, token=auth_token)

        assert "errors" not in result
        assert result["data"]["me"] == {
            "id": str(sample_user.id),
            "username": "testuser",
            "favoriteGenre": "refactoring",
        }
