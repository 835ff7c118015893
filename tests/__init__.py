"""
Test Suite for Library API

This package contains all tests for the Library API.

Test Organization:
- conftest.py: Shared fixtures (test database, client, sample data)
- test_queries.py: GraphQL queries and the Author.bookCount field
- test_mutations.py: addBook, editAuthor, createUser, login
- test_auth.py: Bearer token handling and the request context
- test_subscriptions.py: bookAdded delivery through the schema
- test_events.py: The in-process PubSub
- test_repositories.py: Persistence helpers
- test_config.py: Settings validation
- test_app.py: Root and health endpoints

Running Tests:
    # Run all tests
    pytest

    # Run with coverage
    pytest --cov=library_api --cov-report=html

    # Run specific file
    pytest tests/test_mutations.py
"""
