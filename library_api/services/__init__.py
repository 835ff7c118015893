"""
Services Package

Business logic that is independent of GraphQL resolvers:
- events.py: In-process publish/subscribe backing the bookAdded feed
- security.py: Password hashing and JWT utilities
"""
