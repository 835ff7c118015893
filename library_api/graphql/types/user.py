"""
GraphQL User Type

Defines the User and Token types.
Only exposes public/safe fields: the password hash never leaves the server.
"""

import strawberry


@strawberry.type(name="User")
class UserType:
    """GraphQL type representing a user."""

    username: str
    favorite_genre: str
    id: strawberry.ID


@strawberry.type(name="Token")
class TokenType:
    """
    Response type for the login mutation.

    `value` is a signed JWT to send back as `Authorization: Bearer <value>`.
    """

    value: str
