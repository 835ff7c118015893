"""
GraphQL Errors

Errors raised by resolvers. Both carry an `extensions.code` so clients
can tell "log in first" apart from "fix your input" without parsing
messages.

- AuthenticationError: UNAUTHENTICATED, the operation needs a logged-in user
- InputValidationError: BAD_USER_INPUT, the arguments were rejected; the
  original arguments are attached as `extensions.invalidArgs`
"""

from typing import Any

from graphql import GraphQLError


class AuthenticationError(GraphQLError):
    """Raised when authentication is required but not provided."""

    def __init__(self, message: str = "not authenticated"):
        super().__init__(message, extensions={"code": "UNAUTHENTICATED"})


class InputValidationError(GraphQLError):
    """Raised when input validation fails, at the resolver or in the store."""

    def __init__(self, message: str, invalid_args: dict[str, Any] | None = None):
        extensions: dict[str, Any] = {"code": "BAD_USER_INPUT"}
        if invalid_args is not None:
            extensions["invalidArgs"] = invalid_args
        super().__init__(message, extensions=extensions)
