"""
GraphQL Package

This package provides the GraphQL API using Strawberry GraphQL.

Features:
- Book, Author, User and Token types
- Query resolvers for counts, listings and the current user
- Mutation resolvers for adding books, editing authors, users and login
- bookAdded subscription over WebSocket
- Authentication via JWT in context

Usage:
    The GraphQL endpoint is available at /graphql (HTTP and WebSocket)
    with an interactive GraphiQL IDE for development.

Example Query:
    query {
        allBooks(genre: "refactoring") {
            title
            published
            author { name bookCount }
        }
    }
"""

import strawberry
from strawberry.fastapi import GraphQLRouter

from library_api.graphql.context import get_context
from library_api.graphql.mutations import Mutation
from library_api.graphql.queries import Query
from library_api.graphql.subscriptions import Subscription

schema = strawberry.Schema(
    query=Query,
    mutation=Mutation,
    subscription=Subscription,
)


def create_graphql_router(graphql_ide_enabled: bool = True) -> GraphQLRouter:
    """
    Create the GraphQL router for FastAPI.

    The router serves queries and mutations over HTTP and subscriptions
    over WebSocket (graphql-transport-ws and the legacy graphql-ws).

    Returns:
        GraphQLRouter configured with schema and context
    """
    return GraphQLRouter(
        schema,
        context_getter=get_context,
        graphql_ide="graphiql" if graphql_ide_enabled else None,
    )


__all__ = ["schema", "create_graphql_router"]
