"""
GraphQL Subscription Resolvers

Real-time feeds delivered over the GraphQL WebSocket endpoint.
"""

from collections.abc import AsyncGenerator

import strawberry
from strawberry.types import Info

from library_api.graphql.context import GraphQLContext
from library_api.graphql.types.book import BookType
from library_api.services.events import EventType


@strawberry.type
class Subscription:
    """GraphQL Subscription type."""

    @strawberry.subscription(description="Every book added after subscribing")
    async def book_added(
        self,
        info: Info[GraphQLContext, None],
    ) -> AsyncGenerator[BookType, None]:
        async with info.context.pubsub.subscribe(EventType.BOOK_ADDED) as events:
            async for book in events:
                yield book
