"""
GraphQL Context

Provides request context to all GraphQL resolvers including:
- Database session for queries
- Current authenticated user (if any)
- Application settings (token secret)
- The process-wide event bus used by subscriptions

The context is created fresh for each GraphQL request (or WebSocket
connection) and passed to all resolvers via the `info` parameter.
"""

import logging

from fastapi import Depends, HTTPException, status
from fastapi.concurrency import run_in_threadpool
from sqlalchemy.orm import Session
from starlette.requests import HTTPConnection
from strawberry.fastapi import BaseContext

from library_api.config import Settings
from library_api.database import get_db
from library_api.models import User
from library_api.repositories import UserRepository
from library_api.services.events import PubSub
from library_api.services.security import decode_token

logger = logging.getLogger(__name__)

BEARER_PREFIX = "bearer "


class GraphQLContext(BaseContext):
    """
    Context object available to all GraphQL resolvers.

    Inherits from Strawberry's BaseContext; Strawberry fills in the
    request/response attributes after the getter returns.

    Attributes:
        db: SQLAlchemy database session
        settings: Application settings
        pubsub: In-process event bus
        current_user: Authenticated user (None if not authenticated)
    """

    def __init__(
        self,
        db: Session,
        settings: Settings,
        pubsub: PubSub,
        current_user: User | None = None,
    ):
        super().__init__()
        self.db = db
        self.settings = settings
        self.pubsub = pubsub
        self.current_user = current_user


def extract_bearer_token(authorization: str | None) -> str | None:
    """
    Return the token part of an Authorization header.

    A missing header or one using another scheme yields None. The
    "bearer " prefix is matched case-insensitively.
    """
    if not authorization:
        return None
    if not authorization.lower().startswith(BEARER_PREFIX):
        return None
    return authorization[len(BEARER_PREFIX):]


def get_user_from_token(db: Session, token: str | None, settings: Settings) -> User | None:
    """
    Extract and validate user from JWT token.

    Args:
        db: Database session
        token: JWT (without 'Bearer ' prefix), or None
        settings: Application settings holding the signing secret

    Returns:
        User if the token names an existing user, None when there is no
        token or the user no longer exists

    Raises:
        HTTPException: 401 if the token fails verification
    """
    if token is None:
        return None

    payload = decode_token(token, settings)
    if payload is None or "id" not in payload:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Could not validate credentials",
            headers={"WWW-Authenticate": "Bearer"},
        )

    try:
        user_id = int(payload["id"])
    except (TypeError, ValueError):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Could not validate credentials",
            headers={"WWW-Authenticate": "Bearer"},
        )

    return UserRepository(db).get(user_id)


async def get_context(
    connection: HTTPConnection,
    db: Session = Depends(get_db),
) -> GraphQLContext:
    """
    Create GraphQL context for each request.

    Strawberry calls this for every HTTP request and for every WebSocket
    connection. It reads the Authorization header and resolves the
    current user.
    """
    settings: Settings = connection.app.state.settings
    pubsub: PubSub = connection.app.state.pubsub

    token = extract_bearer_token(connection.headers.get("Authorization"))
    current_user = await run_in_threadpool(get_user_from_token, db, token, settings)

    return GraphQLContext(
        db=db,
        settings=settings,
        pubsub=pubsub,
        current_user=current_user,
    )
