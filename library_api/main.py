"""
FastAPI Application Entry Point

This module creates and configures the FastAPI application.

Key Concepts:
=============

1. Application Factory Pattern
   - create_app(settings) returns a configured app
   - Settings, engine, session factory and event bus live on app.state
   - Tests build an app with their own settings and session factory

2. Lifespan Events
   - startup: log configuration
   - shutdown: dispose the database engine

3. Exception Handlers
   - Convert stray database errors to HTTP 500 responses
   - Hide internal errors unless debug is on
"""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy import Engine, text
from sqlalchemy.engine import make_url
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from library_api.config import Settings, get_settings
from library_api.database import create_db_engine, create_session_factory
from library_api.graphql import create_graphql_router
from library_api.services.events import PubSub

logger = logging.getLogger(__name__)


def configure_logging(settings: Settings) -> None:
    logging.basicConfig(
        level=getattr(logging, settings.log_level),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


# =============================================================================
# Application Factory
# =============================================================================
def create_app(
    settings: Settings | None = None,
    session_factory: sessionmaker[Session] | None = None,
) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        settings: Application settings; defaults to get_settings()
        session_factory: Pre-built session factory (tests); when omitted an
            engine is created from settings.database_url

    Returns:
        Configured FastAPI application instance
    """
    settings = settings or get_settings()

    engine: Engine | None = None
    if session_factory is None:
        engine = create_db_engine(settings)
        session_factory = create_session_factory(engine)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
        # ----- STARTUP -----
        logger.info(f"Starting {settings.app_name}...")
        logger.info(f"Debug mode: {settings.debug}")
        database = make_url(settings.database_url).render_as_string(hide_password=True)
        logger.info(f"Connecting to {database}")

        yield  # Application runs here

        # ----- SHUTDOWN -----
        logger.info(f"Shutting down {settings.app_name}...")
        if engine is not None:
            engine.dispose()

    app = FastAPI(
        title=settings.app_name,
        description="""
## Library API

A GraphQL API for a small library.

### Operations
- **Queries**: bookCount, authorCount, allBooks, allAuthors, me
- **Mutations**: addBook, editAuthor, createUser, login
- **Subscriptions**: bookAdded (WebSocket)

### Authentication
Call `login` and send the returned token as `Authorization: Bearer <token>`.
        """,
        version=settings.api_version,
        lifespan=lifespan,
    )

    app.state.settings = settings
    app.state.session_factory = session_factory
    app.state.pubsub = PubSub()

    # -------------------------------------------------------------------------
    # CORS Middleware
    # -------------------------------------------------------------------------
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allowed_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # -------------------------------------------------------------------------
    # Exception Handlers
    # -------------------------------------------------------------------------
    @app.exception_handler(SQLAlchemyError)
    async def sqlalchemy_exception_handler(
        request: Request,
        exc: SQLAlchemyError,
    ) -> JSONResponse:
        """
        Handle SQLAlchemy database errors.

        Logs the actual error for debugging while hiding details from users.
        """
        logger.error(f"Database error: {exc}")
        return JSONResponse(
            status_code=500,
            content={
                "detail": "A database error occurred. Please try again later."
            },
        )

    @app.exception_handler(Exception)
    async def general_exception_handler(
        request: Request,
        exc: Exception,
    ) -> JSONResponse:
        """Catch-all exception handler."""
        logger.error(f"Unhandled error: {exc}", exc_info=True)

        if settings.debug:
            return JSONResponse(
                status_code=500,
                content={"detail": str(exc)},
            )

        return JSONResponse(
            status_code=500,
            content={"detail": "An internal error occurred."},
        )

    # -------------------------------------------------------------------------
    # GraphQL Endpoint
    # -------------------------------------------------------------------------
    # Queries and mutations over HTTP, subscriptions over WebSocket,
    # both at /graphql.
    graphql_router = create_graphql_router(settings.serve_graphql_ide)
    app.include_router(graphql_router, prefix="/graphql", tags=["GraphQL"])

    # -------------------------------------------------------------------------
    # Health Check Endpoint
    # -------------------------------------------------------------------------
    @app.get(
        "/health",
        tags=["Health"],
        summary="Health check",
        description="Check if the API and its database are reachable.",
    )
    def health_check() -> dict:
        """
        Health check endpoint.

        Reports database connectivity and live subscriber counts.
        """
        database_ok = True
        db = app.state.session_factory()
        try:
            db.execute(text("SELECT 1"))
        except SQLAlchemyError as e:
            logger.warning(f"Health check database error: {e}")
            database_ok = False
        finally:
            db.close()

        return {
            "status": "healthy" if database_ok else "degraded",
            "app": settings.app_name,
            "version": settings.api_version,
            "database": {"healthy": database_ok},
            "graphql": {
                "endpoint": "/graphql",
                "ide_enabled": settings.serve_graphql_ide,
                "subscribers": app.state.pubsub.get_stats(),
            },
        }

    @app.get(
        "/",
        tags=["Root"],
        summary="API root",
        description="Welcome message and API information.",
    )
    async def root() -> dict:
        """Root endpoint with API information."""
        return {
            "message": f"Welcome to {settings.app_name}",
            "version": settings.api_version,
            "graphql": "/graphql",
            "health": "/health",
        }

    return app


# =============================================================================
# Application Instance
# =============================================================================
# This is what uvicorn imports: uvicorn library_api.main:app

configure_logging(get_settings())
app = create_app()


if __name__ == "__main__":
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "library_api.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
    )
