"""
Main FastAPI application for the API Recommender Assistant

This module creates and configures the FastAPI application with:
- CORS middleware for frontend integration
- Chat and session history routes
- Health check endpoint
"""

from contextlib import asynccontextmanager
from typing import Optional, Sequence

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from loguru import logger

from api_recommender import __version__
from api_recommender.agents.assistant import AssistantAgent
from api_recommender.api.routes import chat, sessions
from api_recommender.api.schemas import HealthResponse
from api_recommender.catalog import parse_api_docs
from api_recommender.config.settings import settings, resolve_path
from api_recommender.llm.client import describe_provider
from api_recommender.llm.completion import CompletionPort
from api_recommender.memory.history_store import HistoryStore, get_history_store
from api_recommender.models.catalog import ApiCatalogEntry
from api_recommender.utils.logger import setup_logger


def create_app(
    catalog: Optional[Sequence[ApiCatalogEntry]] = None,
    history_store: Optional[HistoryStore] = None,
    completion: Optional[CompletionPort] = None,
    configure_logging: bool = True,
) -> FastAPI:
    """
    Build the application.

    Collaborators left as None are created at startup from settings: the
    catalog is parsed from ``api_docs_path``, the history store opens
    ``history_db_path`` and completions go to the configured LLM provider.
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if configure_logging:
            setup_logger(settings.log_level)
        logger.info("🚀 API recommender starting...")

        apis = list(catalog) if catalog is not None else parse_api_docs(resolve_path(settings.api_docs_path))
        if completion is None:
            describe_provider()
        store = history_store or get_history_store()
        await store.async_init()

        app.state.agent = AssistantAgent(apis, store, completion=completion)
        logger.info("✅ Assistant ready")

        yield

        logger.info("🛑 API recommender shutting down...")
        app.state.agent = None
        try:
            await store.close()
            logger.info("✅ History store closed")
        except Exception as e:
            logger.warning(f"Error closing history store: {e}")

    app = FastAPI(
        title="API Recommender Assistant",
        description=(
            f"Conversational assistant that recommends {settings.system_name} APIs and "
            "builds sample request payloads through multi-turn slot filling."
        ),
        version=__version__,
        lifespan=lifespan,
        docs_url="/docs",
        redoc_url="/redoc",
    )

    origins = [o.strip() for o in settings.cors_origins.split(",") if o.strip()] or ["*"]
    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        allow_credentials="*" not in origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(chat.router)
    app.include_router(sessions.router)

    @app.get("/", tags=["root"])
    async def root():
        """API information"""
        return {
            "service": "API Recommender Assistant",
            "version": __version__,
            "status": "running",
            "docs": "/docs",
            "endpoints": {
                "health": "/health",
                "chat": "/api/chat",
                "sessions": "/api/sessions",
            },
        }

    @app.get("/health", response_model=HealthResponse, tags=["health"])
    async def health_check():
        return HealthResponse(status="healthy", service="api-recommender", version=__version__)

    return app


app = create_app()
