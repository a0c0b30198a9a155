"""Remoting API — FastAPI application entry point.

Invariants:
    - Routes registered explicitly (no auto-discovery)
    - Contract, dispatcher and docs are built before the app accepts requests:
      registration errors abort create_app(), never a request
    - Global error handlers map RemotingError → structured JSON responses
    - Fallback router registered last so it never shadows an operation route

Design Decisions:
    - create_app() factory plus module-level `app`: tests build isolated apps
      with their own storage, uvicorn imports `remoting.main:app`
    - Lifespan over @app.on_event: FastAPI recommended pattern, cleaner cleanup
"""

import logging
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from remoting.api.error_handlers import register_error_handlers
from remoting.api.remoting_router import build_remoting_router, fallback_router
from remoting.api.routes import health
from remoting.config import Settings, get_settings
from remoting.core.contract import ContractRegistry
from remoting.core.documentation import generate_documentation
from remoting.infrastructure.observability import setup_logging
from remoting.services.dispatcher import Dispatcher
from remoting.services.todo_storage import TodoStorage
from remoting.services.todos_api import (
    TODOS_CONTRACT, TODOS_DOCS_TITLE, build_todo_docs, build_todo_handlers,
)

logger = logging.getLogger(__name__)


def create_app(
    settings: Settings | None = None, storage: TodoStorage | None = None,
) -> FastAPI:
    """Build the app serving the Todos API."""
    settings = settings or get_settings()
    if storage is None:
        storage = TodoStorage.seeded() if settings.seed_todos else TodoStorage()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Startup/shutdown lifecycle."""
        setup_logging(settings.log_level, settings.log_format)
        logger.info("Remoting API started")
        yield
        logger.info("Remoting API shutting down")

    app = FastAPI(title=settings.app_title, version="1.0.0", lifespan=lifespan)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    registry = ContractRegistry.from_contract(TODOS_CONTRACT)
    dispatcher = Dispatcher(registry, build_todo_handlers(storage))
    documentation = generate_documentation(
        registry, build_todo_docs(), title=TODOS_DOCS_TITLE,
    )

    app.state.storage = storage
    app.state.api_names = [registry.api_name]

    register_error_handlers(app)
    app.include_router(health.router)
    app.include_router(build_remoting_router(
        dispatcher, documentation, settings.docs_path_template,
    ))
    app.include_router(fallback_router)
    return app


app = create_app()


def run() -> None:
    """Console entry point: serve the module-level app with uvicorn."""
    settings = get_settings()
    uvicorn.run(app, host=settings.host, port=settings.port)


if __name__ == "__main__":
    run()
