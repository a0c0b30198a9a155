"""Remoting Router — exposes one contract over HTTP through its Dispatcher.

Invariants:
    - One POST route per declared operation, at the path the registry derived
    - Route handlers contain no logic: body in, DispatchResult out
    - Docs endpoint (GET) never collides with an operation route
      (InvalidIdentifierError at startup)
    - Unmatched POSTs under /api/ answer with the UNKNOWN_ROUTE envelope (404)

Design Decisions:
    - Fallback router is separate and registered last: several API routers can
      share one app without the catch-all shadowing later operations
    - Endpoint closes over its route instead of reading request.url.path:
      unaffected by root_path when the app is mounted under a prefix
"""

import logging

from fastapi import APIRouter, Request, Response

from remoting.core.documentation import ApiDocumentation
from remoting.core.errors import InvalidIdentifierError, UnknownRouteError
from remoting.core.routes import build_docs_route, DEFAULT_DOCS_TEMPLATE
from remoting.schemas.documentation import ApiDocumentationResponse
from remoting.services.dispatcher import Dispatcher

logger = logging.getLogger(__name__)


def _operation_endpoint(dispatcher: Dispatcher, route: str):
    async def call_operation(request: Request) -> Response:
        result = await dispatcher.dispatch(route, await request.body())
        return Response(
            content=result.body,
            status_code=result.status_code,
            media_type=result.media_type,
        )
    return call_operation


def build_remoting_router(
    dispatcher: Dispatcher,
    documentation: ApiDocumentation | None = None,
    docs_path_template: str = DEFAULT_DOCS_TEMPLATE,
) -> APIRouter:
    """Router with every operation route, plus the docs route when documented."""
    registry = dispatcher.registry
    api_name = registry.api_name
    router = APIRouter(tags=[api_name])
    routes = registry.routes()

    for route, op in routes.items():
        router.add_api_route(
            route,
            _operation_endpoint(dispatcher, route),
            methods=["POST"],
            name=f"{api_name}.{op.name}",
        )

    if documentation is not None:
        docs_path = build_docs_route(api_name, docs_path_template)
        if docs_path in routes:
            raise InvalidIdentifierError(
                docs_path, "docs path collides with an operation route",
            )

        async def get_documentation() -> ApiDocumentationResponse:
            return ApiDocumentationResponse.model_validate(documentation)

        router.add_api_route(
            docs_path,
            get_documentation,
            methods=["GET"],
            response_model=ApiDocumentationResponse,
            name=f"{api_name}.docs",
        )

    logger.info(
        f"Remoting router built with {len(routes)} operation(s)",
        extra={"api_name": api_name},
    )
    return router


fallback_router = APIRouter(tags=["remoting"])


@fallback_router.post("/api/{unknown_path:path}", include_in_schema=False)
async def unknown_route(request: Request):
    """Any POST no operation claimed, reported through the global handler."""
    raise UnknownRouteError(request.url.path)
