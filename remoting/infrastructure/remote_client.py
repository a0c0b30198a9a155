"""Remote Proxy — caller-side object whose methods mirror a registered contract.

Invariants:
    - Every declared operation reachable as proxy.<name>; proxy members
      (call, aclose, _client, ...) always win, shadowed operations stay
      reachable through call() and operations
    - Each call issues exactly one POST to the route the server derives
    - Each call completes exactly once: decoded result, or an exception
    - httpx transport failures (connect, timeout, protocol) → TransportError
    - Non-2xx responses → RemoteError carrying the server's message and code
    - No retries; timeouts are whatever the httpx client was configured with

Design Decisions:
    - Built from the same ContractRegistry (and route builder) as the Dispatcher
      so names, shapes and paths cannot drift between client and server
    - Calls return awaitables; submit() wraps one in an asyncio.Task for
      callers that prefer done-callbacks
    - Injected httpx.AsyncClient is never closed by the proxy (caller owns it)
"""

import asyncio
import logging
from typing import Any

import httpx

from remoting.core.contract import ContractRegistry, OperationDescriptor
from remoting.core.errors import (
    ErrorContext,
    MalformedPayloadError,
    RemoteError,
    TransportError,
)

logger = logging.getLogger(__name__)

_NO_ARGUMENT = object()


def _remote_failure(response: httpx.Response, context: ErrorContext) -> RemoteError:
    """Map a failure envelope onto RemoteError, tolerating non-JSON bodies."""
    message = response.reason_phrase or f"HTTP {response.status_code}"
    code = None
    try:
        payload = response.json()
    except ValueError:
        return RemoteError(response.text or message, response.status_code, None, context)
    error = payload.get("error") if isinstance(payload, dict) else None
    if isinstance(error, dict):
        message = error.get("message") or message
        code = error.get("code")
    return RemoteError(message, response.status_code, code, context)


class RemoteCall:
    """Callable bound to one operation of a RemoteProxy."""

    def __init__(self, proxy: "RemoteProxy", operation: OperationDescriptor, route: str):
        self._proxy = proxy
        self.operation = operation
        self.route = route
        self.__name__ = operation.name

    def __repr__(self) -> str:
        return f"<RemoteCall {self.operation.name} → {self.route}>"

    async def __call__(self, argument: Any = _NO_ARGUMENT) -> Any:
        return await self._proxy._call(self.operation, self.route, argument)

    def submit(self, argument: Any = _NO_ARGUMENT) -> asyncio.Task:
        """Schedule the call; requires a running event loop."""
        return asyncio.ensure_future(self(argument))


class RemoteProxy:
    """Client for one API: proxy.addTodo(todo), proxy.getTodos(), ..."""

    def __init__(
        self,
        registry: ContractRegistry,
        base_url: str = "",
        client: httpx.AsyncClient | None = None,
        timeout_seconds: float = 30.0,
        headers: dict[str, str] | None = None,
    ):
        self._registry = registry
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(
            base_url=base_url, timeout=timeout_seconds,
        )
        self._headers = {"Content-Type": "application/json", **(headers or {})}
        self._calls: dict[str, RemoteCall] = {
            op.name: RemoteCall(self, op, registry.route_for(op.name))
            for op in registry.describe()
        }

    def __getattr__(self, name: str) -> RemoteCall:
        # Only consulted when normal lookup fails, so members are never replaced
        calls = self.__dict__.get("_calls", {})
        if name in calls:
            return calls[name]
        raise AttributeError(
            f"{type(self).__name__!r} object has no attribute {name!r}"
        )

    def __dir__(self):
        return [*super().__dir__(), *self.__dict__.get("_calls", {})]

    @property
    def operations(self) -> dict[str, RemoteCall]:
        return dict(self._calls)

    async def call(self, operation_name: str, argument: Any = _NO_ARGUMENT) -> Any:
        """Invoke by name; same as attribute access."""
        self._registry.get(operation_name)
        return await self._calls[operation_name](argument)

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def __aenter__(self) -> "RemoteProxy":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def _call(
        self, op: OperationDescriptor, route: str, argument: Any,
    ) -> Any:
        context = ErrorContext(
            api_name=self._registry.api_name, operation_name=op.name, path=route,
        )
        if op.takes_input:
            if argument is _NO_ARGUMENT:
                raise TypeError(f"{op.name}() missing required argument")
            body = op.input_shape.encode(argument)
        else:
            if argument is not _NO_ARGUMENT:
                raise TypeError(f"{op.name}() takes no argument")
            body = b""

        try:
            response = await self._client.post(
                route, content=body, headers=self._headers,
            )
        except httpx.TransportError as e:
            logger.error(
                f"Transport failure calling {op.name}: {e!r}",
                extra={"api_name": context.api_name, "operation_name": op.name},
            )
            raise TransportError(str(e) or type(e).__name__, context) from e

        if not response.is_success:
            error = _remote_failure(response, context)
            logger.info(
                f"Remote call {op.name} failed: {error.message}",
                extra={
                    "api_name": context.api_name,
                    "operation_name": op.name,
                    "status_code": response.status_code,
                    "error_code": error.remote_code,
                },
            )
            raise error

        try:
            return op.output_shape.decode(response.content)
        except MalformedPayloadError as e:
            e.context = context
            raise
