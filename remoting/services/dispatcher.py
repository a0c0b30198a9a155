"""Dispatcher — routes an incoming path + raw payload to its bound handler.

Invariants:
    - Every handler mapping is validated at construction: a missing binding
      (MissingHandlerError) or a binding for an undeclared operation
      (UnknownOperationError) stops startup, never a request
    - dispatch() never raises for request-time failures: each call ends in
      CallState.SENT or CallState.FAILED with a response envelope
    - Any handler exception, domain or unexpected, becomes HandlerError (500)
    - No mutable state: registry and handler map are read-only after __init__

Design Decisions:
    - Explicit dict of handlers over getattr on a service object: every
      operation -> callable mapping is visible in one place
    - Sync and async handlers both accepted; awaitables are awaited
    - error_handler hook lets the app rewrite the message sent to callers
      without changing the flattened wire format
"""

import inspect
import json
import logging
from dataclasses import dataclass
from typing import Any, Callable, Mapping

from remoting.core.contract import ContractRegistry, OperationDescriptor
from remoting.core.domain_types import CallState, Handler
from remoting.core.errors import (
    ErrorContext,
    HandlerError,
    MalformedPayloadError,
    MissingHandlerError,
    RemotingError,
    UnknownOperationError,
)

logger = logging.getLogger(__name__)

JSON_MEDIA_TYPE = "application/json"

# Returns the message sent to the caller; None keeps the default
ErrorHandler = Callable[[Exception, OperationDescriptor], str | None]


@dataclass(frozen=True)
class DispatchResult:
    """Response envelope for one call."""
    status_code: int
    body: bytes
    state: CallState
    operation_name: str | None = None
    failed_at: CallState | None = None
    media_type: str = JSON_MEDIA_TYPE

    @property
    def ok(self) -> bool:
        return self.state == CallState.SENT


class Dispatcher:
    """Resolves, decodes, invokes and encodes one call at a time."""

    def __init__(
        self,
        registry: ContractRegistry,
        handlers: Mapping[str, Handler],
        error_handler: ErrorHandler | None = None,
    ):
        api_name = registry.api_name
        declared = registry.contract.operation_names
        for name in handlers:
            if name not in declared:
                raise UnknownOperationError(api_name, name)
        missing = [name for name in declared if name not in handlers]
        if missing:
            raise MissingHandlerError(api_name, missing)

        self._registry = registry
        self._handlers = dict(handlers)
        self._error_handler = error_handler

    @property
    def registry(self) -> ContractRegistry:
        return self._registry

    async def dispatch(self, path: str, payload: bytes = b"") -> DispatchResult:
        """Run one call through Received → ... → Sent, or stop at Failed."""
        state = CallState.RECEIVED
        context = ErrorContext(api_name=self._registry.api_name, path=path)
        op: OperationDescriptor | None = None
        try:
            op = self._registry.resolve(path)
            state = CallState.RESOLVED
            context.operation_name = op.name

            argument = op.input_shape.decode(payload)
            state = CallState.DECODED

            result = await self._invoke(op, argument, context)
            state = CallState.INVOKED

            body = self._encode(op, result, context)
            state = CallState.ENCODED
        except RemotingError as e:
            return self._fail(e, state, context)

        logger.info(
            f"Dispatched {op.name}",
            extra={
                "api_name": context.api_name,
                "operation_name": op.name,
                "call_state": CallState.SENT.value,
                "status_code": 200,
            },
        )
        return DispatchResult(200, body, CallState.SENT, op.name)

    async def _invoke(
        self, op: OperationDescriptor, argument: Any, context: ErrorContext,
    ) -> Any:
        handler = self._handlers[op.name]
        try:
            result = handler(argument) if op.takes_input else handler()
            if inspect.isawaitable(result):
                result = await result
        except Exception as e:
            logger.warning(
                f"Handler for {op.name} failed: {e!r}",
                extra={"api_name": context.api_name, "operation_name": op.name},
            )
            raise HandlerError(self._failure_message(e, op), context) from e
        return result

    def _encode(
        self, op: OperationDescriptor, result: Any, context: ErrorContext,
    ) -> bytes:
        try:
            return op.output_shape.encode(result)
        except MalformedPayloadError as e:
            logger.error(
                f"Handler for {op.name} returned a value outside its output shape",
                extra={"api_name": context.api_name, "operation_name": op.name},
            )
            raise HandlerError(
                f"Result of '{op.name}' does not match its declared output",
                context,
            ) from e

    def _failure_message(self, exc: Exception, op: OperationDescriptor) -> str:
        if self._error_handler is not None:
            message = self._error_handler(exc, op)
            if message is not None:
                return message
        return str(exc) or type(exc).__name__

    def _fail(
        self, exc: RemotingError, state: CallState, context: ErrorContext,
    ) -> DispatchResult:
        exc.context.api_name = exc.context.api_name or context.api_name
        exc.context.operation_name = exc.context.operation_name or context.operation_name
        exc.context.path = exc.context.path or context.path
        logger.warning(
            f"Call to {context.path} failed after {state.value}: {exc.message}",
            extra={
                "api_name": context.api_name,
                "operation_name": context.operation_name,
                "path": context.path,
                "error_code": exc.code,
                "call_state": CallState.FAILED.value,
                "status_code": exc.http_status,
            },
        )
        return DispatchResult(
            status_code=exc.http_status,
            body=json.dumps(exc.to_response()).encode(),
            state=CallState.FAILED,
            operation_name=context.operation_name,
            failed_at=state,
        )
