"""Error Hierarchy — typed, categorized exceptions for every remoting failure mode.

Invariants:
    - Every error has a code (str), category (ErrorCategory), severity (ErrorSeverity)
    - Registration errors are fatal: the app must not start with an inconsistent contract
    - Request errors are per-call: they become a response envelope, never a crash
    - to_response() produces the single wire envelope used for every failure

Design Decisions:
    - Single hierarchy with RemotingError base: FastAPI global handler and the
      Dispatcher share one envelope shape (ADR: uniform error shape)
    - Handler failures flattened into HandlerError: domain errors and unexpected
      faults look the same on the wire (ADR: kept from the Todos server)
    - Client-side errors live here too so callers catch one base class
"""

from dataclasses import dataclass, field
from enum import Enum
from datetime import datetime, timezone


class ErrorSeverity(str, Enum):
    """Error severity for observability and client handling."""
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class ErrorCategory(str, Enum):
    """High-level error categories for routing and handling."""
    CONFIGURATION = "configuration"
    VALIDATION = "validation"
    RESOURCE_NOT_FOUND = "resource_not_found"
    HANDLER = "handler"
    TRANSPORT = "transport"
    REMOTE = "remote"
    INTERNAL = "internal"


@dataclass
class ErrorContext:
    """Where the failure happened; surfaced in logs and in the envelope."""
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    api_name: str | None = None
    operation_name: str | None = None
    path: str | None = None


class RemotingError(Exception):
    """Base exception for all remoting errors."""

    def __init__(
        self,
        message: str,
        code: str,
        category: ErrorCategory,
        severity: ErrorSeverity = ErrorSeverity.ERROR,
        context: ErrorContext | None = None,
        http_status: int = 500,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.category = category
        self.severity = severity
        self.context = context or ErrorContext()
        self.http_status = http_status

    def to_response(self) -> dict:
        """Convert to the standardized error envelope."""
        return {
            "error": {
                "code": self.code,
                "message": self.message,
                "category": self.category.value,
                "severity": self.severity.value,
                "timestamp": self.context.timestamp.isoformat(),
                "context": {
                    "api_name": self.context.api_name,
                    "operation_name": self.context.operation_name,
                    "path": self.context.path,
                },
            }
        }


# ─── Registration Errors (fatal at startup) ─────────────────────

class DuplicateOperationError(RemotingError):
    """Two operation descriptors in one contract share a name."""
    def __init__(self, api_name: str, operation_name: str):
        super().__init__(
            f"Operation '{operation_name}' declared more than once in API '{api_name}'",
            "DUPLICATE_OPERATION", ErrorCategory.CONFIGURATION,
            ErrorSeverity.CRITICAL,
            ErrorContext(api_name=api_name, operation_name=operation_name),
        )


class InvalidIdentifierError(RemotingError):
    """API or operation name cannot form a route."""
    def __init__(self, identifier: str, reason: str):
        super().__init__(
            f"Invalid identifier '{identifier}': {reason}",
            "INVALID_IDENTIFIER", ErrorCategory.CONFIGURATION,
            ErrorSeverity.CRITICAL,
        )
        self.identifier = identifier


class MissingHandlerError(RemotingError):
    """Declared operations without a handler binding."""
    def __init__(self, api_name: str, missing: list[str]):
        super().__init__(
            f"No handler bound for: {', '.join(missing)}",
            "MISSING_HANDLER", ErrorCategory.CONFIGURATION,
            ErrorSeverity.CRITICAL, ErrorContext(api_name=api_name),
        )
        self.missing = missing


class UnknownOperationError(RemotingError):
    """A binding or documentation entry names an undeclared operation."""
    def __init__(self, api_name: str, operation_name: str):
        super().__init__(
            f"API '{api_name}' declares no operation '{operation_name}'",
            "UNKNOWN_OPERATION", ErrorCategory.CONFIGURATION,
            ErrorSeverity.CRITICAL,
            ErrorContext(api_name=api_name, operation_name=operation_name),
        )


class ContractAlreadyRegisteredError(RemotingError):
    """A registry holds exactly one contract."""
    def __init__(self, api_name: str):
        super().__init__(
            f"Registry already holds contract '{api_name}'",
            "CONTRACT_ALREADY_REGISTERED", ErrorCategory.CONFIGURATION,
            ErrorSeverity.CRITICAL, ErrorContext(api_name=api_name),
        )


# ─── Request Errors (per call) ──────────────────────────────────

class UnknownRouteError(RemotingError):
    """Incoming path matches no registered operation."""
    def __init__(self, path: str, context: ErrorContext | None = None):
        ctx = context or ErrorContext()
        ctx.path = path
        super().__init__(
            f"No operation is routed at '{path}'",
            "UNKNOWN_ROUTE", ErrorCategory.RESOURCE_NOT_FOUND,
            ErrorSeverity.WARNING, ctx, 404,
        )


class MethodNotAllowedError(RemotingError):
    """Path is routed, but not for this HTTP method."""
    def __init__(self, method: str, path: str):
        super().__init__(
            f"Method {method} is not allowed at '{path}'",
            "METHOD_NOT_ALLOWED", ErrorCategory.VALIDATION,
            ErrorSeverity.WARNING, ErrorContext(path=path), 405,
        )


class MalformedPayloadError(RemotingError):
    """Payload does not parse or does not fit the declared shape."""
    def __init__(
        self, message: str, details: list[dict] | None = None,
        context: ErrorContext | None = None,
    ):
        super().__init__(
            message, "MALFORMED_PAYLOAD", ErrorCategory.VALIDATION,
            ErrorSeverity.WARNING, context, 400,
        )
        self.details = details or []

    def to_response(self) -> dict:
        response = super().to_response()
        response["error"]["details"] = self.details
        return response


class HandlerError(RemotingError):
    """Bound handler failed, domain error or unexpected fault alike."""
    def __init__(self, message: str, context: ErrorContext | None = None):
        super().__init__(
            message, "HANDLER_ERROR", ErrorCategory.HANDLER,
            ErrorSeverity.ERROR, context, 500,
        )


# ─── Client Errors ──────────────────────────────────────────────

class TransportError(RemotingError):
    """Network call never produced an HTTP response."""
    def __init__(self, message: str, context: ErrorContext | None = None):
        super().__init__(
            f"Transport failure: {message}",
            "TRANSPORT_ERROR", ErrorCategory.TRANSPORT,
            ErrorSeverity.CRITICAL, context, 503,
        )


class RemoteError(RemotingError):
    """Server answered with a failure envelope."""
    def __init__(
        self, message: str, status_code: int, remote_code: str | None = None,
        context: ErrorContext | None = None,
    ):
        super().__init__(
            message, "REMOTE_ERROR", ErrorCategory.REMOTE,
            ErrorSeverity.ERROR, context, status_code,
        )
        self.status_code = status_code
        self.remote_code = remote_code
