"""Domain Types — names and states shared by the router, dispatcher and proxy.

Invariants:
    - CallState lists every state a dispatched call can reach; SENT and FAILED are terminal

Design Decisions:
    - str Enum: call state serializes into JSON logs without custom encoders
"""

from enum import Enum
from typing import Any, Awaitable, Callable, Union


# ─── Callables ───────────────────────────────────────────────────

RouteBuilder = Callable[[str, str], str]

# Sync or async: the Dispatcher awaits whatever comes back if it is awaitable
Handler = Callable[..., Union[Any, Awaitable[Any]]]


# ─── Enums ───────────────────────────────────────────────────────

class CallState(str, Enum):
    """Lifecycle of one dispatched call."""
    RECEIVED = "received"
    RESOLVED = "resolved"
    DECODED = "decoded"
    INVOKED = "invoked"
    ENCODED = "encoded"
    SENT = "sent"
    FAILED = "failed"

    @property
    def is_terminal(self) -> bool:
        return self in (CallState.SENT, CallState.FAILED)
