"""Todos API — contract, handler bindings and docs for the demo todo list.

Invariants:
    - TODOS_CONTRACT is the single declaration both server and client build from
    - build_todo_handlers() binds exactly the declared operations
    - Handler failures surface as plain exceptions; the Dispatcher flattens them

Design Decisions:
    - Explicit dict of bindings: adding an operation requires editing this module
      (contract, binding and docs entry side by side)
"""

import httpx

from remoting.config import Settings, get_settings
from remoting.core.contract import ApiContract, ContractRegistry, OperationDescriptor
from remoting.core.documentation import Docs, DocumentationEntry, entries_by_operation
from remoting.core.domain_types import Handler
from remoting.schemas.todo import Todo
from remoting.infrastructure.remote_client import RemoteProxy
from remoting.services.todo_storage import TodoStorage

TODOS_API_NAME = "Todos"
TODOS_DOCS_TITLE = "Todos Api"

TODOS_CONTRACT = ApiContract(
    api_name=TODOS_API_NAME,
    operations=(
        OperationDescriptor("getTodos", input_type=None, output_type=list[Todo]),
        OperationDescriptor("addTodo", input_type=Todo, output_type=Todo),
        OperationDescriptor("deleteTodo", input_type=str, output_type=str),
    ),
)


def build_todo_handlers(storage: TodoStorage) -> dict[str, Handler]:
    """Bind every Todos operation to the storage."""
    return {
        "getTodos": storage.get_todos,
        "addTodo": storage.add_todo,
        "deleteTodo": storage.delete_todo,
    }


def build_todo_docs() -> dict[str, DocumentationEntry]:
    docs = Docs(TODOS_CONTRACT)
    return entries_by_operation([
        docs.route("getTodos")
        .with_alias("Get all todos")
        .with_description("Returns a list of all todos"),

        docs.route("addTodo")
        .with_alias("Add new todo")
        .with_description("Adds a new todo item to the list"),

        docs.route("deleteTodo")
        .with_alias("Delete a todo")
        .with_description("Removes a todo item from the list"),
    ])


def create_todos_proxy(
    settings: Settings | None = None, client: httpx.AsyncClient | None = None,
) -> RemoteProxy:
    """Client for a running Todos server, configured from settings."""
    settings = settings or get_settings()
    return RemoteProxy(
        ContractRegistry.from_contract(TODOS_CONTRACT),
        base_url=settings.api_base_url,
        client=client,
        timeout_seconds=settings.client_timeout_seconds,
    )
