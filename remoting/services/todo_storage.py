"""Todo Storage — in-memory list behind the Todos API handlers.

Invariants:
    - add_todo() rejects blank descriptions with TodoRejectedError; list unchanged
    - delete_todo() of an unknown id raises TodoNotFoundError; list unchanged
    - All access serialized by one lock: concurrent deletes of the same id
      succeed once and fail once

Design Decisions:
    - threading.Lock over asyncio.Lock: handlers may be sync, and every
      critical section is a few list operations with no await inside
    - Returns copies: callers never hold a live reference to the list
      (state is lost on restart)
"""

import logging
import threading

from remoting.schemas.todo import Todo, is_valid_description

logger = logging.getLogger(__name__)

SEED_DESCRIPTIONS = (
    "Create new SAFE project",
    "Write your app",
    "Ship it !!!",
)


class TodoRejectedError(ValueError):
    pass


class TodoNotFoundError(LookupError):
    pass


class TodoStorage:
    """Thread-safe in-memory todo list."""

    def __init__(self, todos: list[Todo] | None = None):
        self._todos: list[Todo] = list(todos or [])
        self._lock = threading.Lock()

    @classmethod
    def seeded(cls) -> "TodoStorage":
        storage = cls()
        for description in SEED_DESCRIPTIONS:
            storage.add_todo(Todo.create(description))
        return storage

    def get_todos(self) -> list[Todo]:
        with self._lock:
            return list(self._todos)

    def add_todo(self, todo: Todo) -> Todo:
        if not is_valid_description(todo.description):
            raise TodoRejectedError("Invalid todo")
        with self._lock:
            self._todos.append(todo)
        logger.info(f"Added todo {todo.id}")
        return todo

    def delete_todo(self, todo_id: str) -> str:
        with self._lock:
            for index, todo in enumerate(self._todos):
                if todo.id == todo_id:
                    del self._todos[index]
                    break
            else:
                raise TodoNotFoundError(
                    f"Unable to delete todo with GUID: {todo_id}",
                )
        logger.info(f"Deleted todo {todo_id}")
        return todo_id
