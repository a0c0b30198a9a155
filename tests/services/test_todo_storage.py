"""Todo Storage — verifies the in-memory list behind the Todos API.

Tests cover:
    - Seeded storage holds the three starter todos in order
    - Blank descriptions rejected with "Invalid todo"; list unchanged
    - Unknown id delete fails with the GUID message; list unchanged
    - Concurrent deletes of one id: exactly one succeeds
"""

from concurrent.futures import ThreadPoolExecutor

import pytest

from remoting.schemas.todo import Todo
from remoting.services.todo_storage import (
    SEED_DESCRIPTIONS,
    TodoNotFoundError,
    TodoRejectedError,
    TodoStorage,
)


def test_seeded_storage_holds_starter_todos():
    todos = TodoStorage.seeded().get_todos()
    assert [t.description for t in todos] == list(SEED_DESCRIPTIONS)


def test_add_valid_todo_returns_it():
    storage = TodoStorage()
    todo = Todo(id="x", description="buy milk")
    assert storage.add_todo(todo) == todo
    assert storage.get_todos() == [todo]


@pytest.mark.parametrize("description", ["", "   "])
def test_add_blank_todo_rejected(description):
    storage = TodoStorage()
    with pytest.raises(TodoRejectedError, match="Invalid todo"):
        storage.add_todo(Todo(id="x", description=description))
    assert storage.get_todos() == []


def test_delete_existing_todo_returns_id():
    storage = TodoStorage([Todo(id="x", description="buy milk")])
    assert storage.delete_todo("x") == "x"
    assert storage.get_todos() == []


def test_delete_unknown_todo_leaves_list_unchanged():
    todo = Todo(id="x", description="buy milk")
    storage = TodoStorage([todo])
    with pytest.raises(TodoNotFoundError) as exc_info:
        storage.delete_todo("nope")
    assert str(exc_info.value) == "Unable to delete todo with GUID: nope"
    assert storage.get_todos() == [todo]


def test_get_todos_returns_copy():
    storage = TodoStorage([Todo(id="x", description="buy milk")])
    storage.get_todos().clear()
    assert len(storage.get_todos()) == 1


def test_concurrent_deletes_succeed_once():
    storage = TodoStorage([Todo(id="x", description="buy milk")])

    def delete():
        try:
            storage.delete_todo("x")
            return True
        except TodoNotFoundError:
            return False

    with ThreadPoolExecutor(max_workers=8) as pool:
        outcomes = list(pool.map(lambda _: delete(), range(8)))
    assert outcomes.count(True) == 1
    assert storage.get_todos() == []
