"""Remoting Routes — verifies the HTTP surface of the Todos API.

Tests cover:
    - POST per operation at /api/Todos/{operation}
    - Handler failures → 500 HANDLER_ERROR envelope with the handler's message
    - Malformed bodies → 400, unknown operations → 404
    - Routing misses and unexpected exceptions use the same error envelope
    - GET /api/Todos/docs returns every operation with alias/description
    - Docs path colliding with an operation route aborts app creation
"""

import pytest
from httpx import ASGITransport, AsyncClient

from remoting.config import Settings
from remoting.core.errors import InvalidIdentifierError
from remoting.main import create_app
from remoting.schemas.todo import Todo


async def test_get_todos_returns_list(client, storage):
    storage.add_todo(Todo(id="a", description="one"))
    res = await client.post("/api/Todos/getTodos")
    assert res.status_code == 200
    assert res.json() == [{"id": "a", "description": "one"}]


async def test_add_todo_returns_argument(client, storage):
    res = await client.post(
        "/api/Todos/addTodo", json={"id": "x", "description": "buy milk"},
    )
    assert res.status_code == 200
    assert res.json() == {"id": "x", "description": "buy milk"}
    assert storage.get_todos() == [Todo(id="x", description="buy milk")]


async def test_add_invalid_todo_is_handler_error(client, storage):
    res = await client.post("/api/Todos/addTodo", json={"id": "x", "description": " "})
    assert res.status_code == 500
    error = res.json()["error"]
    assert error["code"] == "HANDLER_ERROR"
    assert error["message"] == "Invalid todo"
    assert storage.get_todos() == []


async def test_delete_unknown_todo_is_handler_error(client):
    res = await client.post("/api/Todos/deleteTodo", json="nope")
    assert res.status_code == 500
    assert res.json()["error"]["message"] == "Unable to delete todo with GUID: nope"


async def test_malformed_body_is_bad_request(client):
    res = await client.post("/api/Todos/addTodo", content=b"{not json")
    assert res.status_code == 400
    assert res.json()["error"]["code"] == "MALFORMED_PAYLOAD"


async def test_unknown_operation_is_not_found(client):
    res = await client.post("/api/Todos/renameTodo", json="x")
    assert res.status_code == 404
    error = res.json()["error"]
    assert error["code"] == "UNKNOWN_ROUTE"
    assert error["context"]["path"] == "/api/Todos/renameTodo"


async def test_docs_endpoint_lists_every_operation(client):
    res = await client.get("/api/Todos/docs")
    assert res.status_code == 200
    body = res.json()
    assert body["title"] == "Todos Api"
    sections = {s["operation_name"]: s for s in body["sections"]}
    assert list(sections) == ["getTodos", "addTodo", "deleteTodo"]
    assert sections["addTodo"]["alias"] == "Add new todo"
    assert sections["addTodo"]["description"] == "Adds a new todo item to the list"
    assert sections["deleteTodo"]["route"] == "/api/Todos/deleteTodo"


async def test_health_lists_served_apis(client):
    res = await client.get("/api/v1/health/")
    assert res.status_code == 200
    assert res.json()["apis"] == ["Todos"]


def test_docs_path_colliding_with_operation_rejected():
    settings = Settings(docs_path_template="/api/{api_name}/getTodos", seed_todos=False)
    with pytest.raises(InvalidIdentifierError):
        create_app(settings)


def test_seeded_app_starts_with_starter_todos():
    app = create_app(Settings(seed_todos=True))
    assert len(app.state.storage.get_todos()) == 3


async def test_get_on_operation_route_is_method_not_allowed(client):
    res = await client.get("/api/Todos/getTodos")
    assert res.status_code == 405
    assert res.headers["allow"] == "POST"
    error = res.json()["error"]
    assert error["code"] == "METHOD_NOT_ALLOWED"
    assert error["context"]["path"] == "/api/Todos/getTodos"


async def test_get_on_unknown_path_uses_unknown_route_envelope(client):
    res = await client.get("/api/Todos/nowhere")
    assert res.status_code == 404
    error = res.json()["error"]
    assert error["code"] == "UNKNOWN_ROUTE"
    assert error["category"] == "resource_not_found"
    assert error["context"]["path"] == "/api/Todos/nowhere"


async def test_post_on_docs_path_is_unknown_route(client):
    res = await client.post("/api/Todos/docs")
    assert res.status_code == 404
    assert res.json()["error"]["code"] == "UNKNOWN_ROUTE"


async def test_unexpected_exception_hides_details(app):
    @app.post("/explode")
    async def explode():
        raise RuntimeError("secret internals")

    transport = ASGITransport(app=app, raise_app_exceptions=False)
    async with AsyncClient(transport=transport, base_url="http://test") as c:
        res = await c.post("/explode")
    assert res.status_code == 500
    error = res.json()["error"]
    assert error["code"] == "INTERNAL_ERROR"
    assert error["message"] == "An unexpected error occurred"
    assert "secret" not in res.text
