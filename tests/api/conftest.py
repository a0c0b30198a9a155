"""API test fixtures — in-process FastAPI app + httpx client + Todos proxy.

Invariants:
    - Every test gets a fresh, empty TodoStorage
    - The proxy talks to the app through ASGITransport: real HTTP envelopes,
      no sockets

Design Decisions:
    - Proxy shares the test client: closing it is the client fixture's job
"""

import pytest
from httpx import ASGITransport, AsyncClient

from remoting.config import Settings
from remoting.core.contract import ContractRegistry
from remoting.infrastructure.remote_client import RemoteProxy
from remoting.main import create_app
from remoting.services.todo_storage import TodoStorage
from remoting.services.todos_api import TODOS_CONTRACT


@pytest.fixture
def storage():
    return TodoStorage()


@pytest.fixture
def app(storage):
    return create_app(Settings(seed_todos=False, log_format="text"), storage=storage)


@pytest.fixture
async def client(app):
    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test",
    ) as c:
        yield c


@pytest.fixture
def proxy(client):
    return RemoteProxy(ContractRegistry.from_contract(TODOS_CONTRACT), client=client)
