"""Contract Registry — verifies registration, lookup and immutability.

Tests cover:
    - describe() keeps declaration order
    - Duplicate names → DuplicateOperationError, nothing registered
    - Invalid names → InvalidIdentifierError
    - A registry accepts one contract only
    - resolve() of an unknown path → UnknownRouteError (404)
    - Colliding custom route builder rejected at registration
    - Descriptors and contracts are frozen
"""

import dataclasses

import pytest

from remoting.core.contract import ApiContract, ContractRegistry, OperationDescriptor
from remoting.core.errors import (
    ContractAlreadyRegisteredError,
    DuplicateOperationError,
    InvalidIdentifierError,
    UnknownOperationError,
    UnknownRouteError,
)


def _contract(*names: str, api_name: str = "Todos") -> ApiContract:
    return ApiContract(
        api_name=api_name,
        operations=[OperationDescriptor(name, output_type=str) for name in names],
    )


def test_register_and_describe_preserves_order():
    registry = ContractRegistry()
    registry.register(_contract("getTodos", "addTodo", "deleteTodo"))
    assert [op.name for op in registry.describe()] == [
        "getTodos", "addTodo", "deleteTodo",
    ]
    assert registry.api_name == "Todos"


def test_duplicate_operation_names_rejected():
    registry = ContractRegistry()
    with pytest.raises(DuplicateOperationError) as exc_info:
        registry.register(_contract("getTodos", "getTodos"))
    assert exc_info.value.context.operation_name == "getTodos"
    with pytest.raises(RuntimeError):
        registry.contract


def test_invalid_operation_name_rejected():
    with pytest.raises(InvalidIdentifierError):
        ContractRegistry.from_contract(_contract("get/Todos"))


def test_invalid_api_name_rejected():
    with pytest.raises(InvalidIdentifierError):
        ContractRegistry.from_contract(_contract("getTodos", api_name=""))


def test_second_register_rejected():
    registry = ContractRegistry.from_contract(_contract("getTodos"))
    with pytest.raises(ContractAlreadyRegisteredError):
        registry.register(_contract("addTodo", api_name="Other"))
    assert registry.api_name == "Todos"


def test_resolve_known_route():
    registry = ContractRegistry.from_contract(_contract("getTodos", "addTodo"))
    assert registry.resolve("/api/Todos/addTodo").name == "addTodo"
    assert registry.route_for("getTodos") == "/api/Todos/getTodos"


def test_resolve_unknown_route_raises_not_found():
    registry = ContractRegistry.from_contract(_contract("getTodos"))
    with pytest.raises(UnknownRouteError) as exc_info:
        registry.resolve("/api/Todos/nope")
    assert exc_info.value.http_status == 404
    assert exc_info.value.context.path == "/api/Todos/nope"


def test_get_unknown_operation_raises():
    registry = ContractRegistry.from_contract(_contract("getTodos"))
    with pytest.raises(UnknownOperationError):
        registry.get("nope")


def test_custom_route_builder_used_for_routes():
    registry = ContractRegistry.from_contract(
        _contract("getTodos"), route_builder=lambda api, op: f"/rpc/{api}.{op}",
    )
    assert set(registry.routes()) == {"/rpc/Todos.getTodos"}


def test_colliding_route_builder_rejected():
    with pytest.raises(InvalidIdentifierError):
        ContractRegistry.from_contract(
            _contract("getTodos", "addTodo"), route_builder=lambda api, op: "/same",
        )


def test_routes_returns_copy():
    registry = ContractRegistry.from_contract(_contract("getTodos"))
    registry.routes().clear()
    assert len(registry.routes()) == 1


def test_descriptor_and_contract_are_frozen():
    op = OperationDescriptor("getTodos", output_type=list[str])
    contract = ApiContract("Todos", [op])
    with pytest.raises(dataclasses.FrozenInstanceError):
        op.name = "other"
    with pytest.raises(dataclasses.FrozenInstanceError):
        contract.api_name = "Other"
    assert isinstance(contract.operations, tuple)


def test_takes_input_follows_input_type():
    assert not OperationDescriptor("getTodos", output_type=list[str]).takes_input
    assert OperationDescriptor("addTodo", input_type=str, output_type=str).takes_input


def test_operation_name_unreachable_over_http_rejected():
    registry = ContractRegistry()
    with pytest.raises(InvalidIdentifierError) as exc_info:
        registry.register(_contract("getTodos", "a?b"))
    assert exc_info.value.identifier == "a?b"
    with pytest.raises(RuntimeError):
        registry.contract
