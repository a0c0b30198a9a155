"""Contract Registry — the one declared table of remote operations for an API.

Invariants:
    - OperationDescriptor and ApiContract are frozen: never mutated after declaration
    - Operation names are unique within a contract (DuplicateOperationError otherwise)
    - Every name forms a valid route; routes never collide within a registry
    - A registry holds exactly one contract and is read-only after register()

Design Decisions:
    - Explicit descriptor table over interface reflection: contract, routes,
      dispatch and docs are all driven by this one data structure
    - Routes precomputed at registration: resolve() is a dict lookup, and a
      colliding custom route builder fails at startup instead of at request time
"""

from dataclasses import dataclass, field
from typing import Any

from remoting.core.errors import (
    ContractAlreadyRegisteredError,
    DuplicateOperationError,
    InvalidIdentifierError,
    UnknownOperationError,
    UnknownRouteError,
)
from remoting.core.domain_types import RouteBuilder
from remoting.core.routes import build_route, validate_identifier
from remoting.core.shapes import NO_INPUT, NoInput, Shape


@dataclass(frozen=True)
class OperationDescriptor:
    """Name plus input/output shape of one remote-callable function.

    input_type=None declares a no-argument operation.
    """
    name: str
    input_type: Any = None
    output_type: Any = None
    input_shape: Shape | NoInput = field(init=False, repr=False, compare=False)
    output_shape: Shape = field(init=False, repr=False, compare=False)

    def __post_init__(self):
        object.__setattr__(
            self, "input_shape",
            NO_INPUT if self.input_type is None else Shape(self.input_type),
        )
        object.__setattr__(self, "output_shape", Shape(self.output_type))

    @property
    def takes_input(self) -> bool:
        return self.input_type is not None


@dataclass(frozen=True)
class ApiContract:
    """Ordered set of operations for one logical API."""
    api_name: str
    operations: tuple[OperationDescriptor, ...] = ()

    def __post_init__(self):
        object.__setattr__(self, "operations", tuple(self.operations))

    @property
    def operation_names(self) -> list[str]:
        return [op.name for op in self.operations]


class ContractRegistry:
    """Holds one registered ApiContract and its precomputed routes."""

    def __init__(self, route_builder: RouteBuilder = build_route):
        self._route_builder = route_builder
        self._contract: ApiContract | None = None
        self._by_name: dict[str, OperationDescriptor] = {}
        self._by_route: dict[str, OperationDescriptor] = {}
        self._route_of: dict[str, str] = {}

    @classmethod
    def from_contract(
        cls, contract: ApiContract, route_builder: RouteBuilder = build_route,
    ) -> "ContractRegistry":
        registry = cls(route_builder)
        registry.register(contract)
        return registry

    def register(self, contract: ApiContract) -> ApiContract:
        """Validate and store the contract. Nothing is stored on error."""
        if self._contract is not None:
            raise ContractAlreadyRegisteredError(self._contract.api_name)
        validate_identifier(contract.api_name)

        by_name: dict[str, OperationDescriptor] = {}
        for op in contract.operations:
            validate_identifier(op.name)
            if op.name in by_name:
                raise DuplicateOperationError(contract.api_name, op.name)
            by_name[op.name] = op

        route_of = {
            name: self._route_builder(contract.api_name, name)
            for name in by_name
        }
        by_route = {route: by_name[name] for name, route in route_of.items()}
        if len(by_route) != len(by_name):
            raise InvalidIdentifierError(
                contract.api_name, "route builder produced colliding routes",
            )

        self._by_name = by_name
        self._route_of = route_of
        self._by_route = by_route
        self._contract = contract
        return contract

    @property
    def contract(self) -> ApiContract:
        if self._contract is None:
            raise RuntimeError("No contract registered")
        return self._contract

    @property
    def api_name(self) -> str:
        return self.contract.api_name

    def describe(self) -> tuple[OperationDescriptor, ...]:
        """Descriptors in declaration order."""
        return self.contract.operations

    def get(self, operation_name: str) -> OperationDescriptor:
        op = self._by_name.get(operation_name)
        if op is None:
            raise UnknownOperationError(self.api_name, operation_name)
        return op

    def route_for(self, operation_name: str) -> str:
        self.get(operation_name)
        return self._route_of[operation_name]

    def resolve(self, path: str) -> OperationDescriptor:
        """Match an incoming path to its operation."""
        op = self._by_route.get(path)
        if op is None:
            raise UnknownRouteError(path)
        return op

    def routes(self) -> dict[str, OperationDescriptor]:
        return dict(self._by_route)
