"""Documentation Generator — self-describing model of a registered contract.

Invariants:
    - Every declared operation appears exactly once, in declaration order
    - Operations without an entry get empty alias/description (never omitted)
    - An entry naming an undeclared operation raises UnknownOperationError
    - Pure and read-only: the same inputs always produce an equal document

Design Decisions:
    - Sections carry route + input/output JSON schema so the document is usable
      by machines as well as humans
    - Docs builder is immutable (each call returns a new entry): entries can be
      declared inline in a list, like the Todos server does
"""

from dataclasses import dataclass, field, replace
from typing import Any, Iterable, Mapping

from remoting.core.contract import ApiContract, ContractRegistry
from remoting.core.errors import UnknownOperationError


@dataclass(frozen=True)
class DocumentationEntry:
    """Human-readable metadata for one operation."""
    operation_name: str
    alias: str = ""
    description: str = ""

    def with_alias(self, alias: str) -> "DocumentationEntry":
        return replace(self, alias=alias)

    def with_description(self, description: str) -> "DocumentationEntry":
        return replace(self, description=description)


@dataclass(frozen=True)
class DocumentationSection:
    operation_name: str
    alias: str
    description: str
    route: str
    input_schema: dict[str, Any] = field(default_factory=dict)
    output_schema: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class ApiDocumentation:
    api_name: str
    title: str
    sections: tuple[DocumentationSection, ...]


class Docs:
    """Fluent entry builder bound to one contract.

    docs = Docs(contract)
    entry = docs.route("getTodos").with_alias("Get all todos")
    """

    def __init__(self, contract: ApiContract):
        self._contract = contract
        self._names = set(contract.operation_names)

    def route(self, operation_name: str) -> DocumentationEntry:
        if operation_name not in self._names:
            raise UnknownOperationError(self._contract.api_name, operation_name)
        return DocumentationEntry(operation_name)


def entries_by_operation(
    entries: Iterable[DocumentationEntry],
) -> dict[str, DocumentationEntry]:
    """Index entries by operation name. Later entries win."""
    return {entry.operation_name: entry for entry in entries}


def generate_documentation(
    source: ApiContract | ContractRegistry,
    entries: Mapping[str, DocumentationEntry] | None = None,
    title: str | None = None,
) -> ApiDocumentation:
    """Build one section per declared operation."""
    registry = (
        source if isinstance(source, ContractRegistry)
        else ContractRegistry.from_contract(source)
    )
    contract = registry.contract
    entries = entries or {}
    declared = set(contract.operation_names)
    for name in entries:
        if name not in declared:
            raise UnknownOperationError(contract.api_name, name)

    sections = []
    for op in registry.describe():
        entry = entries.get(op.name) or DocumentationEntry(op.name)
        sections.append(DocumentationSection(
            operation_name=op.name,
            alias=entry.alias,
            description=entry.description,
            route=registry.route_for(op.name),
            input_schema=op.input_shape.json_schema(),
            output_schema=op.output_shape.json_schema(),
        ))

    return ApiDocumentation(
        api_name=contract.api_name,
        title=title or contract.api_name,
        sections=tuple(sections),
    )
