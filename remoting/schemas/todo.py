"""Todo Schema — the item shared by the Todos contract on both sides of the wire.

Invariants:
    - id is a non-empty string; new items get a uuid4 string
    - is_valid_description(): non-blank after stripping

Design Decisions:
    - Validity checked by storage, not the schema: an invalid description must
      reach the handler so it fails as a handler error, like a missing id does
"""

from uuid import uuid4

from pydantic import BaseModel, Field


def is_valid_description(description: str) -> bool:
    return bool(description and description.strip())


class Todo(BaseModel):
    """A single todo item."""
    id: str = Field(default_factory=lambda: str(uuid4()), min_length=1)
    description: str

    @classmethod
    def create(cls, description: str) -> "Todo":
        return cls(description=description)
