"""Shape Descriptors — explicit JSON codecs for operation inputs and outputs.

Invariants:
    - Every decode failure (bad JSON, wrong shape) raises MalformedPayloadError
    - encode() validates before dumping: a value that does not fit the shape
      raises MalformedPayloadError instead of producing a half-right payload
    - NO_INPUT operations accept an empty body or JSON null, nothing else

Design Decisions:
    - pydantic TypeAdapter over hand-written codecs: any annotation
      (BaseModel, list[Model], str, UUID) gets validation + JSON schema for free
    - Shapes built once per descriptor; TypeAdapter construction is not cheap
"""

from typing import Any

from pydantic import TypeAdapter, ValidationError

from remoting.core.errors import MalformedPayloadError

_EMPTY_BODIES = (b"", b"null")


def _validation_details(exc: ValidationError) -> list[dict]:
    return [
        {
            "field": ".".join(str(loc) for loc in e["loc"]),
            "message": e["msg"],
            "type": e["type"],
        }
        for e in exc.errors()
    ]


class Shape:
    """JSON codec for one type annotation."""

    def __init__(self, annotation: Any):
        self.annotation = annotation
        self._adapter = TypeAdapter(annotation)

    def __repr__(self) -> str:
        return f"Shape({getattr(self.annotation, '__name__', self.annotation)!r})"

    def decode(self, raw: bytes | str) -> Any:
        """Parse and validate a JSON payload."""
        try:
            return self._adapter.validate_json(raw)
        except ValidationError as e:
            raise MalformedPayloadError(
                f"Payload does not match {self!r}",
                details=_validation_details(e),
            ) from e

    def validate(self, value: Any) -> Any:
        """Coerce a Python value into the shape (dicts become models, etc)."""
        try:
            return self._adapter.validate_python(value)
        except ValidationError as e:
            raise MalformedPayloadError(
                f"Value does not match {self!r}",
                details=_validation_details(e),
            ) from e

    def encode(self, value: Any) -> bytes:
        return self._adapter.dump_json(self.validate(value))

    def to_jsonable(self, value: Any) -> Any:
        return self._adapter.dump_python(self.validate(value), mode="json")

    def json_schema(self) -> dict:
        return self._adapter.json_schema()


class NoInput:
    """Input shape of operations called without an argument."""

    annotation = None

    def __repr__(self) -> str:
        return "NoInput()"

    def decode(self, raw: bytes | str) -> None:
        body = raw.encode() if isinstance(raw, str) else raw
        if body.strip() not in _EMPTY_BODIES:
            raise MalformedPayloadError(
                "Operation takes no argument but a payload was sent",
            )
        return None

    def json_schema(self) -> dict:
        return {"type": "null"}


NO_INPUT = NoInput()
