"""Documentation Schemas — response model of the docs endpoint.

Invariants:
    - Mirrors core.documentation dataclasses field-for-field (from_attributes)
"""

from typing import Any

from pydantic import BaseModel, ConfigDict


class DocumentationSectionResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    operation_name: str
    alias: str
    description: str
    route: str
    input_schema: dict[str, Any]
    output_schema: dict[str, Any]


class ApiDocumentationResponse(BaseModel):
    """Operation name / alias / description triples plus wire details."""
    model_config = ConfigDict(from_attributes=True)

    api_name: str
    title: str
    sections: list[DocumentationSectionResponse]
