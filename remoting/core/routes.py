"""Route Builder — pure mapping from (api, operation) to a wire path.

Invariants:
    - build_route() is deterministic and injective: no identifier may contain "/"
    - Identifiers use only URL-unreserved characters (letters, digits, "-", ".",
      "_", "~"): the path the client sends is the path the server matches
    - Casing of declared names is preserved on the wire
    - Empty identifiers are rejected (they would collapse two segments into one)

Design Decisions:
    - Plain functions over a class: the builder is swappable as any
      Callable[[str, str], str] (ADR: custom route builders)
    - Restrict instead of percent-encode: "?", "#", "%" and "{...}" would need
      quoting on the client and unquoting in the router's path templates
"""

import re

from remoting.core.errors import InvalidIdentifierError

PATH_SEPARATOR = "/"
DEFAULT_DOCS_TEMPLATE = "/api/{api_name}/docs"

_IDENTIFIER_PATTERN = re.compile(r"[A-Za-z0-9._~-]+")


def validate_identifier(identifier: str) -> str:
    """Return identifier unchanged, or raise InvalidIdentifierError."""
    if not identifier or not identifier.strip():
        raise InvalidIdentifierError(identifier, "must not be empty")
    if PATH_SEPARATOR in identifier:
        raise InvalidIdentifierError(
            identifier, f"must not contain '{PATH_SEPARATOR}'",
        )
    if not _IDENTIFIER_PATTERN.fullmatch(identifier):
        raise InvalidIdentifierError(
            identifier, "only letters, digits and '-', '.', '_', '~' are allowed",
        )
    if not identifier.strip("."):
        raise InvalidIdentifierError(identifier, "dot segments are normalized away")
    return identifier


def build_route(api_name: str, operation_name: str) -> str:
    """Default route: /api/{api_name}/{operation_name}."""
    validate_identifier(api_name)
    validate_identifier(operation_name)
    return f"/api/{api_name}/{operation_name}"


def build_docs_route(
    api_name: str, template: str = DEFAULT_DOCS_TEMPLATE,
) -> str:
    """Documentation endpoint path for an API."""
    validate_identifier(api_name)
    return template.format(api_name=api_name)
