"""Structured output schema normalization.

Callers describe the data they want back at one of three levels:

- a named template (``"product"``, ``"article"``, ...)
- a bare example object whose values are primitive type names or nested
  example objects, e.g. ``{"name": "string", "address": {"city": "string"}}``,
  optionally wrapped in a one-element list to ask for an array of them
- a full JSON Schema carrying a top-level ``type``

``normalize_schema`` turns all of them into the canonical JSON Schema the
API accepts. Property values are classified once into a small tagged union
and converted by a single recursive function over that union.

Normalization is idempotent: feeding the output back in returns it unchanged.
"""

import json
from dataclasses import dataclass
from typing import Any, Union

from browser_tasks.errors import SchemaValidationError
from browser_tasks.logging import get_logger
from browser_tasks.tasks.templates import SchemaTemplate, get_schema_template

logger = get_logger(__name__)

VALID_TYPES = ("object", "array", "string", "number", "boolean", "null")


@dataclass(frozen=True)
class PrimitiveName:
    """A bare type name such as ``"string"``."""

    type_name: str


@dataclass(frozen=True)
class NestedExample:
    """A plain example object without its own ``type`` key."""

    fields: dict[str, Any]


@dataclass(frozen=True)
class AlreadySchema:
    """Anything else; assumed to be a well-formed schema fragment."""

    fragment: Any


PropertySpec = Union[PrimitiveName, NestedExample, AlreadySchema]

SchemaSpec = Union[SchemaTemplate, str, dict[str, Any], list[Any]]


def classify_property(value: Any) -> PropertySpec:
    """Inspect a property value once and tag its shape."""
    if isinstance(value, str):
        return PrimitiveName(value)
    if isinstance(value, dict) and "type" not in value:
        return NestedExample(value)
    return AlreadySchema(value)


def property_to_schema(spec: PropertySpec) -> Any:
    """Convert a classified property into its JSON Schema fragment."""
    if isinstance(spec, PrimitiveName):
        return {"type": spec.type_name}
    if isinstance(spec, NestedExample):
        return _object_schema(spec.fields)
    return spec.fragment


def convert_properties(properties: dict[str, Any]) -> dict[str, Any]:
    """Convert every value of a properties mapping to a schema fragment."""
    return {
        key: property_to_schema(classify_property(value))
        for key, value in properties.items()
    }


def _object_schema(example: dict[str, Any]) -> dict[str, Any]:
    return {
        "type": "object",
        "properties": convert_properties(example),
        "required": list(example),
    }


def _parse_schema_text(text: str) -> Any:
    """Parse a JSON schema string, or resolve it as a template name."""
    stripped = text.strip()
    if not stripped:
        raise SchemaValidationError(
            "Structured output is enabled but no schema is provided. "
            "Please select a data template or provide a custom JSON schema.",
            error_code="SCHEMA-Missing",
        )
    if stripped[0] not in "{[":
        return get_schema_template(stripped)
    try:
        return json.loads(stripped)
    except json.JSONDecodeError as e:
        raise SchemaValidationError(
            f"The custom data format has invalid JSON syntax: {e.msg}. "
            "Please check your JSON format.",
            error_code="SCHEMA-InvalidJson",
            details={"line": e.lineno, "column": e.colno},
        ) from e


def _validate_declared_schema(schema: dict[str, Any]) -> None:
    declared = schema["type"]
    if declared not in VALID_TYPES:
        raise SchemaValidationError(
            f'The custom data format has an unknown type "{declared}". '
            f"Valid types are: {', '.join(VALID_TYPES)}",
            error_code="SCHEMA-UnknownType",
            details={"provided": declared, "valid_options": list(VALID_TYPES)},
        )
    if declared == "object" and schema.get("properties") is None:
        raise SchemaValidationError(
            'The custom data format object type must have a "properties" field. '
            "Please define the object structure.",
            error_code="SCHEMA-MissingProperties",
        )
    if declared == "object" and not isinstance(schema["properties"], dict):
        raise SchemaValidationError(
            'The "properties" field of an object schema must be a JSON object.',
            error_code="SCHEMA-InvalidProperties",
        )
    if declared == "array" and schema.get("items") is None:
        raise SchemaValidationError(
            'The custom data format array type must have an "items" field. '
            "Please define the array item structure.",
            error_code="SCHEMA-MissingItems",
        )


def normalize_schema(spec: SchemaSpec) -> dict[str, Any]:
    """Normalize a schema specification into canonical JSON Schema.

    Args:
        spec: A ``SchemaTemplate``, a template name, a JSON string, or an
            already-decoded dict or list

    Returns:
        Canonical JSON Schema (a new dict; the input is not modified)

    Raises:
        SchemaValidationError: If the input is not an object or array, is an
            empty array, has non-object array items, declares an unknown
            ``type``, or declares ``object``/``array`` without
            ``properties``/``items``
    """
    if isinstance(spec, SchemaTemplate):
        if spec is SchemaTemplate.CUSTOM:
            raise SchemaValidationError(
                "The custom template requires a schema. "
                "Please provide a custom JSON schema.",
                error_code="SCHEMA-Missing",
            )
        spec = get_schema_template(spec.value)
    elif isinstance(spec, str):
        spec = _parse_schema_text(spec)

    if isinstance(spec, list):
        if not spec:
            raise SchemaValidationError(
                "The custom data format array cannot be empty. Please provide "
                "at least one example object to define the structure.",
                error_code="SCHEMA-EmptyArray",
            )
        first = spec[0]
        if not isinstance(first, dict):
            raise SchemaValidationError(
                "The custom data format array items must be objects. "
                'Example: [{"name": "string", "age": "number"}]',
                error_code="SCHEMA-InvalidArrayItem",
            )
        return {"type": "array", "items": _object_schema(first)}

    if not isinstance(spec, dict):
        raise SchemaValidationError(
            "The custom data format must be a valid JSON object or array. "
            "Please check your JSON syntax.",
            error_code="SCHEMA-NotAnObject",
            details={"provided_type": type(spec).__name__},
        )

    if "type" not in spec:
        if not spec:
            raise SchemaValidationError(
                "The custom data format object is empty. Please define at "
                "least one field to extract.",
                error_code="SCHEMA-EmptyObject",
            )
        return _object_schema(spec)

    _validate_declared_schema(spec)
    if spec["type"] == "object":
        return {**spec, "properties": convert_properties(spec["properties"])}
    return dict(spec)
