"""Python type hints for generated accessors."""

from __future__ import annotations

from typing import Optional

from ..codecs.registry import CodecRegistry, default_registry
from ..enums import FieldType
from ..metadata.models import FieldMetadata

SCALAR_TYPES = {
    FieldType.TEXT: "str",
    FieldType.UUID: "str",
    FieldType.NUMBER: "int",
    FieldType.RATING: "int",
    FieldType.BOOLEAN: "bool",
    FieldType.DATE: "str",
    FieldType.DATE_TIME: "str",
    FieldType.SELECT: "str",
    FieldType.RELATION: "str",
}


def base_type(field_type: FieldType, registry: Optional[CodecRegistry] = None) -> str:
    """Codec value class name for composite types, a builtin or ``Any`` otherwise."""
    registry = registry or default_registry()
    value_type = registry.value_type(field_type)
    if value_type:
        return value_type
    return SCALAR_TYPES.get(field_type, "Any")


def python_type(field: FieldMetadata, registry: Optional[CodecRegistry] = None) -> str:
    hint = base_type(field.type, registry)
    if field.is_nullable and hint != "Any":
        return f"Optional[{hint}]"
    return hint
