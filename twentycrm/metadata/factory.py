"""Build metadata models from ``metadata/objects`` discovery payloads."""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

from pydantic import ValidationError

from ..enums import FieldType, RelationType
from ..utils.errors import MetadataParseError
from .models import EntityDefinition, EnumOption, FieldMetadata, RelationMetadata, SelectField

logger = logging.getLogger(__name__)


def _parse_field_type(raw: Any) -> FieldType:
    try:
        return FieldType(raw or "TEXT")
    except ValueError as exc:
        raise MetadataParseError(f"Unknown field type: {raw}") from exc


def field_from_dict(data: Dict[str, Any]) -> FieldMetadata:
    """Create field metadata from one discovery field entry.

    SELECT and MULTI_SELECT fields become :class:`SelectField` with their
    options kept in payload order.

    Raises:
        MetadataParseError: If the name is missing, the type is unknown or the
            payload does not validate.
    """
    name = data.get("name")
    if not name:
        raise MetadataParseError("Field payload has no name")
    field_type = _parse_field_type(data.get("type"))

    kwargs: Dict[str, Any] = {
        "id": data.get("id") or "",
        "name": name,
        "type": field_type,
        "label": data.get("label") or "",
        "object_metadata_id": data.get("objectMetadataId") or "",
        "is_nullable": data.get("isNullable", True) is not False,
        "description": data.get("description"),
        "icon": data.get("icon"),
        "default_value": data.get("defaultValue"),
        "is_custom": bool(data.get("isCustom", False)),
        "is_active": data.get("isActive", True) is not False,
        "is_system": bool(data.get("isSystem", False)),
    }

    try:
        if field_type.is_select:
            options = data.get("options") or []
            if not isinstance(options, list):
                options = []
            kwargs["options"] = tuple(
                EnumOption.from_dict(option) for option in options if isinstance(option, dict)
            )
            return SelectField(**kwargs)
        return FieldMetadata(**kwargs)
    except ValidationError as exc:
        raise MetadataParseError(f"Invalid metadata for field '{name}': {exc}") from exc


def _sub_object(relation: Dict[str, Any], key: str, name: str) -> Dict[str, Any]:
    value = relation.get(key)
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise MetadataParseError(f"Relation '{name}' has a malformed {key}: {value!r}")
    return value


def relation_from_dict(data: Dict[str, Any]) -> Optional[RelationMetadata]:
    """Create relation metadata from a RELATION field entry.

    Returns None when the payload carries no ``relation`` object.
    """
    relation = data.get("relation")
    if not isinstance(relation, dict):
        return None

    name = data.get("name")
    if not name:
        raise MetadataParseError("Relation payload has no field name")

    try:
        relation_type = RelationType(relation.get("type"))
    except ValueError as exc:
        raise MetadataParseError(f"Unknown relation type for '{name}': {relation.get('type')}") from exc

    source = _sub_object(relation, "sourceObjectMetadata", name)
    target = _sub_object(relation, "targetObjectMetadata", name)
    target_field = _sub_object(relation, "targetFieldMetadata", name)

    target_object_name = target.get("nameSingular")
    if not target_object_name:
        raise MetadataParseError(f"Relation '{name}' has no target object")

    return RelationMetadata(
        name=name,
        label=data.get("label") or "",
        type=relation_type,
        source_object_name=source.get("nameSingular") or "",
        target_object_name=target_object_name,
        target_field_name=target_field.get("name") or "",
        is_nullable=data.get("isNullable", True) is not False,
        is_system=bool(data.get("isSystem", False)),
        is_active=data.get("isActive", True) is not False,
        is_custom=bool(data.get("isCustom", False)),
    )


def definition_from_dict(object_data: Dict[str, Any]) -> Optional[EntityDefinition]:
    """Create an entity definition from one discovery object entry.

    Malformed fields and relations are logged and skipped so one bad field
    does not hide the whole object. Returns None when the object has no
    singular or plural name.
    """
    object_name = object_data.get("nameSingular")
    object_name_plural = object_data.get("namePlural")
    if not object_name or not object_name_plural:
        return None

    fields: List[FieldMetadata] = []
    relations: List[RelationMetadata] = []
    seen = set()

    raw_fields = object_data.get("fields")
    if not isinstance(raw_fields, list):
        raw_fields = []

    for field_data in raw_fields:
        if not isinstance(field_data, dict) or not field_data.get("name"):
            continue
        field_data = {**field_data, "objectMetadataId": object_data.get("id") or ""}

        try:
            field = field_from_dict(field_data)
        except MetadataParseError as exc:
            logger.warning(
                "Skipping malformed field",
                extra={"object": object_name, "field": field_data.get("name"), "error": str(exc)},
            )
            continue
        if field.name in seen:
            logger.warning(
                "Skipping duplicate field",
                extra={"object": object_name, "field": field.name},
            )
            continue
        seen.add(field.name)
        fields.append(field)

        if field.type.is_relation:
            try:
                relation = relation_from_dict(field_data)
            except (MetadataParseError, ValidationError) as exc:
                logger.warning(
                    "Skipping malformed relation",
                    extra={"object": object_name, "field": field.name, "error": str(exc)},
                )
                continue
            if relation is not None:
                relations.append(relation)

    return EntityDefinition.build(
        object_name=object_name,
        object_name_plural=object_name_plural,
        fields=fields,
        relations=relations,
    )
