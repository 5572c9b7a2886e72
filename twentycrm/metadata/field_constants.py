"""Which fields client code may write.

The updatability rule lives here only. The generator uses it to decide which
setters to emit and the CRUD service uses it to build update payloads.
"""

from __future__ import annotations

from typing import Any, Callable, Dict, Mapping, Optional

from .models import FieldMetadata

# Auto-managed timestamp and audit fields. The API sets these itself even
# though their metadata may report isSystem=false.
AUTO_MANAGED_FIELDS = frozenset({"createdAt", "updatedAt", "deletedAt", "createdBy"})


def is_auto_managed(field_name: str) -> bool:
    return field_name in AUTO_MANAGED_FIELDS


def is_updatable(field: FieldMetadata) -> bool:
    """A field is updatable unless it is a system field or auto-managed."""
    if field.is_system:
        return False
    return not is_auto_managed(field.name)


def filter_updatable_fields(
    data: Mapping[str, Any],
    fields: Mapping[str, FieldMetadata],
    name_of: Optional[Callable[[str], str]] = None,
) -> Dict[str, Any]:
    """Keep only the entries of ``data`` that may be sent in an update.

    Args:
        data: Payload keyed by field name (wire names allowed when
            ``name_of`` maps them back to entity names).
        fields: Field metadata keyed by entity field name.
        name_of: Optional callable mapping a payload key to its entity field
            name, e.g. ``EntityDefinition.map_api_to_field``.

    Returns:
        A new dict without auto-managed, system or unknown fields.
    """
    filtered: Dict[str, Any] = {}
    for key, value in data.items():
        field_name = name_of(key) if name_of else key
        field = fields.get(field_name)
        if field is None:
            continue
        if not is_updatable(field):
            continue
        filtered[key] = value
    return filtered
