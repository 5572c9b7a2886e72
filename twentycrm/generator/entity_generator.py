"""Render entity modules with baked-in metadata tables."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from jinja2 import StrictUndefined, Template

from ..codecs.registry import CodecRegistry, default_registry
from ..entity.runtime import Entity
from ..metadata.field_constants import is_updatable
from ..metadata.models import EntityDefinition, FieldMetadata
from ..utils.naming import pluralize, to_pascal_case, to_snake_case
from .templates import ENTITY_TEMPLATE
from .type_mapping import python_type

# Entity methods a generated accessor may replace without changing behaviour
_OVERRIDABLE = {"get_id", "set_id"}


def render_template(source: str, **context: Any) -> str:
    template = Template(
        source,
        undefined=StrictUndefined,
        trim_blocks=True,
        lstrip_blocks=True,
        keep_trailing_newline=True,
    )
    return template.render(**context)


@dataclass(frozen=True)
class GeneratedNames:
    """Module and class names generated for one object type."""

    class_name: str
    entity_module: str
    collection_class: str
    collection_module: str
    service_class: str
    service_module: str
    plural_getter: str

    @classmethod
    def for_definition(cls, definition: EntityDefinition) -> "GeneratedNames":
        class_name = to_pascal_case(definition.object_name)
        entity_module = to_snake_case(definition.object_name)
        if definition.object_name_plural and definition.object_name_plural != definition.object_name:
            plural = to_snake_case(definition.object_name_plural)
        else:
            plural = pluralize(entity_module)
        return cls(
            class_name=class_name,
            entity_module=entity_module,
            collection_class=f"{class_name}Collection",
            collection_module=f"{entity_module}_collection",
            service_class=f"{class_name}Service",
            service_module=f"{entity_module}_service",
            plural_getter=f"get_{plural}",
        )


def accessor_name(prefix: str, field_name: str) -> str:
    name = f"{prefix}_{to_snake_case(field_name).rstrip('_')}"
    if name in _OVERRIDABLE or not hasattr(Entity, name):
        return name
    return f"{name}_field"


def _field_record(field: FieldMetadata) -> Dict[str, Any]:
    return {
        "type": field.type.value,
        "label": field.label,
        "nullable": field.is_nullable,
        "is_system": field.is_system,
        "is_custom": field.is_custom,
    }


def _docstring_text(label: str) -> str:
    return label.replace("\\", "").replace('"', "'").strip().rstrip(".")


class EntityGenerator:
    """Turns an :class:`EntityDefinition` into entity module source."""

    def __init__(self, registry: Optional[CodecRegistry] = None):
        self.registry = registry or default_registry()

    def _accessors(self, definition: EntityDefinition) -> List[Dict[str, Any]]:
        accessors = []
        for name, field in definition.fields.items():
            accessors.append(
                {
                    "name_literal": repr(name),
                    "getter": accessor_name("get", name),
                    "setter": accessor_name("set", name) if is_updatable(field) else None,
                    "type_hint": python_type(field, self.registry),
                    "label": _docstring_text(field.label),
                }
            )
        return accessors

    def _value_imports(self, definition: EntityDefinition) -> List[str]:
        names = {
            self.registry.value_type(field.type)
            for field in definition.fields.values()
            if self.registry.has_codec(field.type)
        }
        return sorted(name for name in names if name)

    def render(self, definition: EntityDefinition) -> str:
        names = GeneratedNames.for_definition(definition)
        relation_records = [
            (
                repr(name),
                repr(
                    {
                        "type": relation.type.value,
                        "target_object_name": relation.target_object_name,
                        "target_field_name": relation.target_field_name,
                    }
                ),
            )
            for name, relation in definition.relations.items()
        ]
        return render_template(
            ENTITY_TEMPLATE,
            class_name=names.class_name,
            object_name=definition.object_name,
            object_name_literal=repr(definition.object_name),
            object_name_plural_literal=repr(definition.object_name_plural),
            api_endpoint_literal=repr(definition.api_endpoint),
            field_records=[(repr(name), repr(_field_record(field))) for name, field in definition.fields.items()],
            field_to_api_literal=repr(definition.field_to_api_map),
            standard_fields_literal=repr(tuple(definition.standard_fields)),
            relation_records=relation_records,
            value_imports=self._value_imports(definition),
            accessors=self._accessors(definition),
        )
