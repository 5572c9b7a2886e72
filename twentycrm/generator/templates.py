"""Jinja2 templates for generated entity, collection and service modules.

Literal values (names, metadata tables) are rendered to Python source by the
generators before they reach the templates.
"""

ENTITY_TEMPLATE = '''"""{{ class_name }} entity for the Twenty ``{{ object_name }}`` object.

Generated by twentycrm-generate. Do not edit by hand.
"""

from __future__ import annotations

from typing import Any, Mapping, Optional

from twentycrm.codecs.registry import CodecRegistry
{% if value_imports %}
from twentycrm.codecs.values import {{ value_imports | join(", ") }}
{% endif %}
from twentycrm.entity.runtime import Entity, StaticMetadata

METADATA = StaticMetadata(
    object_name={{ object_name_literal }},
    object_name_plural={{ object_name_plural_literal }},
    api_endpoint={{ api_endpoint_literal }},
    fields={
{% for name, record in field_records %}
        {{ name }}: {{ record }},
{% endfor %}
    },
    field_to_api={{ field_to_api_literal }},
    standard_fields={{ standard_fields_literal }},
    relations={
{% for name, record in relation_records %}
        {{ name }}: {{ record }},
{% endfor %}
    },
)


class {{ class_name }}(Entity):
    """Typed accessors for ``{{ object_name }}`` records."""

    def __init__(
        self,
        data: Optional[Mapping[str, Any]] = None,
        registry: Optional[CodecRegistry] = None,
    ):
        super().__init__(METADATA, data, registry)

    @classmethod
    def from_entity(cls, entity: Entity) -> "{{ class_name }}":
        return cls(entity.raw())
{% for accessor in accessors %}

    def {{ accessor.getter }}(self) -> {{ accessor.type_hint }}:
{% if accessor.label %}
        """{{ accessor.label }}."""
{% endif %}
        return self.get({{ accessor.name_literal }})
{% if accessor.setter %}

    def {{ accessor.setter }}(self, value: {{ accessor.type_hint }}) -> "{{ class_name }}":
        return self.set({{ accessor.name_literal }}, value)
{% endif %}
{% endfor %}
'''

COLLECTION_TEMPLATE = '''"""Typed collection of {{ class_name }} entities.

Generated by twentycrm-generate. Do not edit by hand.
"""

from __future__ import annotations

from typing import Iterator, List, Optional

from twentycrm.entity.collection import EntityCollection

from {{ package }}.{{ entity_module }} import {{ class_name }}


class {{ collection_class }}:
    """Wraps an :class:`EntityCollection`, yielding {{ class_name }} objects."""

    def __init__(self, collection: EntityCollection):
        self.collection = collection

    @classmethod
    def from_collection(cls, collection: EntityCollection) -> "{{ collection_class }}":
        return cls(collection)

    def entities(self) -> Iterator[{{ class_name }}]:
        for entity in self.collection:
            yield {{ class_name }}.from_entity(entity)

    def {{ plural_getter }}(self) -> List[{{ class_name }}]:
        return list(self.entities())

    def first(self) -> Optional[{{ class_name }}]:
        entity = self.collection.first()
        return {{ class_name }}.from_entity(entity) if entity is not None else None

    def is_empty(self) -> bool:
        return self.collection.is_empty()

    @property
    def has_more(self) -> bool:
        return self.collection.has_more

    def __iter__(self) -> Iterator[{{ class_name }}]:
        return self.entities()

    def __len__(self) -> int:
        return len(self.collection)
'''

SERVICE_TEMPLATE = '''"""Typed CRUD service for {{ class_name }} entities.

Generated by twentycrm-generate. Do not edit by hand.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from twentycrm.clients.transport import Transport
from twentycrm.codecs.registry import CodecRegistry
from twentycrm.query.filter_builder import Filter
from twentycrm.services.entity_service import GenericEntityService
from twentycrm.services.options import SearchOptions

from {{ package }}.{{ entity_module }} import METADATA, {{ class_name }}
{% if with_collection %}
from {{ package }}.{{ collection_module }} import {{ collection_class }}
{% endif %}


class {{ service_class }}:
    """Delegates to :class:`GenericEntityService` for ``{{ object_name }}``."""

    def __init__(self, transport: Transport, registry: Optional[CodecRegistry] = None):
        self.registry = registry
        self.service = GenericEntityService(transport, METADATA.to_definition(), registry)

    def create_instance(self, data: Optional[Dict[str, Any]] = None) -> {{ class_name }}:
        return {{ class_name }}(data, self.registry)

    def find(
        self,
        filter: Optional[Filter] = None,
        options: Optional[SearchOptions] = None,
    ) -> {{ find_return }}:
        collection = self.service.find(filter, options)
{% if with_collection %}
        return {{ collection_class }}.from_collection(collection)
{% else %}
        return [{{ class_name }}.from_entity(entity) for entity in collection]
{% endif %}

    def get_by_id(self, entity_id: str) -> Optional[{{ class_name }}]:
        entity = self.service.get_by_id(entity_id)
        return {{ class_name }}.from_entity(entity) if entity is not None else None

    def create(self, entity: {{ class_name }}) -> {{ class_name }}:
        return {{ class_name }}.from_entity(self.service.create(entity))

    def update(self, entity: {{ class_name }}) -> {{ class_name }}:
        return {{ class_name }}.from_entity(self.service.update(entity))

    def delete(self, entity_id: str) -> bool:
        return self.service.delete(entity_id)

    def batch_upsert(self, entities: List[{{ class_name }}]) -> {{ find_return }}:
        collection = self.service.batch_upsert(entities)
{% if with_collection %}
        return {{ collection_class }}.from_collection(collection)
{% else %}
        return [{{ class_name }}.from_entity(entity) for entity in collection]
{% endif %}
'''

INIT_TEMPLATE = '''"""Generated Twenty entities.

Generated by twentycrm-generate. Do not edit by hand.
"""

{% for module, names in exports %}
from {{ package }}.{{ module }} import {{ names | join(", ") }}
{% endfor %}

__all__ = [
{% for module, names in exports %}
{% for name in names %}
    "{{ name }}",
{% endfor %}
{% endfor %}
]
'''
