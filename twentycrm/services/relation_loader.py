"""Resolve relation fields into entities or collections."""

from __future__ import annotations

import logging
from typing import Iterable, Optional, Union

from ..entity.collection import EntityCollection
from ..entity.runtime import Entity
from ..metadata.models import EntityDefinition, RelationMetadata
from ..query.filter_builder import FilterBuilder
from .entity_service import GenericEntityService
from .options import SearchOptions
from .registry import EntityRegistry

logger = logging.getLogger(__name__)

DEFAULT_RELATION_LIMIT = 100

RelationValue = Union[Entity, EntityCollection, None]


class RelationLoader:
    """Loads relations through services built from registry definitions.

    Single-valued relations (MANY_TO_ONE, ONE_TO_ONE) are fetched by the
    stored foreign id. Collection relations (ONE_TO_MANY, MANY_TO_MANY) are
    queried on the target with ``<targetField>Id[eq]:"<source id>"``.
    """

    def __init__(self, registry: EntityRegistry, limit: int = DEFAULT_RELATION_LIMIT):
        self.registry = registry
        self.limit = limit

    def load_relation(self, entity: Entity, relation: RelationMetadata) -> RelationValue:
        target_service = self.registry.service_for(relation.target_object_name)
        if relation.returns_single:
            return self._load_single(entity, relation, target_service)
        return self._load_collection(entity, relation, target_service)

    def _load_single(
        self,
        entity: Entity,
        relation: RelationMetadata,
        target_service: GenericEntityService,
    ) -> Optional[Entity]:
        value = entity.get(relation.name)
        if not value:
            return None
        target_id = value.get("id") if isinstance(value, dict) else value
        if not target_id:
            return None
        return target_service.get_by_id(target_id)

    def _load_collection(
        self,
        entity: Entity,
        relation: RelationMetadata,
        target_service: GenericEntityService,
    ) -> EntityCollection:
        source_id = entity.get_id()
        if not source_id:
            return EntityCollection(target_service.definition)

        # TODO: MANY_TO_MANY should go through the junction object once the
        # metadata API exposes it; the back-reference query covers ONE_TO_MANY only.
        filter_builder = FilterBuilder().equals(f"{relation.target_field_name}Id", source_id)
        return target_service.find(filter_builder, SearchOptions(limit=self.limit))

    def eager_load(
        self,
        entities: Iterable[Entity],
        relation_names: Iterable[str],
        definition: EntityDefinition,
    ) -> None:
        """Load each named relation for every entity into its relation cache."""
        entities = list(entities)
        for relation_name in relation_names:
            relation = definition.get_relation(relation_name)
            if relation is None:
                logger.debug(
                    "Skipping unknown relation",
                    extra={"object": definition.object_name, "relation": relation_name},
                )
                continue
            for entity in entities:
                entity.set_relation(relation_name, self.load_relation(entity, relation))
