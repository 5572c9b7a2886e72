"""Generic CRUD operations for any Twenty object type."""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

from ..clients.logging import log_request
from ..clients.transport import Transport
from ..codecs.registry import CodecRegistry
from ..entity.collection import EntityCollection
from ..entity.runtime import Entity
from ..metadata.field_constants import filter_updatable_fields
from ..metadata.models import EntityDefinition
from ..query.filter_builder import Filter
from ..utils.errors import ApiError, MissingIdError, ResponseParseError
from .options import SearchOptions

logger = logging.getLogger(__name__)


class GenericEntityService:
    """CRUD against ``definition.api_endpoint`` through a transport.

    Args:
        transport: Object with ``request(method, path, query=None, json=None)``.
        definition: Schema of the object type this service handles.
        registry: Codec registry handed to the entities it builds.
        relation_loader: Used to eager load ``SearchOptions.with_relations``.
    """

    def __init__(
        self,
        transport: Transport,
        definition: EntityDefinition,
        registry: Optional[CodecRegistry] = None,
        relation_loader: Optional[Any] = None,
    ):
        self.transport = transport
        self.definition = definition
        self.registry = registry
        self.relation_loader = relation_loader

    @property
    def endpoint(self) -> str:
        return self.definition.api_endpoint

    def create_instance(self, data: Optional[Dict[str, Any]] = None) -> Entity:
        return Entity.from_definition(self.definition, data, self.registry)

    def find(
        self,
        filter: Optional[Filter] = None,
        options: Optional[SearchOptions] = None,
    ) -> EntityCollection:
        options = options or SearchOptions()
        query = options.to_query_params()
        if filter is not None and filter.has_filters():
            query["filter"] = filter.build_filter_string()

        log_request(logger, "GET", self.endpoint, self.definition.object_name_plural)
        response = self.transport.request("GET", self.endpoint, query=query)

        def fetch_page(cursor: str) -> EntityCollection:
            return self.find(filter, options.after(cursor))

        collection = self._parse_collection(response, fetcher=fetch_page)
        logger.debug(
            "Found entities",
            extra={"object": self.definition.object_name_plural, "count": len(collection)},
        )

        if options.with_relations and self.relation_loader is not None:
            self.relation_loader.eager_load(collection.items, options.with_relations, self.definition)
        return collection

    def get_by_id(self, entity_id: str) -> Optional[Entity]:
        """Fetch one entity; None when the API answers 404 or 400."""
        path = f"{self.endpoint}/{entity_id}"
        log_request(logger, "GET", path, self.definition.object_name, entity_id)
        try:
            response = self.transport.request("GET", path)
        except ApiError as exc:
            if exc.is_not_found:
                logger.debug(
                    "Entity not found",
                    extra={"object": self.definition.object_name, "entity_id": entity_id},
                )
                return None
            raise
        return self._parse_entity(response)

    def create(self, entity: Entity) -> Entity:
        log_request(logger, "POST", self.endpoint, self.definition.object_name)
        response = self.transport.request("POST", self.endpoint, json=entity.to_api())
        return self._parse_entity(response)

    def update(self, entity: Entity) -> Entity:
        entity_id = entity.get_id()
        if not entity_id:
            raise MissingIdError(self.definition.object_name, "update")

        data = entity.to_api()
        data.pop("id", None)
        data = filter_updatable_fields(data, self.definition.fields, self.definition.map_api_to_field)

        path = f"{self.endpoint}/{entity_id}"
        log_request(logger, "PATCH", path, self.definition.object_name, entity_id)
        response = self.transport.request("PATCH", path, json=data)
        return self._parse_entity(response)

    def delete(self, entity_id: str) -> bool:
        path = f"{self.endpoint}/{entity_id}"
        log_request(logger, "DELETE", path, self.definition.object_name, entity_id)
        try:
            self.transport.request("DELETE", path)
        except ApiError as exc:
            if exc.is_not_found:
                return False
            raise
        return True

    def batch_upsert(self, entities: List[Entity]) -> EntityCollection:
        path = f"/batch{self.endpoint}"
        log_request(logger, "POST", path, self.definition.object_name_plural)
        response = self.transport.request("POST", path, json=[entity.to_api() for entity in entities])
        return self._parse_collection(response)

    # Response parsing

    def _parse_collection(self, response: Any, fetcher=None) -> EntityCollection:
        data = response.get("data") if isinstance(response, dict) else None
        items: Any = []
        if isinstance(data, dict):
            plural = self.definition.object_name_plural
            items = data.get(plural)
            if items is None:
                items = data.get(f"create{_capitalize(plural)}")
        if not isinstance(items, list):
            items = []

        page_info = response.get("pageInfo") if isinstance(response, dict) else None
        page_info = page_info if isinstance(page_info, dict) else {}
        total = response.get("totalCount") if isinstance(response, dict) else None

        return EntityCollection(
            self.definition,
            [self.create_instance(item) for item in items if isinstance(item, dict)],
            total=total,
            has_more=bool(page_info.get("hasNextPage", False)),
            start_cursor=page_info.get("startCursor"),
            end_cursor=page_info.get("endCursor"),
            fetcher=fetcher,
        )

    def _parse_entity(self, response: Any) -> Entity:
        data = response.get("data") if isinstance(response, dict) else None
        if not isinstance(data, dict):
            raise ResponseParseError(
                f"Unable to parse {self.definition.object_name} from API response"
            )

        name = self.definition.object_name
        for key in (name, f"create{_capitalize(name)}", f"update{_capitalize(name)}"):
            if isinstance(data.get(key), dict):
                return self.create_instance(data[key])
        return self.create_instance(data)


def _capitalize(name: str) -> str:
    return name[:1].upper() + name[1:]
