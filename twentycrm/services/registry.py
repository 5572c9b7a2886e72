"""Discover entity definitions from the Twenty metadata API.

Definitions are cached at module level so every registry in the process
shares one discovery round trip. ``clear_cache`` forces the next lookup to
rediscover.
"""

from __future__ import annotations

import logging
import time
from typing import Dict, List, Optional

from ..clients.logging import log_discovery
from ..clients.transport import Transport
from ..codecs.registry import CodecRegistry
from ..metadata.factory import definition_from_dict
from ..metadata.models import EntityDefinition
from ..utils.errors import EntityNotFoundError, TwentyCrmError
from .entity_service import GenericEntityService

logger = logging.getLogger(__name__)

METADATA_OBJECTS_PATH = "metadata/objects"

# Cache for discovered definitions, keyed by object name
_definition_cache: Optional[Dict[str, EntityDefinition]] = None


def clear_cache() -> None:
    global _definition_cache
    _definition_cache = None


class EntityRegistry:
    """Lookup of :class:`EntityDefinition` by object name."""

    def __init__(
        self,
        transport: Transport,
        metadata_service=None,
        codec_registry: Optional[CodecRegistry] = None,
    ):
        self.transport = transport
        self.metadata_service = metadata_service
        self.codec_registry = codec_registry

    def _definitions(self) -> Dict[str, EntityDefinition]:
        global _definition_cache
        if _definition_cache is None:
            _definition_cache = self._discover()
        return _definition_cache

    def _discover(self) -> Dict[str, EntityDefinition]:
        """Fetch ``metadata/objects`` and build a definition per object.

        A transport failure is logged and yields an empty result; objects
        without names are skipped.
        """
        started = time.monotonic()
        try:
            response = self.transport.request("GET", METADATA_OBJECTS_PATH)
        except TwentyCrmError as exc:
            logger.error(
                "Metadata discovery failed",
                extra={"path": METADATA_OBJECTS_PATH, "error": str(exc)},
                exc_info=True,
            )
            return {}

        data = response.get("data") if isinstance(response, dict) else None
        objects = data.get("objects") if isinstance(data, dict) else None
        if not isinstance(objects, list):
            logger.warning("Metadata response has no objects list", extra={"path": METADATA_OBJECTS_PATH})
            return {}

        definitions: Dict[str, EntityDefinition] = {}
        skipped: List[str] = []
        for object_data in objects:
            if not isinstance(object_data, dict):
                continue
            definition = definition_from_dict(object_data)
            if definition is None:
                skipped.append(str(object_data.get("id") or "?"))
                continue
            definitions[definition.object_name] = definition

        log_discovery(
            logger,
            object_count=len(definitions),
            duration_ms=int((time.monotonic() - started) * 1000),
            skipped=skipped,
        )
        return definitions

    def get_definition(self, object_name: str) -> Optional[EntityDefinition]:
        return self._definitions().get(object_name)

    def require_definition(self, object_name: str) -> EntityDefinition:
        definition = self.get_definition(object_name)
        if definition is None:
            raise EntityNotFoundError(object_name)
        return definition

    def has_entity(self, object_name: str) -> bool:
        return object_name in self._definitions()

    def get_all_entity_names(self) -> List[str]:
        return list(self._definitions())

    def get_all_definitions(self) -> Dict[str, EntityDefinition]:
        return dict(self._definitions())

    def service_for(self, object_name: str) -> GenericEntityService:
        return GenericEntityService(self.transport, self.require_definition(object_name), self.codec_registry)

    def clear_cache(self) -> None:
        clear_cache()
        if self.metadata_service is not None:
            self.metadata_service.clear_cache()
