"""Field metadata and enum lookups by object name."""

from __future__ import annotations

import logging
from typing import Dict, List, Optional

from ..clients.transport import Transport
from ..metadata.factory import field_from_dict
from ..metadata.models import FieldMetadata, SelectField
from ..utils.errors import MetadataParseError, TwentyCrmError

logger = logging.getLogger(__name__)


class MetadataService:
    """Per-field lookups against ``metadata/objects`` with a field cache."""

    def __init__(self, transport: Transport):
        self.transport = transport
        self._field_cache: Dict[str, Dict[str, FieldMetadata]] = {}

    def fetch_field_metadata_by_object(self, object_name: str, field_name: str) -> Optional[FieldMetadata]:
        """Find one field of an object, matched by singular or plural name.

        Returns None when the object or field does not exist or the request
        fails.
        """
        cached = self._field_cache.get(object_name, {}).get(field_name)
        if cached is not None:
            return cached

        try:
            response = self.transport.request("GET", "metadata/objects")
        except TwentyCrmError as exc:
            logger.error(
                "Failed to fetch field metadata",
                extra={"object": object_name, "field": field_name, "error": str(exc)},
            )
            return None

        data = response.get("data") if isinstance(response, dict) else None
        objects = data.get("objects") if isinstance(data, dict) else None
        if not isinstance(objects, list):
            return None

        for object_data in objects:
            if not isinstance(object_data, dict):
                continue
            if object_name not in (object_data.get("nameSingular"), object_data.get("namePlural")):
                continue
            for field_data in object_data.get("fields") or []:
                if not isinstance(field_data, dict) or field_data.get("name") != field_name:
                    continue
                try:
                    field = field_from_dict({**field_data, "objectMetadataId": object_data.get("id") or ""})
                except MetadataParseError as exc:
                    logger.warning(
                        "Malformed field metadata",
                        extra={"object": object_name, "field": field_name, "error": str(exc)},
                    )
                    return None
                self._field_cache.setdefault(object_name, {})[field_name] = field
                return field
            break
        return None

    def get_field_metadata(self, object_name: str, field_name: str) -> Optional[FieldMetadata]:
        return self.fetch_field_metadata_by_object(object_name, field_name)

    def get_enum_values(self, object_name: str, field_name: str) -> List[str]:
        field = self.fetch_field_metadata_by_object(object_name, field_name)
        if isinstance(field, SelectField):
            return field.valid_values
        return []

    def is_valid_enum_value(self, object_name: str, field_name: str, value: str) -> bool:
        field = self.fetch_field_metadata_by_object(object_name, field_name)
        if isinstance(field, SelectField):
            return field.is_valid_value(value)
        return False

    def clear_cache(self) -> None:
        self._field_cache = {}
