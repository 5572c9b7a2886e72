"""Entity runtime shared by schema-supplied and generated entities.

An :class:`Entity` stores field values keyed by entity-facing name and reads
everything it knows about its fields through a metadata source passed to its
constructor:

* :class:`DefinitionMetadata` wraps an :class:`EntityDefinition` obtained at
  runtime (usually from discovery).
* :class:`StaticMetadata` holds the constant tables written into generated
  modules, so generated entities work without a discovery round trip.

Fields the metadata source does not know resolve to :data:`UNKNOWN_FIELD` and
pass through unchanged, which keeps entities usable when the remote schema
grows new fields.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, ClassVar, Dict, Iterator, List, Mapping, Optional, Protocol, Tuple, Union

from ..codecs.registry import CodecRegistry, default_registry
from ..enums import FieldType, RelationType
from ..metadata.models import EntityDefinition, FieldMetadata, RelationMetadata


@dataclass(frozen=True)
class FieldSpec:
    """What the runtime needs to know about a known field."""

    known: ClassVar[bool] = True

    name: str
    type: FieldType
    nullable: bool = True
    has_codec: bool = False


class UnknownField:
    known: ClassVar[bool] = False

    def __repr__(self) -> str:
        return "UNKNOWN_FIELD"


UNKNOWN_FIELD = UnknownField()

FieldLookup = Union[FieldSpec, UnknownField]


class MetadataSource(Protocol):
    object_name: str

    def lookup(self, field_name: str) -> FieldLookup:
        ...

    def map_field_to_api(self, field_name: str) -> str:
        ...

    def map_api_to_field(self, api_field_name: str) -> str:
        ...


class DefinitionMetadata:
    """Metadata source backed by a runtime :class:`EntityDefinition`."""

    def __init__(self, definition: EntityDefinition, registry: Optional[CodecRegistry] = None):
        self.definition = definition
        self.object_name = definition.object_name
        self._registry = registry or default_registry()
        self._specs: Dict[str, FieldSpec] = {
            name: FieldSpec(
                name=name,
                type=field.type,
                nullable=field.is_nullable,
                has_codec=self._registry.has_codec(field.type),
            )
            for name, field in definition.fields.items()
        }

    def lookup(self, field_name: str) -> FieldLookup:
        return self._specs.get(field_name, UNKNOWN_FIELD)

    def map_field_to_api(self, field_name: str) -> str:
        return self.definition.map_field_to_api(field_name)

    def map_api_to_field(self, api_field_name: str) -> str:
        return self.definition.map_api_to_field(api_field_name)

    def to_definition(self) -> EntityDefinition:
        return self.definition


class StaticMetadata:
    """Metadata source built from constant tables in generated code.

    Args:
        object_name: Singular object name, e.g. ``person``.
        object_name_plural: Plural object name, e.g. ``people``.
        api_endpoint: REST endpoint path, e.g. ``/people``.
        fields: Per-field records keyed by field name. Each record holds
            ``type`` plus optional ``label``, ``nullable``, ``is_system`` and
            ``is_custom``.
        field_to_api: Entity name to wire name for fields that differ.
        standard_fields: Names of the non-custom fields.
        relations: Per-relation records keyed by relation name with ``type``,
            ``target_object_name`` and ``target_field_name``.
        has_codec: Field types decoded through the codec registry. Taken from
            the default registry when omitted.
    """

    def __init__(
        self,
        object_name: str,
        object_name_plural: str,
        api_endpoint: str,
        fields: Mapping[str, Mapping[str, Any]],
        field_to_api: Optional[Mapping[str, str]] = None,
        standard_fields: Optional[Tuple[str, ...]] = None,
        relations: Optional[Mapping[str, Mapping[str, Any]]] = None,
        has_codec: Optional[Tuple[str, ...]] = None,
    ):
        self.object_name = object_name
        self.object_name_plural = object_name_plural
        self.api_endpoint = api_endpoint
        self.fields = {name: dict(record) for name, record in fields.items()}
        self.field_to_api = dict(field_to_api or {})
        self.api_to_field = {api: name for name, api in self.field_to_api.items()}
        self.standard_fields = tuple(standard_fields) if standard_fields is not None else None
        self.relations = {name: dict(record) for name, record in (relations or {}).items()}

        if has_codec is None:
            registry = default_registry()
            codec_types = {field_type for field_type in FieldType if registry.has_codec(field_type)}
        else:
            codec_types = {FieldType(value) for value in has_codec}

        self._specs: Dict[str, FieldSpec] = {}
        for name, record in self.fields.items():
            field_type = FieldType(record["type"])
            self._specs[name] = FieldSpec(
                name=name,
                type=field_type,
                nullable=record.get("nullable", True),
                has_codec=field_type in codec_types,
            )

    def lookup(self, field_name: str) -> FieldLookup:
        return self._specs.get(field_name, UNKNOWN_FIELD)

    def map_field_to_api(self, field_name: str) -> str:
        return self.field_to_api.get(field_name, field_name)

    def map_api_to_field(self, api_field_name: str) -> str:
        return self.api_to_field.get(api_field_name, api_field_name)

    def to_definition(self) -> EntityDefinition:
        """Rebuild an :class:`EntityDefinition` from the static tables."""
        fields = [
            FieldMetadata(
                name=name,
                type=FieldType(record["type"]),
                label=record.get("label", ""),
                is_nullable=record.get("nullable", True),
                is_system=record.get("is_system", False),
                is_custom=record.get("is_custom", False),
            )
            for name, record in self.fields.items()
        ]
        relations = [
            RelationMetadata(
                name=name,
                type=RelationType(record["type"]),
                source_object_name=self.object_name,
                target_object_name=record["target_object_name"],
                target_field_name=record.get("target_field_name", ""),
            )
            for name, record in self.relations.items()
        ]
        return EntityDefinition.build(
            object_name=self.object_name,
            object_name_plural=self.object_name_plural,
            fields=fields,
            relations=relations,
            standard_fields=self.standard_fields,
            api_endpoint=self.api_endpoint,
        )


class Entity:
    """A single Twenty record.

    Values are kept as the API sent them and decoded lazily by ``get``.
    Loaded relations live in a separate cache and are never serialized.
    """

    def __init__(
        self,
        metadata: MetadataSource,
        data: Optional[Mapping[str, Any]] = None,
        registry: Optional[CodecRegistry] = None,
    ):
        self._metadata = metadata
        self._registry = registry or default_registry()
        self._data: Dict[str, Any] = dict(data or {})
        self._relations: Dict[str, Any] = {}

    @classmethod
    def from_definition(
        cls,
        definition: EntityDefinition,
        data: Optional[Mapping[str, Any]] = None,
        registry: Optional[CodecRegistry] = None,
    ) -> "Entity":
        return cls(DefinitionMetadata(definition, registry), data, registry)

    @property
    def metadata(self) -> MetadataSource:
        return self._metadata

    @property
    def object_name(self) -> str:
        return self._metadata.object_name

    # Field access

    def get(self, field_name: str, default: Any = None) -> Any:
        if field_name in self._data:
            value = self._data[field_name]
        else:
            api_name = self._metadata.map_field_to_api(field_name)
            if api_name not in self._data:
                return default
            value = self._data[api_name]

        spec = self._metadata.lookup(field_name)
        if spec.known and spec.has_codec and isinstance(value, Mapping):
            return self._registry.from_api(spec.type, value)
        return value

    def set(self, field_name: str, value: Any) -> "Entity":
        api_name = self._metadata.map_field_to_api(field_name)
        if api_name != field_name:
            self._data.pop(api_name, None)
        self._data[field_name] = value
        return self

    def has(self, field_name: str) -> bool:
        if field_name in self._data:
            return True
        return self._metadata.map_field_to_api(field_name) in self._data

    def unset(self, field_name: str) -> "Entity":
        self._data.pop(field_name, None)
        self._data.pop(self._metadata.map_field_to_api(field_name), None)
        return self

    def get_id(self) -> Optional[str]:
        return self._data.get("id")

    def set_id(self, entity_id: Optional[str]) -> "Entity":
        if entity_id is None:
            self._data.pop("id", None)
        else:
            self._data["id"] = entity_id
        return self

    @property
    def field_names(self) -> List[str]:
        names: List[str] = []
        for key in self._data:
            name = self._metadata.map_api_to_field(key)
            if name not in names:
                names.append(name)
        return names

    def items(self) -> List[Tuple[str, Any]]:
        return [(name, self.get(name)) for name in self.field_names]

    def __getitem__(self, field_name: str) -> Any:
        if not self.has(field_name):
            raise KeyError(field_name)
        return self.get(field_name)

    def __setitem__(self, field_name: str, value: Any) -> None:
        self.set(field_name, value)

    def __delitem__(self, field_name: str) -> None:
        if not self.has(field_name):
            raise KeyError(field_name)
        self.unset(field_name)

    def __contains__(self, field_name: object) -> bool:
        return isinstance(field_name, str) and self.has(field_name)

    def __iter__(self) -> Iterator[str]:
        return iter(self.field_names)

    def __len__(self) -> int:
        return len(self.field_names)

    # Serialization

    def to_api(self) -> Dict[str, Any]:
        """Serialize stored fields to the wire shape."""
        payload: Dict[str, Any] = {}
        for key, value in self._data.items():
            field_name = self._metadata.map_api_to_field(key)
            spec = self._metadata.lookup(field_name)
            if not spec.known:
                payload[key] = value
                continue
            api_name = self._metadata.map_field_to_api(field_name)
            if spec.type.is_relation and key != api_name:
                # Embedded relation objects arrive beside their foreign key
                # when the API is asked for depth >= 1.
                if api_name in self._data:
                    continue
                if isinstance(value, Mapping):
                    value = value.get("id")
                elif isinstance(value, list):
                    continue
            if spec.has_codec and value is not None:
                value = self._registry.to_api(spec.type, value)
            payload[api_name] = value
        return payload

    def raw(self) -> Dict[str, Any]:
        return dict(self._data)

    # Relation cache

    def set_relation(self, relation_name: str, value: Any) -> "Entity":
        self._relations[relation_name] = value
        return self

    def get_relation(self, relation_name: str) -> Any:
        return self._relations.get(relation_name)

    def has_loaded_relation(self, relation_name: str) -> bool:
        return relation_name in self._relations

    @property
    def loaded_relations(self) -> List[str]:
        return list(self._relations)

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.object_name} id={self.get_id()!r}>"
