"""Pydantic models describing Twenty objects, fields and relations.

An :class:`EntityDefinition` is built once per object type, either from the
``metadata/objects`` discovery payload or from the constant tables baked into
generated modules, and is read-only afterwards.
"""

from __future__ import annotations

from typing import Any, Dict, Iterable, List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, PrivateAttr, model_validator

from ..enums import FieldType, RelationType


class EnumOption(BaseModel):
    model_config = ConfigDict(frozen=True)

    value: str
    label: str = ""
    color: str = ""
    position: int = 0

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "EnumOption":
        return cls(
            value=data.get("value") or "",
            label=data.get("label") or "",
            color=data.get("color") or "",
            position=data.get("position") or 0,
        )

    def to_dict(self) -> Dict[str, Any]:
        return self.model_dump()


class FieldMetadata(BaseModel):
    """Metadata for one field of a Twenty object."""

    model_config = ConfigDict(frozen=True)

    id: str = ""
    name: str
    type: FieldType
    label: str = ""
    object_metadata_id: str = ""
    is_nullable: bool = True
    description: Optional[str] = None
    icon: Optional[str] = None
    default_value: Any = None
    is_custom: bool = False
    is_active: bool = True
    is_system: bool = False

    @property
    def is_required(self) -> bool:
        return not self.is_nullable


class SelectField(FieldMetadata):
    """SELECT / MULTI_SELECT field with its ordered enum options."""

    options: Tuple[EnumOption, ...] = ()

    @property
    def valid_values(self) -> List[str]:
        return [option.value for option in self.options]

    @property
    def options_map(self) -> Dict[str, str]:
        return {option.value: option.label for option in self.options}

    def is_valid_value(self, value: str) -> bool:
        return any(option.value == value for option in self.options)

    def option_for_value(self, value: str) -> Optional[EnumOption]:
        for option in self.options:
            if option.value == value:
                return option
        return None

    def label_for_value(self, value: str) -> Optional[str]:
        option = self.option_for_value(value)
        return option.label if option else None


class RelationMetadata(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    label: str = ""
    type: RelationType
    source_object_name: str = ""
    target_object_name: str
    target_field_name: str = ""
    is_nullable: bool = True
    is_system: bool = False
    is_active: bool = True
    is_custom: bool = False

    @property
    def returns_collection(self) -> bool:
        return self.type.returns_collection

    @property
    def returns_single(self) -> bool:
        return self.type.returns_single


class EntityDefinition(BaseModel):
    """Schema of one Twenty object type.

    The entity-facing and wire field names only differ for RELATION fields:
    entity field ``company`` travels as ``companyId``. Both lookup tables are
    computed once after validation.
    """

    model_config = ConfigDict(frozen=True)

    object_name: str
    object_name_plural: str
    api_endpoint: str
    fields: Dict[str, FieldMetadata] = {}
    standard_fields: Tuple[str, ...] = ()
    relations: Dict[str, RelationMetadata] = {}

    _field_to_api: Dict[str, str] = PrivateAttr(default_factory=dict)
    _api_to_field: Dict[str, str] = PrivateAttr(default_factory=dict)
    _standard_set: frozenset = PrivateAttr(default_factory=frozenset)

    @model_validator(mode="after")
    def _check_field_keys(self) -> "EntityDefinition":
        for key, field in self.fields.items():
            if key != field.name:
                raise ValueError(f"Field key '{key}' does not match field name '{field.name}'")
        return self

    def model_post_init(self, __context: Any) -> None:
        field_to_api: Dict[str, str] = {}
        api_to_field: Dict[str, str] = {}
        for name, field in self.fields.items():
            if field.type.is_relation:
                api_name = f"{name}Id"
                field_to_api[name] = api_name
                api_to_field[api_name] = name
        self._field_to_api = field_to_api
        self._api_to_field = api_to_field
        self._standard_set = frozenset(self.standard_fields)

    @classmethod
    def build(
        cls,
        object_name: str,
        object_name_plural: str,
        fields: Iterable[FieldMetadata] = (),
        relations: Iterable[RelationMetadata] = (),
        standard_fields: Optional[Iterable[str]] = None,
        api_endpoint: Optional[str] = None,
    ) -> "EntityDefinition":
        """Build a definition from field/relation lists.

        When ``standard_fields`` is omitted every non-custom field counts as
        standard. Duplicate field names are rejected.
        """
        field_map: Dict[str, FieldMetadata] = {}
        for field in fields:
            if field.name in field_map:
                raise ValueError(f"Duplicate field name '{field.name}' for {object_name}")
            field_map[field.name] = field
        if standard_fields is None:
            standard_fields = [name for name, field in field_map.items() if not field.is_custom]
        return cls(
            object_name=object_name,
            object_name_plural=object_name_plural,
            api_endpoint=api_endpoint or f"/{object_name_plural}",
            fields=field_map,
            standard_fields=tuple(standard_fields),
            relations={relation.name: relation for relation in relations},
        )

    # Fields

    def get_field(self, name: str) -> Optional[FieldMetadata]:
        return self.fields.get(name)

    def has_field(self, name: str) -> bool:
        return name in self.fields

    @property
    def field_names(self) -> List[str]:
        return list(self.fields)

    def get_required_fields(self) -> Dict[str, FieldMetadata]:
        return {name: field for name, field in self.fields.items() if field.is_required}

    def get_custom_fields(self) -> Dict[str, FieldMetadata]:
        return {name: field for name, field in self.fields.items() if name not in self._standard_set}

    def is_standard_field(self, name: str) -> bool:
        return name in self._standard_set

    def is_custom_field(self, name: str) -> bool:
        return self.has_field(name) and not self.is_standard_field(name)

    # Relations

    def get_relation(self, name: str) -> Optional[RelationMetadata]:
        return self.relations.get(name)

    def has_relation(self, name: str) -> bool:
        return name in self.relations

    @property
    def relation_names(self) -> List[str]:
        return list(self.relations)

    # Name mapping. Unknown names map to themselves.

    def map_field_to_api(self, field_name: str) -> str:
        return self._field_to_api.get(field_name, field_name)

    def map_api_to_field(self, api_field_name: str) -> str:
        return self._api_to_field.get(api_field_name, api_field_name)

    @property
    def field_to_api_map(self) -> Dict[str, str]:
        return dict(self._field_to_api)

    @property
    def api_to_field_map(self) -> Dict[str, str]:
        return dict(self._api_to_field)
